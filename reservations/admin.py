from django.contrib import admin
from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ['reservation_id', 'customer_name', 'table_type', 'reservation_date', 'reservation_time', 'status']
    list_filter = ['status', 'table_type', 'reservation_date']
    search_fields = ['reservation_id', 'customer_name', 'customer_phone']
    readonly_fields = ['reservation_id', 'created_at', 'updated_at']
