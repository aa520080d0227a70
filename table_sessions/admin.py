from django.contrib import admin
from .models import Session


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ['session_id', 'table_number', 'customer_name', 'status', 'start_time', 'total', 'payment_status']
    list_filter = ['status', 'payment_status']
    search_fields = ['session_id', 'table_number', 'customer_phone']
    readonly_fields = ['session_id', 'start_time', 'end_time', 'created_at', 'updated_at']
