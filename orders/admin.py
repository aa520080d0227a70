from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['name', 'price', 'quantity']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_id', 'table_number', 'customer_name', 'status', 'total', 'payment_status', 'created_at']
    list_filter = ['status', 'payment_status', 'order_type']
    search_fields = ['order_id', 'table_number', 'customer_phone']
    readonly_fields = ['order_id', 'created_at', 'updated_at']
    inlines = [OrderItemInline]
