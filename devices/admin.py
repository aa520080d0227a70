from django.contrib import admin
from .models import Device, Printer


@admin.register(Device)
class DeviceAdmin(admin.ModelAdmin):
    list_display = ['device_id', 'name', 'type', 'table', 'status', 'power_state', 'is_active']
    list_filter = ['type', 'status', 'is_active']
    search_fields = ['device_id', 'name']


@admin.register(Printer)
class PrinterAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'type', 'ip_address', 'status', 'is_active', 'last_test']
    list_filter = ['type', 'status', 'is_active']
    search_fields = ['name']
