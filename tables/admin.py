from django.contrib import admin
from .models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ['id', 'table_number', 'name', 'type', 'status', 'hourly_rate', 'is_active']
    list_filter = ['type', 'status', 'is_active']
    search_fields = ['table_number', 'name']
