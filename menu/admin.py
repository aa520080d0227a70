from django.contrib import admin
from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'category', 'subcategory', 'price', 'printer', 'is_available']
    search_fields = ['name']
    list_filter = ['category', 'printer', 'is_available']
