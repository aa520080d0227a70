from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['id', 'username', 'email', 'role', 'is_active', 'last_login']
    list_filter = ['role', 'is_active']
    search_fields = ['username', 'email', 'name']
    readonly_fields = ['password', 'last_login', 'created_at', 'updated_at']
