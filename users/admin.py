# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import Role, User


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ['name', 'display_name', 'updated_at']
    search_fields = ['name', 'display_name']


@admin.register(User)
class ClinicUserAdmin(UserAdmin):
    list_display = ['username', 'first_name', 'last_name', 'role', 'clinic', 'is_active']
    list_filter = ['role', 'clinic', 'is_active', 'is_superuser']
    fieldsets = UserAdmin.fieldsets + (
        ('Clinic access', {'fields': ('role', 'clinic')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Clinic access', {'fields': ('role', 'clinic')}),
    )
