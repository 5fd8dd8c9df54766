from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, AuditLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'name', 'role', 'phone_number', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'created_at']
    search_fields = ['username', 'name', 'phone_number']
    ordering = ['username']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Panel Profile', {'fields': ('name', 'role', 'phone_number', 'address')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Panel Profile', {'fields': ('name', 'role', 'phone_number', 'address')}),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['username', 'action', 'resource', 'resource_id', 'success', 'severity', 'ip_address', 'created_at']
    list_filter = ['action', 'resource', 'success', 'severity', 'created_at']
    search_fields = ['username', 'resource_id', 'object_name']
    ordering = ['-created_at']
    readonly_fields = [
        'user', 'username', 'action', 'resource', 'resource_id', 'object_name', 'changes',
        'ip_address', 'user_agent', 'success', 'severity', 'created_at'
    ]
