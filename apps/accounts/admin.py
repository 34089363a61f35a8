# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for library owner accounts."""

    list_display = [
        'email',
        'display_name',
        'library_name',
        'student_count',
        'is_active',
        'is_staff',
        'created_at',
        'last_login',
    ]

    list_filter = ['is_active', 'is_staff', 'is_superuser', 'created_at']
    search_fields = ['email', 'display_name', 'library_name']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    # Remove username field references from BaseUserAdmin
    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'library_name', 'password')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create Owner', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'library_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = ['groups', 'user_permissions']

    def student_count(self, obj):
        """Show number of students on record."""
        return obj.students.count()
    student_count.short_description = 'Students'

    @admin.action(description='Deactivate selected owners')
    def deactivate_users(self, request, queryset):
        """Deactivate selected owners (excludes superusers)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        self.message_user(request, f'Deactivated {count} owner(s).')

    actions = ['deactivate_users']
