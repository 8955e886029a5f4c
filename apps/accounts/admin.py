# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User


class DependentInline(admin.TabularInline):
    """Dependents managed by this user."""
    model = User
    fk_name = 'master_user'
    extra = 0
    fields = ['email', 'full_name', 'is_active']
    readonly_fields = ['email', 'full_name']
    show_change_link = True


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom admin interface for User model.

    Lists master and dependent accounts, with the dependents of a
    master shown inline.
    """

    list_display = [
        'email',
        'full_name',
        'account_badge',
        'is_active',
        'master_user',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'is_active',
        'is_staff',
        'is_dependent',
        'created_at',
    ]

    search_fields = [
        'email',
        'full_name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    raw_id_fields = ['master_user']
    inlines = [DependentInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'full_name', 'password', 'profile_photo')
        }),
        ('Dependents', {
            'fields': ('is_dependent', 'master_user'),
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
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'full_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'created_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def account_badge(self, obj):
        if obj.is_dependent:
            return format_html(
                '<span style="background: #E5C49A; color: #2C1810; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Dependent</span>'
            )
        return format_html(
            '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Master</span>'
        )
    account_badge.short_description = 'Account'
    account_badge.admin_order_field = 'is_dependent'

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users, skipping superusers."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        self.message_user(request, f'Deactivated {count} user(s).')

    actions = ['activate_users', 'deactivate_users']
