# ==========================================
# apps/challenges/admin.py
# ==========================================

from django.contrib import admin
from apps.challenges.models import Challenge, CompletedChallenge


class CompletedChallengeInline(admin.TabularInline):
    """Inline admin for completion claims."""
    model = CompletedChallenge
    extra = 0
    fields = ['user', 'completed_at', 'is_validated', 'reviewed_at']
    readonly_fields = ['user', 'completed_at', 'is_validated', 'reviewed_at']
    can_delete = False


@admin.register(Challenge)
class ChallengeAdmin(admin.ModelAdmin):
    """Admin interface for Challenges."""

    list_display = [
        'name',
        'group',
        'created_by',
        'coin_value',
        'is_daily',
        'start_date',
        'end_date',
        'created_at'
    ]
    list_filter = ['is_daily', 'created_at']
    search_fields = ['name', 'description', 'group__name', 'created_by__email']
    readonly_fields = ['created_at', 'updated_at']
    filter_horizontal = ['assigned_users']
    inlines = [CompletedChallengeInline]
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'group', 'created_by', 'coin_value')
        }),
        ('Schedule', {
            'fields': ('start_date', 'end_date', 'is_daily')
        }),
        ('Assignment', {
            'fields': ('assigned_users',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(CompletedChallenge)
class CompletedChallengeAdmin(admin.ModelAdmin):
    """Claims are reviewed through the API so coins are credited."""

    list_display = ['challenge', 'user', 'completed_at', 'is_validated', 'reviewed_at']
    list_filter = ['is_validated', 'completed_at']
    search_fields = ['challenge__name', 'user__email']
    readonly_fields = ['challenge', 'user', 'completed_at', 'is_validated', 'reviewed_at']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('challenge', 'user')
