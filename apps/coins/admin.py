# ==========================================
# apps/coins/admin.py
# ==========================================

from django.contrib import admin
from apps.coins.models import CoinBalance, CoinTransaction


@admin.register(CoinBalance)
class CoinBalanceAdmin(admin.ModelAdmin):
    """Balances are changed through the ledger only."""

    list_display = ['user', 'group', 'balance', 'updated_at']
    search_fields = ['user__email', 'group__name']
    readonly_fields = ['user', 'group', 'balance', 'updated_at']
    ordering = ['group', '-balance']

    def has_add_permission(self, request):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user', 'group')


@admin.register(CoinTransaction)
class CoinTransactionAdmin(admin.ModelAdmin):
    """Read-only view of the append-only ledger."""

    list_display = ['timestamp', 'user', 'group', 'amount', 'description']
    list_filter = ['timestamp']
    search_fields = ['user__email', 'group__name', 'description']
    date_hierarchy = 'timestamp'
    ordering = ['-timestamp']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user', 'group')
