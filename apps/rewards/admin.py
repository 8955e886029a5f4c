# ==========================================
# apps/rewards/admin.py
# ==========================================

from django.contrib import admin
from apps.rewards.models import Reward, RewardTransaction


@admin.register(Reward)
class RewardAdmin(admin.ModelAdmin):
    """Admin interface for Rewards."""

    list_display = ['description', 'group', 'required_coins', 'created_at']
    list_filter = ['created_at']
    search_fields = ['description', 'group__name']
    readonly_fields = ['created_at']


@admin.register(RewardTransaction)
class RewardTransactionAdmin(admin.ModelAdmin):
    """Redemptions are created through the API so the ledger stays in step."""

    list_display = ['reward', 'user', 'coin_transaction', 'timestamp']
    list_filter = ['timestamp']
    search_fields = ['reward__description', 'user__email']
    readonly_fields = ['user', 'reward', 'coin_transaction', 'timestamp']
    date_hierarchy = 'timestamp'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('reward', 'user', 'coin_transaction')
