# ==========================================
# apps/rewards/models.py
# ==========================================

from django.db import models
import uuid


class Reward(models.Model):
    """Something group members can buy with coins."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey('groups.Group', on_delete=models.CASCADE, related_name='rewards')
    description = models.CharField(max_length=255)
    required_coins = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'rewards'
        indexes = [
            models.Index(fields=['group', 'required_coins']),
        ]
        ordering = ['required_coins', 'description']
    
    def __str__(self):
        return f"{self.description} ({self.required_coins} coins)"


class RewardTransaction(models.Model):
    """One redemption of a reward by a user."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='reward_transactions')
    reward = models.ForeignKey(Reward, on_delete=models.CASCADE, related_name='redemptions')
    # Null for rewards that cost nothing
    coin_transaction = models.OneToOneField(
        'coins.CoinTransaction',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='redemption'
    )
    timestamp = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'reward_transactions'
        indexes = [
            models.Index(fields=['user', 'timestamp']),
        ]
        ordering = ['-timestamp']
    
    def __str__(self):
        return f"{self.user.get_display_name()} redeemed {self.reward.description}"
