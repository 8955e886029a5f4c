# ==========================================
# apps/coins/models.py
# ==========================================

from django.db import models
import uuid


class CoinBalance(models.Model):
    """Current coin balance of one user in one group."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='coin_balances')
    group = models.ForeignKey('groups.Group', on_delete=models.CASCADE, related_name='coin_balances')
    balance = models.IntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'coin_balances'
        constraints = [
            models.UniqueConstraint(fields=['user', 'group'], name='unique_balance_per_user_group'),
            models.CheckConstraint(condition=models.Q(balance__gte=0), name='balance_not_negative'),
        ]
    
    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.name}: {self.balance}"


class CoinTransaction(models.Model):
    """
    Append-only ledger entry.
    
    Positive amounts are credits, negative amounts debits. Rows are never
    updated after they are written.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='coin_transactions')
    group = models.ForeignKey('groups.Group', on_delete=models.CASCADE, related_name='coin_transactions')
    amount = models.IntegerField()
    description = models.CharField(max_length=255)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    
    class Meta:
        db_table = 'coin_transactions'
        constraints = [
            models.CheckConstraint(condition=~models.Q(amount=0), name='transaction_amount_not_zero'),
        ]
        indexes = [
            models.Index(fields=['user', 'group', 'timestamp']),
            models.Index(fields=['group', 'timestamp']),
        ]
        ordering = ['-timestamp']
    
    def __str__(self):
        sign = '+' if self.amount > 0 else ''
        return f"{sign}{self.amount} {self.description}"
    
    @property
    def is_credit(self):
        return self.amount > 0
