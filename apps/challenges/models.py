# ==========================================
# apps/challenges/models.py
# ==========================================

from django.db import models
import uuid


class Challenge(models.Model):
    """A task members of a group can complete for coins."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey('groups.Group', on_delete=models.CASCADE, related_name='challenges')
    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='created_challenges')
    
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    coin_value = models.PositiveIntegerField()
    
    # Optional availability window
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    is_daily = models.BooleanField(default=False)
    
    assigned_users = models.ManyToManyField(
        'accounts.User',
        related_name='assigned_challenges',
        blank=True
    )
    
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'challenges'
        constraints = [
            models.CheckConstraint(condition=models.Q(coin_value__gt=0), name='challenge_coin_value_positive'),
            models.CheckConstraint(
                condition=(
                    models.Q(start_date__isnull=True)
                    | models.Q(end_date__isnull=True)
                    | models.Q(start_date__lt=models.F('end_date'))
                ),
                name='challenge_start_before_end',
            ),
        ]
        indexes = [
            models.Index(fields=['group', 'created_at']),
            models.Index(fields=['created_by']),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.name} ({self.coin_value} coins)"


class CompletedChallenge(models.Model):
    """
    A user's claim of having finished a challenge.
    
    Created unvalidated; the challenge creator reviews it once.
    `reviewed_at` stays null until then.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    challenge = models.ForeignKey(Challenge, on_delete=models.CASCADE, related_name='completions')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='completed_challenges')
    completed_at = models.DateTimeField(auto_now_add=True)
    is_validated = models.BooleanField(default=False)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    
    class Meta:
        db_table = 'completed_challenges'
        constraints = [
            models.UniqueConstraint(fields=['challenge', 'user'], name='unique_completion_per_user'),
        ]
        indexes = [
            models.Index(fields=['challenge', 'is_validated']),
            models.Index(fields=['user', 'completed_at']),
        ]
        ordering = ['-completed_at']
    
    def __str__(self):
        state = 'validated' if self.is_validated else ('rejected' if self.reviewed_at else 'pending')
        return f"{self.user.get_display_name()} - {self.challenge.name} ({state})"
    
    @property
    def is_pending(self):
        return self.reviewed_at is None
