# ==========================================
# apps/groups/models.py
# ==========================================

from django.conf import settings
from django.db import models
import uuid


def default_group_photo():
    return settings.DEFAULT_GROUP_PHOTO_URL


class Group(models.Model):
    """Household/family group that owns challenges, rewards and balances."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    photo_url = models.CharField(max_length=200, default=default_group_photo)
    has_unique_rewards = models.BooleanField(default=False)
    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='created_groups')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'groups'
        constraints = [
            models.UniqueConstraint(fields=['created_by', 'name'], name='unique_group_name_per_creator'),
        ]
        indexes = [
            models.Index(fields=['created_by', 'created_at']),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return self.name
    
    def has_member(self, user):
        return self.memberships.filter(user=user).exists()
    
    def is_creator(self, user):
        return self.created_by_id == user.id


class GroupMembership(models.Model):
    """Explicit (group, user) membership row."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='memberships')
    joined_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'group_memberships'
        unique_together = [['user', 'group']]
        indexes = [
            models.Index(fields=['user', 'joined_at']),
        ]
        ordering = ['joined_at']
    
    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.name}"
