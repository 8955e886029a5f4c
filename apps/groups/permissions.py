"""
Custom permission classes for group-scoped resources.

Challenges and rewards belong to a group; reading them requires
membership in that group.

Usage:
    class RewardViewSet(viewsets.ViewSet):
        permission_classes = [IsAuthenticated, IsGroupMember]

        def retrieve(self, request, pk=None):
            reward = get_reward(reward_id=pk)
            self.check_object_permissions(request, reward)
            ...
"""

from rest_framework.permissions import BasePermission

from apps.groups.models import Group
from apps.groups.services.authorization import is_member


class IsGroupMember(BasePermission):
    """
    Permission: User must be a member of the group.

    The object is either a Group or anything with a `group` attribute
    (Challenge, Reward).
    """

    message = 'You must be a member of this group.'

    def has_object_permission(self, request, view, obj):
        group = obj if isinstance(obj, Group) else obj.group
        return is_member(group, request.user.id)
