"""
Authorization predicates for groups, challenges and dependents.

Plain functions returning bool; the calling service decides which
exception to raise when a check fails.
"""

from uuid import UUID
from typing import Union

from apps.groups.models import Group, GroupMembership

UserId = Union[UUID, str]


def is_creator(group: Group, user_id: UserId) -> bool:
    """True if the user created the group."""
    return str(group.created_by_id) == str(user_id)


def is_member(group: Group, user_id: UserId) -> bool:
    """True if the user is in the group's roster. The creator always is."""
    if is_creator(group, user_id):
        return True
    return GroupMembership.objects.filter(group=group, user_id=user_id).exists()


def can_validate(challenge, user_id: UserId) -> bool:
    """Only the creator of a challenge may validate completion claims."""
    return str(challenge.created_by_id) == str(user_id)


def can_complete(challenge, user) -> bool:
    """
    A user may claim a challenge they are assigned to, or any challenge
    created by their master user.
    """
    if challenge.assigned_users.filter(id=user.id).exists():
        return True
    return user.master_user_id is not None and user.master_user_id == challenge.created_by_id


def can_act_for(actor, user) -> bool:
    """A user acts for themselves; a master also acts for their dependents."""
    return actor.id == user.id or user.is_dependent_of(actor)
