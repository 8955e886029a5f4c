"""
Dependent management service.

A dependent is a member whose account is managed by the group creator
(their master user). Every operation here is creator-gated.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.accounts.services.exceptions import UserNotFoundError
from apps.groups.models import Group, GroupMembership

from .authorization import is_creator
from .exceptions import (
    GroupNotFoundError,
    NotMemberError,
    InvalidDependentError,
    DependentNotFoundError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


def _get_group_for_master(group_id: UUID, master: User, action: str) -> Group:
    try:
        group = Group.objects.select_for_update().get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not is_creator(group, master.id):
        raise InsufficientPermissionsError(f"User not authorized to {action}")

    if master.is_dependent:
        raise InvalidDependentError("A dependent cannot manage other dependents")

    return group


def _link_dependent(user: User, master: User) -> User:
    if user.id == master.id:
        raise InvalidDependentError("A user cannot be their own dependent")
    if user.is_dependent and user.master_user_id != master.id:
        raise InvalidDependentError("User is already a dependent of another user")
    if user.dependents.exists():
        raise InvalidDependentError("A user with dependents cannot become a dependent")

    user.is_dependent = True
    user.master_user = master
    user.save(update_fields=['is_dependent', 'master_user'])
    return user


@transaction.atomic
def mark_dependent(*, group_id: UUID, user_id: UUID, master: User) -> User:
    """
    Mark an existing member as a dependent of the group creator.

    Args:
        group_id: UUID of the group
        user_id: UUID of the member to mark
        master: Group creator, who becomes the master user

    Returns:
        Updated User

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If master is not the group creator
        NotMemberError: If the user is not in the group
        InvalidDependentError: If the link would break master/dependent rules
    """
    group = _get_group_for_master(group_id, master, "mark dependents")

    try:
        membership = (
            GroupMembership.objects
            .select_related('user')
            .get(group=group, user_id=user_id)
        )
    except GroupMembership.DoesNotExist:
        raise NotMemberError("Member not found in group")

    user = _link_dependent(membership.user, master)
    logger.info("User %s marked %s as dependent in group %s", master.id, user.id, group.id)
    return user


@transaction.atomic
def add_dependent(*, group_id: UUID, email: str, master: User) -> User:
    """
    Add a user to the group by email and make them a dependent of the creator.

    Adding someone who is already a member only links them.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If master is not the group creator
        UserNotFoundError: If no user has this email
        InvalidDependentError: If the link would break master/dependent rules
    """
    group = _get_group_for_master(group_id, master, "add dependents")

    try:
        user = User.objects.get(email__iexact=email)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    user = _link_dependent(user, master)
    GroupMembership.objects.get_or_create(group=group, user=user)

    logger.info("User %s added dependent %s to group %s", master.id, user.id, group.id)
    return user


@transaction.atomic
def remove_dependent(*, group_id: UUID, user_id: UUID, master: User) -> None:
    """
    Remove a dependent from the group and clear their dependent link.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If master is not the group creator
        DependentNotFoundError: If the user is not a dependent member of the group
    """
    group = _get_group_for_master(group_id, master, "remove dependents")

    try:
        membership = (
            GroupMembership.objects
            .select_related('user')
            .get(group=group, user_id=user_id, user__is_dependent=True, user__master_user=master)
        )
    except GroupMembership.DoesNotExist:
        raise DependentNotFoundError("Dependent not found in group")

    user = membership.user
    membership.delete()

    user.is_dependent = False
    user.master_user = None
    user.save(update_fields=['is_dependent', 'master_user'])

    logger.info("User %s removed dependent %s from group %s", master.id, user.id, group.id)


def list_dependents(*, group_id: UUID, requested_by: User) -> QuerySet[User]:
    """
    Dependent members of a group (creator only).

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If requested_by is not the creator
    """
    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not is_creator(group, requested_by.id):
        raise InsufficientPermissionsError("User not authorized to view dependents")

    return (
        User.objects
        .filter(group_memberships__group=group, is_dependent=True)
        .order_by('full_name')
    )
