"""
Membership management service.

Handles group membership operations with concurrency protection.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.accounts.services.email_delivery import send_email, group_invite_message
from apps.accounts.services.exceptions import UserNotFoundError
from apps.groups.models import Group, GroupMembership

from .authorization import is_creator
from .exceptions import (
    GroupNotFoundError,
    AlreadyMemberError,
    NotMemberError,
    CannotRemoveCreatorError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


def _lock_group_for_creator(group_id: UUID, user: User, action: str) -> Group:
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not is_creator(group, user.id):
        raise InsufficientPermissionsError(f"User not authorized to {action}")

    return group


def _create_membership(group: Group, user: User) -> GroupMembership:
    if group.has_member(user):
        raise AlreadyMemberError("User is already a member of the group")

    try:
        with transaction.atomic():
            return GroupMembership.objects.create(user=user, group=group)
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError("User is already a member of the group")


@transaction.atomic
def add_member(*, group_id: UUID, user_id: UUID, added_by: User) -> GroupMembership:
    """
    Add an existing user to a group (creator only).

    Uses row-level locking on the group to serialize concurrent adds.

    Args:
        group_id: UUID of the group
        user_id: UUID of the user to add
        added_by: User performing the add (must be the creator)

    Returns:
        Created GroupMembership instance

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If added_by is not the creator
        UserNotFoundError: If the user doesn't exist
        AlreadyMemberError: If the user is already a member
    """
    group = _lock_group_for_creator(group_id, added_by, "add members")

    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    membership = _create_membership(group, user)
    logger.info("User %s added %s to group %s", added_by.id, user.id, group.id)
    return membership


def invite_member(*, group_id: UUID, email: str, invited_by: User) -> GroupMembership:
    """
    Add a user to a group by email and notify them (creator only).

    The notification is sent after the membership is committed.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If invited_by is not the creator
        UserNotFoundError: If no user has this email
        AlreadyMemberError: If the user is already a member
    """
    with transaction.atomic():
        group = _lock_group_for_creator(group_id, invited_by, "invite members")

        try:
            user = User.objects.get(email__iexact=email, is_active=True)
        except User.DoesNotExist:
            raise UserNotFoundError("User with the provided email not found")

        membership = _create_membership(group, user)

    send_email(
        to=user.email,
        subject=f"You were added to {group.name}",
        html_body=group_invite_message(group.name, invited_by.get_display_name()),
    )
    logger.info("User %s invited %s to group %s", invited_by.id, user.id, group.id)
    return membership


@transaction.atomic
def remove_member(
    *,
    group_id: UUID,
    user_id: UUID,
    removed_by: User
) -> None:
    """
    Remove a member from a group (creator only).

    Cannot remove the group creator. Coin balances and transactions of the
    removed member are kept.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If removed_by is not the creator
        CannotRemoveCreatorError: If trying to remove the creator
        NotMemberError: If target user is not a member
    """
    group = _lock_group_for_creator(group_id, removed_by, "remove members")

    if is_creator(group, user_id):
        raise CannotRemoveCreatorError("Cannot remove the group creator")

    try:
        membership = (
            GroupMembership.objects
            .select_for_update()
            .get(group=group, user_id=user_id)
        )
    except GroupMembership.DoesNotExist:
        raise NotMemberError("Member not found in group")

    membership.delete()
    logger.info("User %s removed %s from group %s", removed_by.id, user_id, group.id)


def get_group_members(*, group_id: UUID) -> QuerySet[GroupMembership]:
    """
    Get all members of a group.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('joined_at')
    )
