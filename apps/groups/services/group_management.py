"""
Group management service.

Handles group CRUD operations with proper transaction safety.
"""

import logging
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import Prefetch, QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership

from .authorization import is_creator
from .exceptions import (
    GroupNotFoundError,
    InvalidGroupDataError,
    DuplicateGroupNameError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_PHOTO_URL_LENGTH = 200


def _validate_group_fields(name: Optional[str], photo_url: Optional[str]) -> None:
    if name is not None:
        if not name.strip():
            raise InvalidGroupDataError("Group name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidGroupDataError(f"Group name must be at most {MAX_NAME_LENGTH} characters")
    if photo_url is not None and len(photo_url) > MAX_PHOTO_URL_LENGTH:
        raise InvalidGroupDataError(f"Photo URL must be at most {MAX_PHOTO_URL_LENGTH} characters")


def create_group(
    *,
    name: str,
    created_by: User,
    description: str = '',
    photo_url: Optional[str] = None,
    has_unique_rewards: bool = False
) -> Group:
    """
    Create a new group and add the creator as its first member.

    This is a multi-step operation wrapped in a transaction:
    1. Create the group
    2. Create the creator's membership

    Args:
        name: Group name (unique per creator)
        created_by: User who creates and manages the group
        description: Optional group description
        photo_url: Optional photo URL (defaults to the stock group photo)
        has_unique_rewards: Whether rewards are specific to this group

    Returns:
        Created Group instance

    Raises:
        InvalidGroupDataError: If name or photo URL is invalid
        DuplicateGroupNameError: If the creator already has a group with this name
    """
    _validate_group_fields(name, photo_url)

    if Group.objects.filter(created_by=created_by, name=name).exists():
        raise DuplicateGroupNameError("A group with the same name already exists")

    try:
        with transaction.atomic():
            group = Group.objects.create(
                name=name,
                created_by=created_by,
                description=description,
                photo_url=photo_url or settings.DEFAULT_GROUP_PHOTO_URL,
                has_unique_rewards=has_unique_rewards,
            )

            GroupMembership.objects.create(user=created_by, group=group)
    except IntegrityError:
        raise DuplicateGroupNameError("A group with the same name already exists")

    logger.info("User %s created group %s", created_by.id, group.id)
    return group


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with its roster, challenges and rewards prefetched.

    Args:
        group_id: UUID of the group

    Returns:
        Group instance

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return (
            Group.objects
            .select_related('created_by')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=GroupMembership.objects.select_related('user')
                ),
                'challenges',
                'rewards',
            )
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def list_groups_created_by(*, user_id: UUID) -> QuerySet[Group]:
    return Group.objects.filter(created_by_id=user_id).select_related('created_by')


def list_groups_for_user(*, user: User) -> QuerySet[Group]:
    """Groups where the user has a membership row."""
    return (
        Group.objects
        .filter(memberships__user=user)
        .select_related('created_by')
        .distinct()
    )


@transaction.atomic
def update_group(
    *,
    group_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    photo_url: Optional[str] = None,
    has_unique_rewards: Optional[bool] = None
) -> Group:
    """
    Update group details (creator only).

    Uses select_for_update to prevent concurrent modifications.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the creator
        InvalidGroupDataError: If name or photo URL is invalid
        DuplicateGroupNameError: If the creator has another group with the new name
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not is_creator(group, user.id):
        raise InsufficientPermissionsError("User not authorized to edit this group")

    _validate_group_fields(name, photo_url)

    update_fields = ['updated_at']

    if name is not None and name != group.name:
        duplicate = (
            Group.objects
            .filter(created_by=user, name=name)
            .exclude(id=group.id)
            .exists()
        )
        if duplicate:
            raise DuplicateGroupNameError("A group with the same name already exists")
        group.name = name
        update_fields.append('name')

    if description is not None:
        group.description = description
        update_fields.append('description')

    if photo_url is not None:
        group.photo_url = photo_url
        update_fields.append('photo_url')

    if has_unique_rewards is not None:
        group.has_unique_rewards = has_unique_rewards
        update_fields.append('has_unique_rewards')

    group.save(update_fields=update_fields)

    return group


@transaction.atomic
def delete_group(*, group_id: UUID, user: User) -> None:
    """
    Delete a group (creator only).

    Cascading deletes remove memberships, challenges, rewards, balances
    and the group's coin transactions.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the creator
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not is_creator(group, user.id):
        raise InsufficientPermissionsError("User not authorized to delete this group")

    group.delete()
    logger.info("User %s deleted group %s", user.id, group_id)
