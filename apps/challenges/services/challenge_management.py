"""
Challenge management service.

CRUD and assignment for challenges. Only the creator of a challenge may
change it; any group member may create one.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.accounts.services.exceptions import UserNotFoundError
from apps.challenges.models import Challenge
from apps.groups.models import Group, GroupMembership
from apps.groups.services.authorization import is_member
from apps.groups.services.exceptions import GroupNotFoundError, NotMemberError

from .exceptions import (
    InvalidChallengeDataError,
    ChallengeNotFoundError,
    NotChallengeCreatorError,
)

logger = logging.getLogger(__name__)

# Marks a date argument that was not given, since None clears the date
UNSET = object()

MAX_NAME_LENGTH = 200


def _validate_challenge_fields(
    name: Optional[str],
    coin_value: Optional[int],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
) -> None:
    if name is not None:
        if not name.strip():
            raise InvalidChallengeDataError("Challenge name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidChallengeDataError(f"Challenge name must be at most {MAX_NAME_LENGTH} characters")

    if coin_value is not None:
        if isinstance(coin_value, bool) or not isinstance(coin_value, int) or coin_value <= 0:
            raise InvalidChallengeDataError("Coin value must be greater than zero")

    if start_date and end_date and start_date >= end_date:
        raise InvalidChallengeDataError("Start date must be before end date")


def _get_challenge_for_creator(challenge_id: UUID, user: User, action: str) -> Challenge:
    try:
        challenge = (
            Challenge.objects
            .select_for_update()
            .get(id=challenge_id)
        )
    except Challenge.DoesNotExist:
        raise ChallengeNotFoundError(f"Challenge with ID {challenge_id} not found")

    if challenge.created_by_id != user.id:
        raise NotChallengeCreatorError(f"User not authorized to {action} this challenge")

    return challenge


def _add_assignees(challenge: Challenge, user_ids: Iterable[UUID]) -> int:
    """Add members of the challenge's group; return how many were new."""
    user_ids = list(dict.fromkeys(user_ids))
    users = list(User.objects.filter(id__in=user_ids))

    if len(users) != len(user_ids):
        found = {str(u.id) for u in users}
        missing = [str(uid) for uid in user_ids if str(uid) not in found]
        raise UserNotFoundError(f"Users not found: {', '.join(missing)}")

    member_ids = set(
        GroupMembership.objects
        .filter(group_id=challenge.group_id, user_id__in=user_ids)
        .values_list('user_id', flat=True)
    )
    member_ids.add(challenge.group.created_by_id)
    outsiders = [u for u in users if u.id not in member_ids]
    if outsiders:
        raise NotMemberError(
            f"Users are not members of the group: {', '.join(u.email for u in outsiders)}"
        )

    already = set(challenge.assigned_users.values_list('id', flat=True))
    new_users = [u for u in users if u.id not in already]
    if new_users:
        challenge.assigned_users.add(*new_users)
    return len(new_users)


@transaction.atomic
def create_challenge(
    *,
    group_id: UUID,
    created_by: User,
    name: str,
    coin_value: int,
    description: str = '',
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    is_daily: bool = False,
    assigned_user_ids: Optional[Iterable[UUID]] = None
) -> Challenge:
    """
    Create a challenge in a group.

    Args:
        group_id: UUID of the group the challenge belongs to
        created_by: Group member creating the challenge
        name: Non-empty challenge name
        coin_value: Coins credited when a claim is validated (> 0)
        description: Optional description
        start_date: Optional start of the challenge
        end_date: Optional end of the challenge (after start_date)
        is_daily: Whether the challenge repeats daily
        assigned_user_ids: Optional members to assign right away

    Returns:
        Created Challenge instance

    Raises:
        InvalidChallengeDataError: If name, coin value or dates are invalid
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If created_by or an assignee is not a group member
        UserNotFoundError: If an assignee doesn't exist
    """
    _validate_challenge_fields(name, coin_value, start_date, end_date)

    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not is_member(group, created_by.id):
        raise NotMemberError("Only group members can create challenges")

    challenge = Challenge.objects.create(
        group=group,
        created_by=created_by,
        name=name.strip(),
        description=description,
        coin_value=coin_value,
        start_date=start_date,
        end_date=end_date,
        is_daily=is_daily,
    )

    if assigned_user_ids:
        _add_assignees(challenge, assigned_user_ids)

    logger.info("User %s created challenge %s in group %s", created_by.id, challenge.id, group.id)
    return challenge


@transaction.atomic
def update_challenge(
    *,
    challenge_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    coin_value: Optional[int] = None,
    start_date: Optional[datetime] = UNSET,
    end_date: Optional[datetime] = UNSET,
    is_daily: Optional[bool] = None
) -> Challenge:
    """
    Update a challenge (creator only).

    Fields left as None keep their current value. The dates are different:
    omit them to keep them, pass None to clear them. Changing coin_value
    does not touch coins already credited.

    Raises:
        ChallengeNotFoundError: If challenge doesn't exist
        NotChallengeCreatorError: If user is not the creator
        InvalidChallengeDataError: If the resulting fields are invalid
    """
    challenge = _get_challenge_for_creator(challenge_id, user, "update")

    new_start = challenge.start_date if start_date is UNSET else start_date
    new_end = challenge.end_date if end_date is UNSET else end_date
    _validate_challenge_fields(name, coin_value, new_start, new_end)

    update_fields = ['updated_at']
    for field, value in (
        ('name', name.strip() if name is not None else None),
        ('description', description),
        ('coin_value', coin_value),
        ('is_daily', is_daily),
    ):
        if value is not None:
            setattr(challenge, field, value)
            update_fields.append(field)

    for field, value in (('start_date', start_date), ('end_date', end_date)):
        if value is not UNSET:
            setattr(challenge, field, value)
            update_fields.append(field)

    challenge.save(update_fields=update_fields)
    return challenge


@transaction.atomic
def delete_challenge(*, challenge_id: UUID, user: User) -> None:
    """
    Delete a challenge (creator only). Its claims are removed with it;
    coins already credited stay in the ledger.

    Raises:
        ChallengeNotFoundError: If challenge doesn't exist
        NotChallengeCreatorError: If user is not the creator
    """
    challenge = _get_challenge_for_creator(challenge_id, user, "delete")
    challenge.delete()
    logger.info("User %s deleted challenge %s", user.id, challenge_id)


@transaction.atomic
def assign_users(*, challenge_id: UUID, user_ids: Iterable[UUID], assigned_by: User) -> Challenge:
    """
    Assign group members to a challenge.

    Idempotent: users already assigned are skipped.

    Raises:
        ChallengeNotFoundError: If challenge doesn't exist
        NotChallengeCreatorError: If assigned_by is not the creator
        UserNotFoundError: If any user id is unknown
        NotMemberError: If any user is outside the challenge's group
    """
    challenge = _get_challenge_for_creator(challenge_id, assigned_by, "assign users to")

    added = _add_assignees(challenge, user_ids)
    logger.info("Assigned %s new users to challenge %s", added, challenge.id)
    return challenge


def get_challenge(*, challenge_id: UUID) -> Challenge:
    """
    Raises:
        ChallengeNotFoundError: If challenge doesn't exist
    """
    try:
        return (
            Challenge.objects
            .select_related('group', 'created_by')
            .prefetch_related('assigned_users')
            .get(id=challenge_id)
        )
    except Challenge.DoesNotExist:
        raise ChallengeNotFoundError(f"Challenge with ID {challenge_id} not found")


def list_challenges_created_by(*, user_id: UUID) -> QuerySet[Challenge]:
    return Challenge.objects.filter(created_by_id=user_id).select_related('group')


def list_challenges_assigned_to(*, user_id: UUID) -> QuerySet[Challenge]:
    return (
        Challenge.objects
        .filter(assigned_users__id=user_id)
        .select_related('group')
        .distinct()
    )


def list_group_challenges(*, group_id: UUID) -> QuerySet[Challenge]:
    """
    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return (
        Challenge.objects
        .filter(group_id=group_id)
        .select_related('created_by')
        .prefetch_related('assigned_users')
    )
