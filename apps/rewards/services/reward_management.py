"""
Reward catalogue service.

Rewards belong to a group; only the group creator adds or removes them.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import Group
from apps.groups.services.authorization import is_creator
from apps.groups.services.exceptions import GroupNotFoundError
from apps.rewards.models import Reward, RewardTransaction

from .exceptions import (
    InvalidRewardDataError,
    RewardNotFoundError,
    NotGroupCreatorError,
)

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 255


@transaction.atomic
def create_reward(*, group_id: UUID, created_by: User, description: str, required_coins: int) -> Reward:
    """
    Add a reward to a group's catalogue (group creator only).

    Args:
        group_id: UUID of the group
        created_by: Must be the group creator
        description: Non-empty description shown to members
        required_coins: Cost in coins (>= 0)

    Returns:
        Created Reward instance

    Raises:
        InvalidRewardDataError: If description or cost is invalid
        GroupNotFoundError: If group doesn't exist
        NotGroupCreatorError: If created_by is not the group creator
    """
    if not description or not description.strip():
        raise InvalidRewardDataError("Reward description is required")
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidRewardDataError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")
    if isinstance(required_coins, bool) or not isinstance(required_coins, int) or required_coins < 0:
        raise InvalidRewardDataError("Required coins must be a non-negative integer")

    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not is_creator(group, created_by.id):
        raise NotGroupCreatorError("Only the group creator can add rewards")

    reward = Reward.objects.create(
        group=group,
        description=description.strip(),
        required_coins=required_coins,
    )

    logger.info("User %s created reward %s in group %s", created_by.id, reward.id, group.id)
    return reward


@transaction.atomic
def delete_reward(*, reward_id: UUID, deleted_by: User) -> None:
    """
    Remove a reward (group creator only).

    Raises:
        RewardNotFoundError: If reward doesn't exist
        NotGroupCreatorError: If deleted_by is not the group creator
    """
    try:
        reward = Reward.objects.select_related('group').select_for_update().get(id=reward_id)
    except Reward.DoesNotExist:
        raise RewardNotFoundError(f"Reward with ID {reward_id} not found")

    if not is_creator(reward.group, deleted_by.id):
        raise NotGroupCreatorError("Only the group creator can delete rewards")

    reward.delete()
    logger.info("User %s deleted reward %s", deleted_by.id, reward_id)


def get_reward(*, reward_id: UUID) -> Reward:
    """
    Raises:
        RewardNotFoundError: If reward doesn't exist
    """
    try:
        return Reward.objects.select_related('group').get(id=reward_id)
    except Reward.DoesNotExist:
        raise RewardNotFoundError(f"Reward with ID {reward_id} not found")


def list_by_group(*, group_id: UUID) -> QuerySet[Reward]:
    """
    All rewards of a group, cheapest first.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return Reward.objects.filter(group_id=group_id)


def list_redeemed_by_user_in_group(*, group_id: UUID, user_id: UUID) -> QuerySet[RewardTransaction]:
    """Redemptions by a user of the group's rewards, newest first. Empty if none."""
    return (
        RewardTransaction.objects
        .filter(reward__group_id=group_id, user_id=user_id)
        .select_related('reward')
        .order_by('-timestamp')
    )
