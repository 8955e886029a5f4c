"""
Reward redemption service.

A redemption debits the reward's cost through the coin ledger and records
a RewardTransaction pointing at the ledger entry. Both happen in one
atomic block; if either fails the balance is unchanged.
"""

import logging
from typing import Optional
from uuid import UUID

from apps.accounts.models import User
from apps.accounts.services.exceptions import UserNotFoundError
from apps.coins.services import record_debit, get_balance_record, InsufficientBalanceError
from apps.core.transactions import atomic_operation
from apps.groups.services.authorization import can_act_for, is_member
from apps.groups.services.exceptions import NotMemberError
from apps.rewards.models import Reward, RewardTransaction

from .exceptions import RewardNotFoundError, CannotRedeemForUserError

logger = logging.getLogger(__name__)


@atomic_operation
def redeem(
    *,
    reward_id: UUID,
    user_id: UUID,
    acting_user: Optional[User] = None
) -> RewardTransaction:
    """
    Spend a user's coins on a reward.

    Args:
        reward_id: UUID of the reward
        user_id: UUID of the user paying
        acting_user: Caller, when it may differ from the payer (a master
            redeeming for a dependent)

    Returns:
        Created RewardTransaction

    Raises:
        RewardNotFoundError: If reward doesn't exist
        UserNotFoundError: If user doesn't exist
        CannotRedeemForUserError: If acting_user may not act for the user
        NotMemberError: If the user is not in the reward's group
        BalanceNotFoundError: If the user has no balance in the group
        InsufficientBalanceError: If the balance is below the reward's cost
    """
    try:
        reward = Reward.objects.select_related('group').get(id=reward_id)
    except Reward.DoesNotExist:
        raise RewardNotFoundError(f"Reward with ID {reward_id} not found")

    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    if acting_user is not None and not can_act_for(acting_user, user):
        raise CannotRedeemForUserError("User not authorized to redeem for this user")

    if not is_member(reward.group, user.id):
        raise NotMemberError("User is not a member of the reward's group")

    balance = get_balance_record(user_id=user.id, group_id=reward.group_id)
    if balance.balance < reward.required_coins:
        logger.warning(
            "User %s cannot afford reward %s (%s < %s)",
            user.id, reward.id, balance.balance, reward.required_coins
        )
        raise InsufficientBalanceError(
            f"Insufficient balance: {balance.balance} available, {reward.required_coins} required"
        )

    coin_transaction = None
    if reward.required_coins > 0:
        coin_transaction = record_debit(
            user_id=user.id,
            group_id=reward.group_id,
            amount=reward.required_coins,
            description=f"Reward redeemed: {reward.description}",
        )

    redemption = RewardTransaction.objects.create(
        user=user,
        reward=reward,
        coin_transaction=coin_transaction,
    )

    logger.info("User %s redeemed reward %s", user.id, reward.id)
    return redemption
