"""
Coin ledger service.

Owns per-(user, group) balances and the append-only transaction log.
Every balance change writes a CoinTransaction in the same atomic block,
so the stored balance always equals the sum of the pair's transactions.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db.models import QuerySet, Sum

from apps.core.transactions import atomic_operation
from apps.coins.models import CoinBalance, CoinTransaction

from .exceptions import (
    InvalidAmountError,
    MissingFilterError,
    BalanceNotFoundError,
    InsufficientBalanceError,
)

logger = logging.getLogger(__name__)


def _validate_amount(amount) -> None:
    # bool is an int subclass
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError(f"Amount must be a positive integer, got {amount!r}")


def _lock_balance(user_id: UUID, group_id: UUID) -> Optional[CoinBalance]:
    return (
        CoinBalance.objects
        .select_for_update()
        .filter(user_id=user_id, group_id=group_id)
        .first()
    )


@atomic_operation
def credit(*, user_id: UUID, group_id: UUID, amount: int, description: str) -> CoinBalance:
    """
    Add coins to a user's balance in a group.

    The balance row is created at 0 on the first credit for the pair, then
    locked for the rest of the block.

    Args:
        user_id: UUID of the user
        group_id: UUID of the group
        amount: Positive number of coins
        description: Text stored on the transaction

    Returns:
        Updated CoinBalance

    Raises:
        InvalidAmountError: If amount is not a positive integer
        StorageFailureError: If the database rejects the write
    """
    _validate_amount(amount)

    CoinBalance.objects.get_or_create(user_id=user_id, group_id=group_id)
    balance = _lock_balance(user_id, group_id)

    balance.balance += amount
    balance.save(update_fields=['balance', 'updated_at'])

    CoinTransaction.objects.create(
        user_id=user_id,
        group_id=group_id,
        amount=amount,
        description=description,
    )

    logger.info(
        "Credited %s coins to user %s in group %s (balance %s)",
        amount, user_id, group_id, balance.balance
    )
    return balance


def _apply_debit(user_id: UUID, group_id: UUID, amount: int, description: str):
    _validate_amount(amount)

    balance = _lock_balance(user_id, group_id)
    current = balance.balance if balance else 0

    if current < amount:
        logger.warning(
            "Refused debit of %s from user %s in group %s (balance %s)",
            amount, user_id, group_id, current
        )
        raise InsufficientBalanceError(
            f"Insufficient balance: {current} available, {amount} required"
        )

    balance.balance -= amount
    balance.save(update_fields=['balance', 'updated_at'])

    entry = CoinTransaction.objects.create(
        user_id=user_id,
        group_id=group_id,
        amount=-amount,
        description=description,
    )

    logger.info(
        "Debited %s coins from user %s in group %s (balance %s)",
        amount, user_id, group_id, balance.balance
    )
    return balance, entry


@atomic_operation
def debit(*, user_id: UUID, group_id: UUID, amount: int, description: str) -> CoinBalance:
    """
    Remove coins from a user's balance in a group.

    Concurrent debits on the same pair serialize on the balance row lock,
    so two of them can never both pass the sufficiency check.

    Raises:
        InvalidAmountError: If amount is not a positive integer
        InsufficientBalanceError: If there is no balance or it is below amount
        StorageFailureError: If the database rejects the write
    """
    balance, _ = _apply_debit(user_id, group_id, amount, description)
    return balance


@atomic_operation
def record_debit(*, user_id: UUID, group_id: UUID, amount: int, description: str) -> CoinTransaction:
    """Same as debit(), returning the ledger entry instead of the balance."""
    _, entry = _apply_debit(user_id, group_id, amount, description)
    return entry


def get_balance(*, user_id: UUID, group_id: UUID) -> int:
    """Current balance, 0 when the pair was never credited."""
    return (
        CoinBalance.objects
        .filter(user_id=user_id, group_id=group_id)
        .values_list('balance', flat=True)
        .first()
    ) or 0


def get_balance_record(*, user_id: UUID, group_id: UUID) -> CoinBalance:
    """
    Raises:
        BalanceNotFoundError: If the user has no balance in the group
    """
    try:
        return CoinBalance.objects.select_related('group').get(user_id=user_id, group_id=group_id)
    except CoinBalance.DoesNotExist:
        raise BalanceNotFoundError("User has no coin balance in this group")


def list_balances_for_user(*, user_id: UUID) -> QuerySet[CoinBalance]:
    return CoinBalance.objects.filter(user_id=user_id).select_related('group').order_by('group__name')


def list_transactions(
    *,
    user_id: Optional[UUID] = None,
    group_id: Optional[UUID] = None
) -> QuerySet[CoinTransaction]:
    """
    Transactions filtered by user, by group, or both, newest first.

    The result is a lazy QuerySet; iterating it again re-runs the query.

    Raises:
        MissingFilterError: If neither user_id nor group_id is given
    """
    if user_id is None and group_id is None:
        raise MissingFilterError("Filter by user, group, or both")

    transactions = CoinTransaction.objects.select_related('user', 'group')
    if user_id is not None:
        transactions = transactions.filter(user_id=user_id)
    if group_id is not None:
        transactions = transactions.filter(group_id=group_id)

    return transactions.order_by('-timestamp')


def reconcile_balance(*, user_id: UUID, group_id: UUID) -> bool:
    """
    Compare the stored balance with the sum of the pair's transactions.

    Returns:
        True when they agree, False (after logging a warning) on drift
    """
    stored = get_balance(user_id=user_id, group_id=group_id)
    total = (
        CoinTransaction.objects
        .filter(user_id=user_id, group_id=group_id)
        .aggregate(total=Sum('amount'))['total']
    ) or 0

    if stored != total:
        logger.warning(
            "Balance drift for user %s in group %s: stored %s, transactions %s",
            user_id, group_id, stored, total
        )
        return False
    return True
