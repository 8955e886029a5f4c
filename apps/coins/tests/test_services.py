"""
Service layer tests for the coin ledger.

Tests cover:
- Credit/debit arithmetic and transaction records
- Balance never going negative
- Atomicity on failure
- Concurrent debits on one balance
"""

import threading
from unittest.mock import patch

import pytest
from django.db import DatabaseError, IntegrityError, connection, transaction
from django.db.models import Sum
from django.test import TransactionTestCase

from apps.accounts.models import User
from apps.coins.models import CoinBalance, CoinTransaction
from apps.coins.services import (
    credit,
    debit,
    get_balance,
    get_balance_record,
    list_transactions,
    reconcile_balance,
    check_ledger_access,
    InvalidAmountError,
    MissingFilterError,
    BalanceNotFoundError,
    InsufficientBalanceError,
    LedgerAccessDeniedError,
)
from apps.core.exceptions import StorageFailureError
from apps.groups.models import Group


def transaction_sum(user, group):
    return (
        CoinTransaction.objects
        .filter(user=user, group=group)
        .aggregate(total=Sum('amount'))['total']
    ) or 0


@pytest.mark.django_db
class TestCredit:

    def test_first_credit_creates_balance(self, child, group):
        balance = credit(user_id=child.id, group_id=group.id, amount=100, description='seed')

        assert balance.balance == 100
        assert CoinBalance.objects.filter(user=child, group=group).count() == 1
        assert get_balance(user_id=child.id, group_id=group.id) == 100

    def test_credit_appends_positive_transaction(self, child, group):
        credit(user_id=child.id, group_id=group.id, amount=25, description='Chore done')

        entry = CoinTransaction.objects.get(user=child, group=group)
        assert entry.amount == 25
        assert entry.description == 'Chore done'
        assert entry.is_credit

    @pytest.mark.parametrize('amount', [0, -5, 2.5, '10', True])
    def test_rejects_non_positive_or_non_int(self, child, group, amount):
        with pytest.raises(InvalidAmountError):
            credit(user_id=child.id, group_id=group.id, amount=amount, description='bad')

        assert not CoinTransaction.objects.exists()
        assert not CoinBalance.objects.exists()

    def test_balances_are_per_group(self, parent, child, group):
        other = Group.objects.create(name='Grandparents', created_by=parent)

        credit(user_id=child.id, group_id=group.id, amount=10, description='a')
        credit(user_id=child.id, group_id=other.id, amount=3, description='b')

        assert get_balance(user_id=child.id, group_id=group.id) == 10
        assert get_balance(user_id=child.id, group_id=other.id) == 3


@pytest.mark.django_db
class TestDebit:

    def test_seed_then_spend(self, child, group):
        credit(user_id=child.id, group_id=group.id, amount=100, description='seed')
        debit(user_id=child.id, group_id=group.id, amount=40, description='spend')

        assert get_balance(user_id=child.id, group_id=group.id) == 60
        amounts = list(
            list_transactions(user_id=child.id, group_id=group.id)
            .order_by('timestamp')
            .values_list('amount', flat=True)
        )
        assert amounts == [100, -40]

    def test_debit_to_exactly_zero(self, child, group):
        credit(user_id=child.id, group_id=group.id, amount=30, description='seed')

        balance = debit(user_id=child.id, group_id=group.id, amount=30, description='all of it')

        assert balance.balance == 0

    def test_overdraw_leaves_balance_unchanged(self, child, group):
        credit(user_id=child.id, group_id=group.id, amount=30, description='seed')

        with pytest.raises(InsufficientBalanceError):
            debit(user_id=child.id, group_id=group.id, amount=31, description='too much')

        assert get_balance(user_id=child.id, group_id=group.id) == 30
        assert CoinTransaction.objects.filter(user=child).count() == 1

    def test_debit_without_balance_row(self, child, group):
        with pytest.raises(InsufficientBalanceError):
            debit(user_id=child.id, group_id=group.id, amount=1, description='nothing')

        assert not CoinBalance.objects.exists()

    def test_rejects_zero(self, child, group):
        with pytest.raises(InvalidAmountError):
            debit(user_id=child.id, group_id=group.id, amount=0, description='zero')

    def test_storage_failure_rolls_back_balance(self, child, group):
        credit(user_id=child.id, group_id=group.id, amount=50, description='seed')

        with patch.object(CoinTransaction.objects, 'create', side_effect=DatabaseError('disk full')):
            with pytest.raises(StorageFailureError):
                debit(user_id=child.id, group_id=group.id, amount=20, description='spend')

        assert get_balance(user_id=child.id, group_id=group.id) == 50
        assert reconcile_balance(user_id=child.id, group_id=group.id)

    def test_database_rejects_negative_balance(self, child, group):
        credit(user_id=child.id, group_id=group.id, amount=10, description='seed')

        with pytest.raises(IntegrityError), transaction.atomic():
            CoinBalance.objects.filter(user=child, group=group).update(balance=-1)

        assert get_balance(user_id=child.id, group_id=group.id) == 10


@pytest.mark.django_db
class TestQueries:

    def test_get_balance_defaults_to_zero(self, child, group):
        assert get_balance(user_id=child.id, group_id=group.id) == 0

    def test_get_balance_record_not_found(self, child, group):
        with pytest.raises(BalanceNotFoundError):
            get_balance_record(user_id=child.id, group_id=group.id)

    def test_list_transactions_requires_filter(self):
        with pytest.raises(MissingFilterError):
            list_transactions()

    def test_list_transactions_newest_first(self, parent, child, group):
        credit(user_id=child.id, group_id=group.id, amount=1, description='first')
        credit(user_id=child.id, group_id=group.id, amount=2, description='second')
        credit(user_id=parent.id, group_id=group.id, amount=3, description='parent')

        by_user = list_transactions(user_id=child.id)
        by_group = list_transactions(group_id=group.id)

        assert [t.description for t in by_user] == ['second', 'first']
        assert by_group.count() == 3
        # QuerySets can be iterated again
        assert [t.description for t in by_user] == ['second', 'first']

    def test_reconcile_detects_drift(self, child, group):
        credit(user_id=child.id, group_id=group.id, amount=10, description='seed')
        CoinBalance.objects.filter(user=child, group=group).update(balance=99)

        assert reconcile_balance(user_id=child.id, group_id=group.id) is False

    def test_balance_equals_transaction_sum(self, child, group):
        for amount in (5, 10, 20):
            credit(user_id=child.id, group_id=group.id, amount=amount, description='earn')
        debit(user_id=child.id, group_id=group.id, amount=12, description='spend')
        with pytest.raises(InsufficientBalanceError):
            debit(user_id=child.id, group_id=group.id, amount=100, description='spend')

        assert get_balance(user_id=child.id, group_id=group.id) == transaction_sum(child, group) == 23


@pytest.mark.django_db
class TestLedgerAccess:

    def test_self_and_master_may_read(self, parent, child, group):
        check_ledger_access(actor=child, group_id=group.id, user_id=child.id)
        check_ledger_access(actor=parent, user_id=child.id)

    def test_creator_reads_whole_group(self, parent, group):
        check_ledger_access(actor=parent, group_id=group.id)

    def test_outsider_is_denied(self, outsider, child, group):
        with pytest.raises(LedgerAccessDeniedError):
            check_ledger_access(actor=outsider, group_id=group.id, user_id=child.id)

    def test_member_cannot_read_group_history(self, child, group):
        with pytest.raises(LedgerAccessDeniedError):
            check_ledger_access(actor=child, group_id=group.id)


class TestConcurrentDebits(TransactionTestCase):
    """
    Concurrent debits on one balance.

    TransactionTestCase is required so each thread commits for real.
    Whatever the interleaving, the balance must never go negative and must
    equal the transaction sum.
    """

    def setUp(self):
        self.user = User.objects.create_user(
            email='saver@test.com',
            password='TestPass123!',
            full_name='Saver',
        )
        self.group = Group.objects.create(name='Bank', created_by=self.user)
        credit(user_id=self.user.id, group_id=self.group.id, amount=100, description='seed')

    def test_concurrent_debits_never_overdraw(self):
        results = []
        errors = []

        def spend():
            try:
                debit(user_id=self.user.id, group_id=self.group.id, amount=30, description='spend')
                results.append(30)
            except (InsufficientBalanceError, StorageFailureError) as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=spend) for _ in range(6)]

        for thread in threads:
            thread.start()

        for thread in threads:
            thread.join()

        assert len(results) + len(errors) == 6
        assert len(results) <= 3

        balance = get_balance(user_id=self.user.id, group_id=self.group.id)
        assert balance == 100 - sum(results)
        assert balance >= 0
        assert balance == transaction_sum(self.user, self.group)
