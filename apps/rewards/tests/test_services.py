"""
Service layer tests for rewards.

Tests cover:
- Creator-only catalogue management
- Redemption affordability and the matching ledger debit
- Redeeming on behalf of a dependent
- Rollback when a redemption cannot be recorded
"""

import uuid
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from apps.accounts.services.exceptions import UserNotFoundError
from apps.challenges.models import Challenge
from apps.challenges.services import mark_completed, validate_completion
from apps.coins.models import CoinTransaction
from apps.coins.services import (
    credit,
    get_balance,
    BalanceNotFoundError,
    InsufficientBalanceError,
)
from apps.core.exceptions import StorageFailureError, UnauthorizedError
from apps.groups.models import Group
from apps.groups.services.exceptions import GroupNotFoundError, NotMemberError
from apps.rewards.models import Reward, RewardTransaction
from apps.rewards.services import (
    create_reward,
    delete_reward,
    get_reward,
    list_by_group,
    list_redeemed_by_user_in_group,
    redeem,
    InvalidRewardDataError,
    RewardNotFoundError,
    NotGroupCreatorError,
    CannotRedeemForUserError,
)


# =============================================================================
# Catalogue
# =============================================================================

@pytest.mark.django_db
class TestCreateReward:

    def test_create_success(self, creator, group):
        reward = create_reward(
            group_id=group.id,
            created_by=creator,
            description=' Movie night ',
            required_coins=100
        )

        assert reward.group == group
        assert reward.description == 'Movie night'
        assert reward.required_coins == 100

    def test_free_reward_allowed(self, creator, group):
        reward = create_reward(group_id=group.id, created_by=creator, description='Hug', required_coins=0)
        assert reward.required_coins == 0

    def test_non_creator_rejected(self, member, group):
        with pytest.raises(NotGroupCreatorError):
            create_reward(group_id=group.id, created_by=member, description='Sweets', required_coins=5)

        assert not Reward.objects.filter(group=group).exists()

    @pytest.mark.parametrize('description,required_coins', [
        ('', 10),
        ('   ', 10),
        ('x' * 256, 10),
        ('Sweets', -1),
        ('Sweets', True),
        ('Sweets', '10'),
    ])
    def test_invalid_data(self, creator, group, description, required_coins):
        with pytest.raises(InvalidRewardDataError):
            create_reward(
                group_id=group.id,
                created_by=creator,
                description=description,
                required_coins=required_coins
            )

    def test_unknown_group(self, creator):
        with pytest.raises(GroupNotFoundError):
            create_reward(group_id=uuid.uuid4(), created_by=creator, description='Sweets', required_coins=5)


@pytest.mark.django_db
class TestDeleteReward:

    def test_creator_deletes(self, creator, reward):
        delete_reward(reward_id=reward.id, deleted_by=creator)
        assert not Reward.objects.filter(id=reward.id).exists()

    def test_non_creator_rejected(self, member, reward):
        with pytest.raises(NotGroupCreatorError):
            delete_reward(reward_id=reward.id, deleted_by=member)

        assert Reward.objects.filter(id=reward.id).exists()

    def test_not_found(self, creator):
        with pytest.raises(RewardNotFoundError):
            delete_reward(reward_id=uuid.uuid4(), deleted_by=creator)

    def test_deleting_reward_removes_its_redemptions(self, creator, funded_member, reward):
        redeem(reward_id=reward.id, user_id=funded_member.id)

        delete_reward(reward_id=reward.id, deleted_by=creator)

        assert not RewardTransaction.objects.filter(user=funded_member).exists()


@pytest.mark.django_db
class TestRewardQueries:

    def test_get_reward(self, reward):
        assert get_reward(reward_id=reward.id) == reward

    def test_get_reward_not_found(self):
        with pytest.raises(RewardNotFoundError):
            get_reward(reward_id=uuid.uuid4())

    def test_list_by_group_cheapest_first(self, group, reward, free_reward):
        assert list(list_by_group(group_id=group.id)) == [free_reward, reward]

    def test_list_by_group_excludes_other_groups(self, creator, group, reward):
        other = Group.objects.create(name='Other', created_by=creator)
        Reward.objects.create(group=other, description='Elsewhere', required_coins=1)

        assert list(list_by_group(group_id=group.id)) == [reward]

    def test_list_by_group_unknown(self):
        with pytest.raises(GroupNotFoundError):
            list_by_group(group_id=uuid.uuid4())

    def test_redeemed_empty(self, member, group):
        redeemed = list_redeemed_by_user_in_group(group_id=group.id, user_id=member.id)
        assert list(redeemed) == []

    def test_redeemed_lists_only_that_user_and_group(self, creator, funded_member, group, free_reward):
        credit(user_id=creator.id, group_id=group.id, amount=10, description='Seed')
        mine = redeem(reward_id=free_reward.id, user_id=funded_member.id)
        redeem(reward_id=free_reward.id, user_id=creator.id)

        redeemed = list_redeemed_by_user_in_group(group_id=group.id, user_id=funded_member.id)
        assert list(redeemed) == [mine]


# =============================================================================
# Redemption
# =============================================================================

@pytest.mark.django_db
class TestRedeem:

    def test_exact_balance_leaves_zero(self, funded_member, group, reward):
        redemption = redeem(reward_id=reward.id, user_id=funded_member.id)

        assert redemption.user == funded_member
        assert redemption.reward == reward
        assert get_balance(user_id=funded_member.id, group_id=group.id) == 0

    def test_debit_recorded_and_linked(self, funded_member, group, reward):
        redemption = redeem(reward_id=reward.id, user_id=funded_member.id)

        entry = redemption.coin_transaction
        assert entry.amount == -50
        assert entry.description == 'Reward redeemed: Ice cream'
        assert entry.user == funded_member
        assert entry.group == group

    def test_one_short_is_refused(self, member, group):
        credit(user_id=member.id, group_id=group.id, amount=49, description='Seed')
        reward = Reward.objects.create(group=group, description='Ice cream', required_coins=50)

        with pytest.raises(InsufficientBalanceError):
            redeem(reward_id=reward.id, user_id=member.id)

        assert get_balance(user_id=member.id, group_id=group.id) == 49
        assert not RewardTransaction.objects.exists()

    def test_expensive_reward_refused(self, funded_member, group):
        reward = Reward.objects.create(group=group, description='Bike', required_coins=200)

        with pytest.raises(InsufficientBalanceError):
            redeem(reward_id=reward.id, user_id=funded_member.id)

        assert get_balance(user_id=funded_member.id, group_id=group.id) == 50
        assert CoinTransaction.objects.filter(amount__lt=0).count() == 0

    def test_no_balance_row(self, member, reward):
        with pytest.raises(BalanceNotFoundError):
            redeem(reward_id=reward.id, user_id=member.id)

    def test_outsider_not_member(self, outsider, group, reward):
        credit(user_id=outsider.id, group_id=group.id, amount=100, description='Stray')

        with pytest.raises(NotMemberError):
            redeem(reward_id=reward.id, user_id=outsider.id)

    def test_reward_not_found(self, funded_member):
        with pytest.raises(RewardNotFoundError):
            redeem(reward_id=uuid.uuid4(), user_id=funded_member.id)

    def test_user_not_found(self, reward):
        with pytest.raises(UserNotFoundError):
            redeem(reward_id=reward.id, user_id=uuid.uuid4())

    def test_free_reward_writes_no_debit(self, funded_member, group, free_reward):
        redemption = redeem(reward_id=free_reward.id, user_id=funded_member.id)

        assert redemption.coin_transaction is None
        assert get_balance(user_id=funded_member.id, group_id=group.id) == 50
        assert CoinTransaction.objects.filter(amount__lt=0).count() == 0

    def test_repeat_redemptions_allowed_while_affordable(self, member, group, reward):
        credit(user_id=member.id, group_id=group.id, amount=120, description='Seed')

        redeem(reward_id=reward.id, user_id=member.id)
        redeem(reward_id=reward.id, user_id=member.id)

        assert get_balance(user_id=member.id, group_id=group.id) == 20
        with pytest.raises(InsufficientBalanceError):
            redeem(reward_id=reward.id, user_id=member.id)

    def test_master_redeems_for_dependent(self, creator, dependent, group, reward):
        credit(user_id=dependent.id, group_id=group.id, amount=60, description='Seed')

        redemption = redeem(reward_id=reward.id, user_id=dependent.id, acting_user=creator)

        assert redemption.user == dependent
        assert get_balance(user_id=dependent.id, group_id=group.id) == 10

    def test_cannot_redeem_for_unrelated_user(self, creator, funded_member, reward):
        with pytest.raises(CannotRedeemForUserError) as exc_info:
            redeem(reward_id=reward.id, user_id=funded_member.id, acting_user=creator)

        assert isinstance(exc_info.value, UnauthorizedError)
        assert get_balance(user_id=funded_member.id, group_id=reward.group_id) == 50

    def test_rolls_back_when_redemption_cannot_be_saved(self, funded_member, group, reward):
        with patch.object(RewardTransaction.objects, 'create', side_effect=DatabaseError('boom')):
            with pytest.raises(StorageFailureError):
                redeem(reward_id=reward.id, user_id=funded_member.id)

        assert get_balance(user_id=funded_member.id, group_id=group.id) == 50
        assert CoinTransaction.objects.filter(amount__lt=0).count() == 0


@pytest.mark.django_db
class TestChallengeToRewardFlow:

    def test_earn_then_spend(self, creator, member, group, reward):
        challenge = Challenge.objects.create(
            group=group,
            created_by=creator,
            name='Wash the dishes',
            coin_value=50,
        )
        challenge.assigned_users.add(member)

        mark_completed(challenge_id=challenge.id, user_id=member.id)
        assert get_balance(user_id=member.id, group_id=group.id) == 0

        validate_completion(
            challenge_id=challenge.id,
            user_id=member.id,
            validated_by=creator,
            is_completed=True
        )
        assert get_balance(user_id=member.id, group_id=group.id) == 50

        redeem(reward_id=reward.id, user_id=member.id)

        assert get_balance(user_id=member.id, group_id=group.id) == 0
        amounts = sorted(
            CoinTransaction.objects.filter(user=member, group=group).values_list('amount', flat=True)
        )
        assert amounts == [-50, 50]
