"""
Rewards app services layer.

Redemption spends coins through the coin ledger only.
"""

from .exceptions import (
    RewardsServiceError,
    InvalidRewardDataError,
    RewardNotFoundError,
    NotGroupCreatorError,
    CannotRedeemForUserError,
)

from .reward_management import (
    create_reward,
    delete_reward,
    get_reward,
    list_by_group,
    list_redeemed_by_user_in_group,
)

from .redemption import (
    redeem,
)


__all__ = [
    # Exceptions
    'RewardsServiceError',
    'InvalidRewardDataError',
    'RewardNotFoundError',
    'NotGroupCreatorError',
    'CannotRedeemForUserError',

    # Catalogue
    'create_reward',
    'delete_reward',
    'get_reward',
    'list_by_group',
    'list_redeemed_by_user_in_group',

    # Redemption
    'redeem',
]
