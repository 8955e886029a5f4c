"""Domain-specific exceptions for reward services."""

from apps.core.exceptions import (
    ServiceError,
    ValidationFailedError,
    NotFoundError,
    UnauthorizedError,
)


class RewardsServiceError(ServiceError):
    """Base exception for reward services."""
    pass


class InvalidRewardDataError(RewardsServiceError, ValidationFailedError):
    """Raised when description or cost is invalid."""
    pass


class RewardNotFoundError(RewardsServiceError, NotFoundError):
    """Raised when reward does not exist."""
    pass


class NotGroupCreatorError(RewardsServiceError, UnauthorizedError):
    """Raised when someone other than the group creator manages rewards."""
    pass


class CannotRedeemForUserError(RewardsServiceError, UnauthorizedError):
    """Raised when a caller redeems on behalf of someone who is not their dependent."""
    pass
