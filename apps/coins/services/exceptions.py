"""Domain-specific exceptions for the coin ledger."""

from apps.core.exceptions import (
    ServiceError,
    ValidationFailedError,
    NotFoundError,
    UnauthorizedError,
    InsufficientBalanceError as InsufficientBalanceCategory,
)


class CoinsServiceError(ServiceError):
    """Base exception for ledger services."""
    pass


class InvalidAmountError(CoinsServiceError, ValidationFailedError):
    """Raised when an amount is not a positive integer."""
    pass


class MissingFilterError(CoinsServiceError, ValidationFailedError):
    """Raised when a transaction listing has neither a user nor a group filter."""
    pass


class BalanceNotFoundError(CoinsServiceError, NotFoundError):
    """Raised when a user has never been credited in a group."""
    pass


class InsufficientBalanceError(CoinsServiceError, InsufficientBalanceCategory):
    """Raised when a debit exceeds the current balance."""
    pass


class LedgerAccessDeniedError(CoinsServiceError, UnauthorizedError):
    """Raised when a user reads balances or transactions they may not see."""
    pass
