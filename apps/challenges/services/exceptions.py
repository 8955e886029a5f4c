"""Domain-specific exceptions for challenge services."""

from apps.core.exceptions import (
    ServiceError,
    ValidationFailedError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
)


class ChallengesServiceError(ServiceError):
    """Base exception for challenge services."""
    pass


class InvalidChallengeDataError(ChallengesServiceError, ValidationFailedError):
    """Raised when name, coin value or dates are invalid."""
    pass


class ChallengeNotFoundError(ChallengesServiceError, NotFoundError):
    """Raised when challenge does not exist."""
    pass


class NotChallengeCreatorError(ChallengesServiceError, UnauthorizedError):
    """Raised when someone other than the creator edits, assigns or validates."""
    pass


class CannotCompleteError(ChallengesServiceError, UnauthorizedError):
    """Raised when a user is neither assigned nor a dependent of the creator."""
    pass


class AlreadyCompletedError(ChallengesServiceError, ConflictError):
    """Raised when the user already claimed this challenge."""
    pass


class CompletionNotFoundError(ChallengesServiceError, NotFoundError):
    """Raised when there is no claim to validate."""
    pass


class AlreadyValidatedError(ChallengesServiceError, ConflictError):
    """Raised when a claim that was already validated is reviewed again."""
    pass
