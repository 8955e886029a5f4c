"""Domain-specific exceptions for accounts services."""

from apps.core.exceptions import (
    ServiceError,
    ValidationFailedError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
)


class AccountsServiceError(ServiceError):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError, ValidationFailedError):
    """Raised when registration data is inconsistent (e.g. bad master user)."""
    pass


class DuplicateEmailError(AccountsServiceError, ConflictError):
    """Raised when the email is already registered."""
    pass


class InvalidCredentialsError(AccountsServiceError, UnauthorizedError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError, UnauthorizedError):
    """Raised when account is deactivated."""
    pass


class InvalidTokenError(AccountsServiceError, ValidationFailedError):
    """Raised when a password reset token is invalid."""
    pass


class UserNotFoundError(AccountsServiceError, NotFoundError):
    """Raised when user does not exist."""
    pass


class InvalidPhotoError(AccountsServiceError, ValidationFailedError):
    """Raised when an uploaded photo is empty, too large or not an image."""
    pass


class InvalidEmailMessageError(AccountsServiceError, ValidationFailedError):
    """Raised when an outgoing email lacks recipient, subject or body."""
    pass


class ProfileAccessDeniedError(AccountsServiceError, UnauthorizedError):
    """Raised when a user views a profile that is neither theirs nor a dependent's."""
    pass
