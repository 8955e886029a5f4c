"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and are converted to
HTTP responses by the project's DRF exception handler.
"""

from apps.core.exceptions import (
    ServiceError,
    ValidationFailedError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
)


class GroupsServiceError(ServiceError):
    """Base exception for all groups service errors."""
    pass


class InvalidGroupDataError(GroupsServiceError, ValidationFailedError):
    """Raised when group name or photo URL is missing or too long."""
    pass


class GroupNotFoundError(GroupsServiceError, NotFoundError):
    """Raised when a group does not exist or is inaccessible."""
    pass


class DuplicateGroupNameError(GroupsServiceError, ConflictError):
    """Raised when the creator already has a group with the same name."""
    pass


class AlreadyMemberError(GroupsServiceError, ConflictError):
    """Raised when a user is added to a group they're already in."""
    pass


class NotMemberError(GroupsServiceError, NotFoundError):
    """Raised when a user is expected to be in the group but is not."""
    pass


class CannotRemoveCreatorError(GroupsServiceError, ValidationFailedError):
    """Raised when attempting to remove the group creator."""
    pass


class InvalidDependentError(GroupsServiceError, ValidationFailedError):
    """Raised when a dependent link would break the master/dependent rules."""
    pass


class DependentNotFoundError(GroupsServiceError, NotFoundError):
    """Raised when the user is not a dependent member of the group."""
    pass


class InsufficientPermissionsError(GroupsServiceError, UnauthorizedError):
    """Raised when a user lacks required permissions for an action."""
    pass
