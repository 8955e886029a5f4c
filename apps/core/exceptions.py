"""
Error taxonomy shared by every service layer.

Each app defines its own exceptions in ``services/exceptions.py`` and mixes
in exactly one of the categories below. Views never inspect the concrete
class; the DRF exception handler maps the category to an HTTP status.
"""


class ServiceError(Exception):
    """Base exception for all business rule violations."""
    pass


class ValidationFailedError(ServiceError):
    """Raised when input is malformed or missing."""
    pass


class NotFoundError(ServiceError):
    """Raised when a referenced entity does not exist."""
    pass


class UnauthorizedError(ServiceError):
    """Raised when the caller lacks the required relationship."""
    pass


class ConflictError(ServiceError):
    """Raised on duplicates, e.g. an existing completion or membership."""
    pass


class InsufficientBalanceError(ServiceError):
    """Raised when a coin balance cannot cover a debit."""
    pass


class StorageFailureError(ServiceError):
    """Raised when the database rejects a unit of work. Never retried."""
    pass
