"""
DRF exception handler translating service errors into HTTP responses.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import (
    ServiceError,
    ValidationFailedError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
    InsufficientBalanceError,
    StorageFailureError,
)

logger = logging.getLogger(__name__)

STATUS_BY_CATEGORY = [
    (ValidationFailedError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InsufficientBalanceError, status.HTTP_400_BAD_REQUEST),
    (StorageFailureError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(exc: ServiceError) -> int:
    """Return the HTTP status code for a service error category."""
    for category, code in STATUS_BY_CATEGORY:
        if isinstance(exc, category):
            return code
    return status.HTTP_400_BAD_REQUEST


def service_exception_handler(exc, context):
    """
    Handle ServiceError subclasses, defer everything else to DRF.

    Response body follows the ``{'error': ...}`` shape used across the API.
    """
    if isinstance(exc, ServiceError):
        code = status_for(exc)
        if code >= 500:
            logger.error("Service failure: %s", exc)
        return Response(
            {'error': str(exc), 'code': type(exc).__name__},
            status=code
        )

    return exception_handler(exc, context)
