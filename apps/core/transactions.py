"""
Atomic unit-of-work helper for balance-affecting operations.
"""

import functools
import logging

from django.db import DatabaseError, transaction

from .exceptions import StorageFailureError

logger = logging.getLogger(__name__)


def atomic_operation(func):
    """
    Run ``func`` inside ``transaction.atomic()``.

    Domain exceptions raised by ``func`` roll the block back and propagate
    unchanged. Database errors roll the block back and are re-raised as
    ``StorageFailureError`` with the original error chained.

    Nested calls (e.g. the ledger called from a redemption) become
    savepoints of the outer block, so the outermost operation commits or
    rolls back everything at once.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            with transaction.atomic():
                return func(*args, **kwargs)
        except StorageFailureError:
            raise
        except DatabaseError as exc:
            logger.exception("Storage failure in %s", func.__qualname__)
            raise StorageFailureError(
                f"Could not complete {func.__name__}: {exc}"
            ) from exc

    return wrapper
