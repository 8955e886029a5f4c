"""User authentication service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Authenticate user with email and password.

    Uses select_for_update() to prevent race conditions when updating last_login.

    Args:
        email: User's email
        password: User's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email)
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user


def authenticate_dependent(
    *,
    master_email: str,
    master_password: str,
    dependent_email: str
) -> User:
    """
    Sign a dependent in on the strength of their master's credentials.

    Raises:
        InvalidCredentialsError: If the master credentials are wrong or the
            dependent does not belong to that master
    """
    master = authenticate_user(email=master_email, password=master_password)

    try:
        dependent = User.objects.get(email__iexact=dependent_email, is_active=True)
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid dependent credentials")

    if not dependent.is_dependent_of(master):
        logger.warning(
            "User %s tried to sign in as %s without being their master",
            master.id, dependent.id
        )
        raise InvalidCredentialsError("Invalid dependent credentials")

    return dependent
