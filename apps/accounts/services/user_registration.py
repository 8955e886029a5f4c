"""User registration service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError, DuplicateEmailError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    full_name: str,
    is_dependent: bool = False,
    master_user_id: Optional[UUID] = None
) -> User:
    """
    Register a new user, optionally as a dependent of an existing user.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        full_name: User's full name
        is_dependent: Whether the account is a managed sub-account
        master_user_id: Owner of the dependent account (required if dependent)

    Returns:
        Created User instance

    Raises:
        DuplicateEmailError: If the email is already registered
        UserRegistrationError: If the master user is missing or is a dependent
    """
    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateEmailError("The provided email is already registered.")

    master_user = None
    if is_dependent:
        if not master_user_id:
            raise UserRegistrationError("A dependent account requires a master user")
        try:
            master_user = User.objects.get(id=master_user_id, is_active=True)
        except User.DoesNotExist:
            raise UserRegistrationError(f"Master user {master_user_id} not found")
        if master_user.is_dependent:
            raise UserRegistrationError("A dependent cannot be the master of another account")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            full_name=full_name,
            is_dependent=is_dependent,
            master_user=master_user,
        )
    except IntegrityError:
        raise DuplicateEmailError("The provided email is already registered.")

    logger.info("Registered user %s (dependent=%s)", user.id, is_dependent)
    return user
