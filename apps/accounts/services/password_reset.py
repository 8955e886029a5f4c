"""Password reset service."""

import logging
import secrets
from urllib.parse import urlencode

from django.conf import settings
from django.db import transaction
from django.contrib.auth import get_user_model

from .email_delivery import send_email, password_reset_message
from .exceptions import UserNotFoundError, InvalidTokenError

User = get_user_model()

logger = logging.getLogger(__name__)


def request_password_reset(*, email: str) -> str:
    """
    Generate a password reset token and email the reset link.

    The token is committed before the email is sent.

    Args:
        email: User's email address

    Returns:
        Reset token

    Raises:
        UserNotFoundError: If user does not exist
    """
    with transaction.atomic():
        try:
            user = (
                User.objects
                .select_for_update()
                .get(email__iexact=email, is_active=True)
            )
        except User.DoesNotExist:
            raise UserNotFoundError(f"No active user with email: {email}")

        reset_token = secrets.token_urlsafe(32)
        user.verification_token = reset_token
        user.save(update_fields=['verification_token'])

    query = urlencode({'token': reset_token, 'email': user.email})
    reset_url = f"{settings.CLIENT_APP_URL}/reset-password?{query}"
    send_email(
        to=user.email,
        subject="Password Reset",
        html_body=password_reset_message(reset_url),
    )
    logger.info("Password reset requested for user %s", user.id)

    return reset_token


@transaction.atomic
def confirm_password_reset(*, token: str, new_password: str) -> User:
    """
    Reset user password with token.

    Args:
        token: Reset token
        new_password: New password

    Returns:
        User instance

    Raises:
        InvalidTokenError: If token is invalid or expired
    """
    if not token:
        raise InvalidTokenError("Invalid or expired reset token")

    try:
        user = (
            User.objects
            .select_for_update()
            .get(verification_token=token, is_active=True)
        )
    except User.DoesNotExist:
        raise InvalidTokenError("Invalid or expired reset token")

    user.set_password(new_password)
    user.verification_token = None
    user.save(update_fields=['password', 'verification_token'])

    return user
