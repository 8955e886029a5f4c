"""
Outgoing email.

Thin wrapper around Django's mail framework so the rest of the project
depends on ``send_email(to, subject, html_body)`` only. The transport is
chosen by the EMAIL_BACKEND setting.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import strip_tags

from .exceptions import InvalidEmailMessageError

logger = logging.getLogger(__name__)


def send_email(*, to: str, subject: str, html_body: str) -> None:
    """
    Send an HTML email with a plain-text alternative.

    Raises:
        InvalidEmailMessageError: If recipient, subject or body is empty
    """
    if not to or not subject or not html_body:
        raise InvalidEmailMessageError("Email, subject, and message are required.")

    send_mail(
        subject=subject,
        message=strip_tags(html_body),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to],
        html_message=html_body,
        fail_silently=False,
    )
    logger.info("Sent email '%s' to %s", subject, to)


def password_reset_message(reset_url: str) -> str:
    return (
        "<p>We received a request to reset your password.</p>"
        f'<p><a href="{reset_url}">Reset your password</a></p>'
        f"<p>Or open this link: {reset_url}</p>"
        "<p>If you did not ask for this, you can ignore this email.</p>"
    )


def group_invite_message(group_name: str, invited_by: str) -> str:
    return (
        f"<p>{invited_by} added you to the group <strong>{group_name}</strong>.</p>"
        "<p>Sign in to see its challenges and rewards.</p>"
    )
