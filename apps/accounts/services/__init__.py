"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
    InvalidPhotoError,
    InvalidEmailMessageError,
    ProfileAccessDeniedError,
)
from .email_delivery import send_email
from .user_registration import register_user
from .user_authentication import authenticate_user, authenticate_dependent
from .password_reset import request_password_reset, confirm_password_reset
from .profile_management import upload_profile_photo, get_user_profile

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'DuplicateEmailError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    'UserNotFoundError',
    'InvalidPhotoError',
    'InvalidEmailMessageError',
    'ProfileAccessDeniedError',
    # Services
    'send_email',
    'register_user',
    'authenticate_user',
    'authenticate_dependent',
    'request_password_reset',
    'confirm_password_reset',
    'upload_profile_photo',
    'get_user_profile',
]
