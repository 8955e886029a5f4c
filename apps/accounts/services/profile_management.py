"""Profile photo and profile overview services."""

import logging
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.contrib.auth import get_user_model

from apps.challenges.models import Challenge, CompletedChallenge
from apps.rewards.models import RewardTransaction

from .exceptions import (
    UserNotFoundError,
    InvalidPhotoError,
    ProfileAccessDeniedError,
)

User = get_user_model()

logger = logging.getLogger(__name__)

ALLOWED_PHOTO_CONTENT_TYPES = ['image/jpeg', 'image/png']


def validate_photo(photo) -> str:
    """
    Check an uploaded photo and return its lower-case extension.

    Raises:
        InvalidPhotoError: If the file is empty, too large, or not a JPG/PNG
    """
    if photo is None or not photo.size:
        raise InvalidPhotoError("No file uploaded or the file is empty")

    extension = photo.name.rsplit('.', 1)[-1].lower() if '.' in photo.name else ''
    if extension not in settings.PROFILE_PHOTO_EXTENSIONS:
        raise InvalidPhotoError("Only JPG, JPEG and PNG files are allowed")

    content_type = getattr(photo, 'content_type', None)
    if content_type not in ALLOWED_PHOTO_CONTENT_TYPES:
        raise InvalidPhotoError("Invalid file type. Only image files are allowed")

    if photo.size > settings.PROFILE_PHOTO_MAX_BYTES:
        raise InvalidPhotoError("The file size cannot exceed 2MB")

    return extension


@transaction.atomic
def upload_profile_photo(*, user_id: UUID, photo) -> str:
    """
    Store a profile photo and point the user at it.

    The file goes through Django's default storage; the previous photo,
    if any, is deleted once the new one is saved.

    Returns:
        Public URL of the stored photo

    Raises:
        UserNotFoundError: If user does not exist
        InvalidPhotoError: If the upload fails validation
    """
    validate_photo(photo)

    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    previous = user.profile_photo.name if user.profile_photo else None

    user.profile_photo.save(photo.name, photo, save=False)
    user.save(update_fields=['profile_photo'])

    if previous:
        transaction.on_commit(lambda: user.profile_photo.storage.delete(previous))

    logger.info("Stored profile photo for user %s", user.id)
    return user.profile_photo.url


def get_user_profile(*, user_id: UUID, requested_by: User) -> dict:
    """
    Build the profile overview of a user.

    A user may view their own profile and the profiles of their dependents.

    Returns:
        dict with keys: user, created_challenges, completed_challenges
        (validated claims only), redeemed_rewards

    Raises:
        UserNotFoundError: If user does not exist
        ProfileAccessDeniedError: If requested_by is neither the user nor their master
    """
    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    if user.id != requested_by.id and not user.is_dependent_of(requested_by):
        raise ProfileAccessDeniedError("User not authorized to view this profile")

    return {
        'user': user,
        'created_challenges': Challenge.objects.filter(created_by=user),
        'completed_challenges': (
            CompletedChallenge.objects
            .filter(user=user, is_validated=True)
            .select_related('challenge')
        ),
        'redeemed_rewards': (
            RewardTransaction.objects
            .filter(user=user)
            .select_related('reward')
        ),
    }
