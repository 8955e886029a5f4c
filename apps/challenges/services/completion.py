"""
Challenge completion service.

Lifecycle of a claim for one (challenge, user) pair:

    not started -> claimed (pending) -> validated
                                     -> rejected (may be validated later)

A claim never moves coins by itself. Coins are credited once, when the
challenge creator validates the claim.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services.exceptions import UserNotFoundError
from apps.challenges.models import Challenge, CompletedChallenge
from apps.coins.services import credit
from apps.core.transactions import atomic_operation
from apps.groups.services.authorization import can_act_for, can_complete, can_validate

from .exceptions import (
    ChallengeNotFoundError,
    CannotCompleteError,
    NotChallengeCreatorError,
    AlreadyCompletedError,
    CompletionNotFoundError,
    AlreadyValidatedError,
)

logger = logging.getLogger(__name__)


def _get_challenge(challenge_id: UUID) -> Challenge:
    try:
        return Challenge.objects.select_related('group').get(id=challenge_id)
    except Challenge.DoesNotExist:
        raise ChallengeNotFoundError(f"Challenge with ID {challenge_id} not found")


@atomic_operation
def mark_completed(
    *,
    challenge_id: UUID,
    user_id: UUID,
    acting_user: Optional[User] = None
) -> CompletedChallenge:
    """
    Record a user's claim that they finished a challenge.

    Args:
        challenge_id: UUID of the challenge
        user_id: UUID of the user claiming completion
        acting_user: Caller submitting the claim, when it may differ from
            the claimant (a master claiming for a dependent)

    Returns:
        New CompletedChallenge with is_validated=False

    Raises:
        ChallengeNotFoundError: If challenge doesn't exist
        UserNotFoundError: If user doesn't exist
        CannotCompleteError: If the user is neither assigned nor a
            dependent of the challenge creator
        AlreadyCompletedError: If the user already claimed this challenge
    """
    challenge = _get_challenge(challenge_id)

    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    if acting_user is not None and not can_act_for(acting_user, user):
        raise CannotCompleteError("User not authorized to claim for this user")

    if not can_complete(challenge, user):
        logger.warning("User %s may not complete challenge %s", user.id, challenge.id)
        raise CannotCompleteError("User not authorized to complete this challenge")

    if CompletedChallenge.objects.filter(challenge=challenge, user=user).exists():
        raise AlreadyCompletedError("Challenge already completed by this user")

    try:
        with transaction.atomic():
            completion = CompletedChallenge.objects.create(challenge=challenge, user=user)
    except IntegrityError:
        # A concurrent claim won the unique constraint
        raise AlreadyCompletedError("Challenge already completed by this user")

    logger.info("User %s claimed challenge %s", user.id, challenge.id)
    return completion


@atomic_operation
def validate_completion(
    *,
    challenge_id: UUID,
    user_id: UUID,
    validated_by: User,
    is_completed: bool
) -> CompletedChallenge:
    """
    Review a completion claim (challenge creator only).

    Approving credits the challenge's coin value to the claimant in the
    challenge's group, in the same atomic block as the flag change.
    Rejecting records the review without moving coins.

    Args:
        challenge_id: UUID of the challenge
        user_id: UUID of the claimant
        validated_by: User reviewing the claim
        is_completed: True to approve, False to reject

    Returns:
        Updated CompletedChallenge

    Raises:
        ChallengeNotFoundError: If challenge doesn't exist
        NotChallengeCreatorError: If validated_by did not create the challenge
        CompletionNotFoundError: If the user has no claim on this challenge
        AlreadyValidatedError: If the claim was already validated
    """
    challenge = _get_challenge(challenge_id)

    if not can_validate(challenge, validated_by.id):
        logger.warning("User %s may not validate challenge %s", validated_by.id, challenge.id)
        raise NotChallengeCreatorError("Only the challenge creator can validate completions")

    try:
        completion = (
            CompletedChallenge.objects
            .select_for_update()
            .get(challenge=challenge, user_id=user_id)
        )
    except CompletedChallenge.DoesNotExist:
        raise CompletionNotFoundError("No completion claim found for this user")

    if completion.is_validated:
        raise AlreadyValidatedError("Completion has already been validated")

    completion.is_validated = bool(is_completed)
    completion.reviewed_at = timezone.now()
    completion.save(update_fields=['is_validated', 'reviewed_at'])

    if completion.is_validated:
        credit(
            user_id=completion.user_id,
            group_id=challenge.group_id,
            amount=challenge.coin_value,
            description=f"Challenge completed: {challenge.name}",
        )

    logger.info(
        "User %s %s claim of %s on challenge %s",
        validated_by.id,
        'approved' if completion.is_validated else 'rejected',
        completion.user_id,
        challenge.id,
    )
    return completion


def list_completions(
    *,
    challenge_id: UUID,
    requested_by: User,
    pending_only: bool = False
) -> QuerySet[CompletedChallenge]:
    """
    Claims on a challenge, for its creator to review.

    Raises:
        ChallengeNotFoundError: If challenge doesn't exist
        NotChallengeCreatorError: If requested_by did not create the challenge
    """
    challenge = _get_challenge(challenge_id)

    if not can_validate(challenge, requested_by.id):
        raise NotChallengeCreatorError("Only the challenge creator can list completions")

    completions = (
        CompletedChallenge.objects
        .filter(challenge=challenge)
        .select_related('user')
    )
    if pending_only:
        completions = completions.filter(reviewed_at__isnull=True)
    return completions
