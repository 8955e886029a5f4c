"""
Challenges app services layer.

Claims and their validation go through completion.py; coins move only
through the coin ledger.
"""

from .exceptions import (
    ChallengesServiceError,
    InvalidChallengeDataError,
    ChallengeNotFoundError,
    NotChallengeCreatorError,
    CannotCompleteError,
    AlreadyCompletedError,
    CompletionNotFoundError,
    AlreadyValidatedError,
)

from .challenge_management import (
    create_challenge,
    update_challenge,
    delete_challenge,
    assign_users,
    get_challenge,
    list_challenges_created_by,
    list_challenges_assigned_to,
    list_group_challenges,
)

from .completion import (
    mark_completed,
    validate_completion,
    list_completions,
)


__all__ = [
    # Exceptions
    'ChallengesServiceError',
    'InvalidChallengeDataError',
    'ChallengeNotFoundError',
    'NotChallengeCreatorError',
    'CannotCompleteError',
    'AlreadyCompletedError',
    'CompletionNotFoundError',
    'AlreadyValidatedError',

    # Challenge Management
    'create_challenge',
    'update_challenge',
    'delete_challenge',
    'assign_users',
    'get_challenge',
    'list_challenges_created_by',
    'list_challenges_assigned_to',
    'list_group_challenges',

    # Completion
    'mark_completed',
    'validate_completion',
    'list_completions',
]
