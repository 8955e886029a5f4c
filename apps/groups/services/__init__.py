"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupsServiceError,
    InvalidGroupDataError,
    GroupNotFoundError,
    DuplicateGroupNameError,
    AlreadyMemberError,
    NotMemberError,
    CannotRemoveCreatorError,
    InvalidDependentError,
    DependentNotFoundError,
    InsufficientPermissionsError,
)

from .authorization import (
    is_creator,
    is_member,
    can_validate,
    can_complete,
    can_act_for,
)

from .group_management import (
    create_group,
    update_group,
    delete_group,
    get_group_by_id,
    list_groups_created_by,
    list_groups_for_user,
)

from .membership_management import (
    add_member,
    invite_member,
    remove_member,
    get_group_members,
)

from .dependent_management import (
    mark_dependent,
    add_dependent,
    remove_dependent,
    list_dependents,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'InvalidGroupDataError',
    'GroupNotFoundError',
    'DuplicateGroupNameError',
    'AlreadyMemberError',
    'NotMemberError',
    'CannotRemoveCreatorError',
    'InvalidDependentError',
    'DependentNotFoundError',
    'InsufficientPermissionsError',

    # Authorization
    'is_creator',
    'is_member',
    'can_validate',
    'can_complete',
    'can_act_for',

    # Group Management
    'create_group',
    'update_group',
    'delete_group',
    'get_group_by_id',
    'list_groups_created_by',
    'list_groups_for_user',

    # Membership Management
    'add_member',
    'invite_member',
    'remove_member',
    'get_group_members',

    # Dependent Management
    'mark_dependent',
    'add_dependent',
    'remove_dependent',
    'list_dependents',
]
