"""Read access rules for balances and transaction history."""

from typing import Optional
from uuid import UUID

from apps.accounts.models import User
from apps.groups.models import Group
from apps.groups.services.authorization import is_creator
from apps.groups.services.exceptions import GroupNotFoundError

from .exceptions import LedgerAccessDeniedError


def check_ledger_access(*, actor: User, group_id: Optional[UUID] = None, user_id: Optional[UUID] = None) -> None:
    """
    Allow a user to read their own ledger or a dependent's, and a group
    creator to read everything in their group.

    Raises:
        GroupNotFoundError: If group_id does not exist
        LedgerAccessDeniedError: If actor may not read the requested rows
    """
    if user_id is not None:
        if str(user_id) == str(actor.id):
            return
        if User.objects.filter(id=user_id, is_dependent=True, master_user=actor).exists():
            return

    if group_id is not None:
        try:
            group = Group.objects.get(id=group_id)
        except Group.DoesNotExist:
            raise GroupNotFoundError(f"Group with ID {group_id} not found")
        if is_creator(group, actor.id):
            return

    raise LedgerAccessDeniedError("User not authorized to view this ledger")
