"""
Membership management service.

Removing a member rewrites the group's history: every expense they paid or
shared is re-allocated among the remaining members and their settlements
are dropped. All of it is written in a single transaction.
"""
import logging
from typing import Optional

from django.db import transaction
from django.db.models import Max

from apps.expenses.models import Expense, Settlement
from apps.expenses.services.exceptions import InvalidMemberError
from apps.expenses.services.ledger import get_group_ledger, save_expense_shares
from apps.expenses.services.member_redistribution import redistribute_member
from apps.expenses.services.records import RedistributionResult
from apps.groups.models import Group, GroupMember

from .exceptions import (
    DuplicateMemberError,
    LastMemberError,
    MemberNotFoundError,
)
from .group_management import normalize_member_names

logger = logging.getLogger(__name__)


@transaction.atomic
def add_member(*, group: Group, name: str) -> GroupMember:
    """
    Append a member at the end of the group order.

    Raises:
        InvalidMemberNameError: If the name is blank
        DuplicateMemberError: If the name is already taken in the group
    """
    [name] = normalize_member_names([name])
    group = Group.objects.select_for_update().get(pk=group.pk)

    if group.members.filter(name=name).exists():
        raise DuplicateMemberError(name)

    last_position = group.members.aggregate(last=Max('position'))['last']
    member = GroupMember.objects.create(
        group=group,
        name=name,
        position=0 if last_position is None else last_position + 1,
    )
    logger.info('Added member %s to group %s', name, group.id)
    return member


@transaction.atomic
def remove_member(
    *,
    group: Group,
    member: str,
    fallback_payer: Optional[str] = None,
) -> RedistributionResult:
    """
    Remove *member* from *group* and re-balance the group's history.

    Locks the group row so concurrent removals run one after the other. The
    redistribution is computed on a snapshot of the ledger and then written
    back: expense payers and splits are replaced, settlements involving the
    member are deleted, and finally the membership row itself. Any failure
    rolls all of it back.

    Args:
        group: The group to remove the member from
        member: Name of the departing member
        fallback_payer: Takes over expenses the member paid for; defaults to
            the first remaining member

    Returns:
        The RedistributionResult that was applied

    Raises:
        MemberNotFoundError: If *member* is not in the group
        LastMemberError: If *member* is the only member left
        InvalidMemberError: If *fallback_payer* is not a remaining member
    """
    group = Group.objects.select_for_update().get(pk=group.pk)
    names = group.member_names

    if member not in names:
        raise MemberNotFoundError(member)

    remaining = [name for name in names if name != member]
    if not remaining:
        raise LastMemberError()

    if fallback_payer is None:
        fallback_payer = remaining[0]
    elif fallback_payer not in remaining:
        raise InvalidMemberError(fallback_payer)

    ledger = get_group_ledger(group)
    result = redistribute_member(
        member, remaining, fallback_payer, ledger.expenses, ledger.settlements,
    )

    expenses = Expense.objects.in_bulk([record.id for record in result.updated_expenses])
    for record in result.updated_expenses:
        expense = expenses[record.id]
        expense.paid_by = record.paid_by
        expense.save(update_fields=['paid_by', 'updated_at'])
        save_expense_shares(expense, record.shares)

    Settlement.objects.filter(id__in=result.settlement_ids_to_delete).delete()
    group.members.filter(name=member).delete()

    logger.info(
        'Removed member %s from group %s: %d expenses redistributed, %d settlements deleted',
        member,
        group.id,
        len(result.updated_expenses),
        len(result.settlement_ids_to_delete),
    )
    return result
