"""
JSON export and import of everything a user owns.

The document layout matches the backup files of the offline client, so
backups can move in both directions:

    {
        "settings": {"username": ...},
        "groups": [{"id", "name", "currency", "members", ...}],
        "expenses": [{"id", "groupId", "amount", "paidBy", "splitType",
                      "splits": [{"memberId", "amount", "percentage"}], ...}],
        "settlements": [{"id", "groupId", "fromMember", "toMember", ...}],
        "exportedAt": "..."
    }
"""
import logging

from django.db import transaction
from django.utils import timezone

from apps.expenses.models import Expense, ExpenseSplit, Settlement
from apps.groups.models import Group, GroupMember

from .exceptions import InvalidImportError
from .group_management import normalize_member_names

logger = logging.getLogger(__name__)


def _amount(value):
    return str(value) if value is not None else None


def export_user_data(user):
    """Return all groups, expenses and settlements of *user* as a JSON-ready dict."""
    groups = list(
        Group.objects.filter(created_by=user).prefetch_related('members')
    )
    expenses = Expense.objects.filter(group__created_by=user).prefetch_related('splits')
    settlements = Settlement.objects.filter(group__created_by=user)

    data = {
        'settings': {'username': user.get_username()},
        'groups': [
            {
                'id': str(group.id),
                'name': group.name,
                'currency': group.currency,
                'members': group.member_names,
                'createdAt': group.created_at.isoformat(),
                'updatedAt': group.updated_at.isoformat(),
            }
            for group in groups
        ],
        'expenses': [
            {
                'id': str(expense.id),
                'groupId': str(expense.group_id),
                'description': expense.description,
                'amount': _amount(expense.amount),
                'date': expense.date.isoformat(),
                'paidBy': expense.paid_by,
                'splitType': expense.split_type,
                'splits': [
                    {
                        'memberId': split.member,
                        'amount': _amount(split.amount),
                        'percentage': _amount(split.percentage),
                    }
                    for split in expense.splits.all()
                ],
                'category': expense.category,
                'receiptNote': expense.receipt_note,
                'createdAt': expense.created_at.isoformat(),
            }
            for expense in expenses
        ],
        'settlements': [
            {
                'id': str(settlement.id),
                'groupId': str(settlement.group_id),
                'fromMember': settlement.from_member,
                'toMember': settlement.to_member,
                'amount': _amount(settlement.amount),
                'method': settlement.method,
                'date': settlement.date.isoformat(),
                'note': settlement.note,
                'createdAt': settlement.created_at.isoformat(),
            }
            for settlement in settlements
        ],
        'exportedAt': timezone.now().isoformat(),
    }
    logger.info(
        'Exported %d groups, %d expenses, %d settlements for user %s',
        len(data['groups']), len(data['expenses']), len(data['settlements']), user.pk,
    )
    return data


@transaction.atomic
def import_user_data(user, data):
    """
    Replace every group of *user* with the groups in *data*.

    *data* is the validated payload of ``DataImportSerializer``. Ids in the
    payload are only used to link expenses and settlements to their group;
    fresh ids are assigned to everything imported.

    Raises:
        InvalidImportError: If an expense or settlement points at a group
            that is not part of the payload, or an expense lists the same
            member in more than one split
    """
    Group.objects.filter(created_by=user).delete()

    groups_by_ref = {}
    for item in data.get('groups', []):
        names = normalize_member_names(item.get('members', []))
        group = Group.objects.create(
            name=item['name'],
            currency=item['currency'].upper(),
            created_by=user,
        )
        GroupMember.objects.bulk_create([
            GroupMember(group=group, name=name, position=index)
            for index, name in enumerate(names)
        ])
        groups_by_ref[str(item['id'])] = group

    expense_count = 0
    for item in data.get('expenses', []):
        splits = item.get('splits', [])
        _check_distinct_split_members(item, splits)
        expense = Expense.objects.create(
            group=_resolve_group(groups_by_ref, item['groupId']),
            description=item['description'],
            amount=item['amount'],
            date=item['date'],
            paid_by=item['paidBy'],
            split_type=item['splitType'],
            category=item.get('category') or '',
            receipt_note=item.get('receiptNote') or '',
        )
        ExpenseSplit.objects.bulk_create([
            ExpenseSplit(
                expense=expense,
                member=split['memberId'],
                amount=split['amount'],
                percentage=split.get('percentage'),
                position=index,
            )
            for index, split in enumerate(splits)
        ])
        expense_count += 1

    settlement_count = 0
    for item in data.get('settlements', []):
        Settlement.objects.create(
            group=_resolve_group(groups_by_ref, item['groupId']),
            from_member=item['fromMember'],
            to_member=item['toMember'],
            amount=item['amount'],
            method=item.get('method') or '',
            date=item['date'],
            note=item.get('note') or '',
        )
        settlement_count += 1

    logger.info(
        'Imported %d groups, %d expenses, %d settlements for user %s',
        len(groups_by_ref), expense_count, settlement_count, user.pk,
    )
    return list(groups_by_ref.values())


def _check_distinct_split_members(item, splits):
    description = item['description']
    seen = set()
    for split in splits:
        member = split['memberId']
        if member in seen:
            raise InvalidImportError(
                f'Expense "{description}" has more than one split for "{member}".',
                details={'memberId': member},
            )
        seen.add(member)


def _resolve_group(groups_by_ref, ref):
    try:
        return groups_by_ref[str(ref)]
    except KeyError:
        raise InvalidImportError(
            f'Unknown group reference "{ref}".',
            details={'groupId': str(ref)},
        )
