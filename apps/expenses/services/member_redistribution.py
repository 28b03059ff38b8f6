"""
Re-allocation of historical expenses when a member leaves a group.

Every expense the departing member paid for or took part in is rewritten so
that it still sums to its original total without them, and every settlement
they sent or received is marked for deletion. Nothing here touches the
database: the caller must persist the whole result in one transaction, or
the ledger would be left half-redistributed and out of balance.
"""
import dataclasses
import logging
from decimal import Decimal

from apps.expenses.services.records import RedistributionResult, Share, SplitType
from apps.expenses.services.rounding import (
    EPSILON,
    HUNDRED,
    distribute_remainder,
    round2,
    round_percentage,
)
from apps.expenses.services.split_calculator import calculate_equal_split

logger = logging.getLogger(__name__)


def redistribute_member(member_to_remove, remaining_members, fallback_payer, expenses, settlements):
    """
    Compute the ledger rewrite for removing *member_to_remove*.

    Parameters
    ----------
    member_to_remove : str
        The departing member.
    remaining_members : list[str]
        Members staying in the group, in group order. The departing member
        is filtered out if present.
    fallback_payer : str
        Takes over as payer of expenses the departing member paid for.
    expenses : iterable[ExpenseRecord]
    settlements : iterable[SettlementRecord]

    Returns
    -------
    RedistributionResult
        The rewritten expenses (only those that changed) and the ids of the
        settlements to delete.
    """
    remaining = [m for m in remaining_members if m != member_to_remove]

    updated = []
    if remaining:
        for expense in expenses:
            if not expense.involves(member_to_remove):
                continue
            updated.append(
                _redistribute_expense(expense, member_to_remove, remaining, fallback_payer)
            )
    else:
        logger.warning(
            'No members left after removing %s; expenses left untouched', member_to_remove,
        )

    to_delete = [
        s.id for s in settlements
        if member_to_remove in (s.from_member, s.to_member)
    ]

    logger.debug(
        'Redistribution of %s rewrites %d expenses and drops %d settlements',
        member_to_remove, len(updated), len(to_delete),
    )
    return RedistributionResult(
        updated_expenses=tuple(updated),
        settlement_ids_to_delete=tuple(to_delete),
    )


def _redistribute_expense(expense, member_to_remove, remaining, fallback_payer):
    paid_by = fallback_payer if expense.paid_by == member_to_remove else expense.paid_by
    kept = {s.member: s for s in expense.shares if s.member != member_to_remove}

    rebuild = _REBUILDERS[SplitType(expense.split_type)]
    shares = rebuild(expense.amount, remaining, kept)
    return dataclasses.replace(expense, paid_by=paid_by, shares=tuple(shares))


def _rebuild_equal(total, remaining, kept):
    return calculate_equal_split(total, remaining)


def _rebuild_percentage(total, remaining, kept):
    percents = []
    for member in remaining:
        share = kept.get(member)
        if share is None:
            pct = Decimal('0')
        elif share.percentage is not None:
            pct = share.percentage
        else:
            pct = share.amount / total * HUNDRED
        percents.append(pct)

    total_percent = sum(percents, Decimal('0'))
    if total_percent <= EPSILON:
        return calculate_equal_split(total, remaining)

    normalized = [pct / total_percent * HUNDRED for pct in percents]
    amounts = distribute_remainder(
        [round2(total * pct / HUNDRED) for pct in normalized],
        total,
    )
    return [
        Share(member=member, amount=amount, percentage=round_percentage(pct))
        for member, amount, pct in zip(remaining, amounts, normalized)
    ]


def _rebuild_fixed(total, remaining, kept):
    fixed = [kept[m].amount if m in kept else Decimal('0') for m in remaining]

    current_total = sum(fixed, Decimal('0'))
    if current_total <= EPSILON:
        return calculate_equal_split(total, remaining)

    # Whatever the departing member covered is spread evenly over everyone left.
    extra = round2((total - current_total) / len(remaining))
    amounts = distribute_remainder([round2(a + extra) for a in fixed], total)
    return [
        Share(member=member, amount=amount, percentage=round2(amount / total * HUNDRED))
        for member, amount in zip(remaining, amounts)
    ]


_REBUILDERS = {
    SplitType.EQUAL: _rebuild_equal,
    SplitType.PERCENTAGE: _rebuild_percentage,
    SplitType.FIXED: _rebuild_fixed,
}
