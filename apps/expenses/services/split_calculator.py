"""
Utilities for calculating how an expense is split among group members.

Every function returns a list of :class:`~apps.expenses.services.records.Share`
in allocation order. Equal and percentage splits always sum exactly to the
original total: rounding drift is absorbed by the last share. Fixed splits
keep the caller's own figures, which must already match the total within one
cent.
"""
from decimal import Decimal

from apps.expenses.services.exceptions import (
    EmptyMembersError,
    InvalidMemberError,
    SumMismatchError,
)
from apps.expenses.services.records import Share, SplitType
from apps.expenses.services.rounding import (
    EPSILON,
    HUNDRED,
    distribute_remainder,
    round2,
    round_percentage,
    to_decimal,
)


def calculate_equal_split(amount, member_ids):
    """
    Split *amount* equally among *member_ids*.

    Parameters
    ----------
    amount : Decimal | str | int | float
        The total amount to split.
    member_ids : list
        Members to split among. The last one receives the rounding drift.

    Returns
    -------
    list[Share]
        One share per member, each carrying ``100 / n`` as its percentage.

    Raises
    ------
    EmptyMembersError
        If *member_ids* is empty.
    """
    member_ids = list(member_ids)
    if not member_ids:
        raise EmptyMembersError()

    amount = to_decimal(amount)
    num = len(member_ids)

    per_person = round2(amount / num)
    percentage = round_percentage(HUNDRED / num)
    amounts = distribute_remainder([per_person] * num, amount)

    return [
        Share(member=uid, amount=share, percentage=percentage)
        for uid, share in zip(member_ids, amounts)
    ]


def calculate_percentage_split(amount, percentages, member_ids):
    """
    Split *amount* according to the given *percentages*.

    Parameters
    ----------
    amount : Decimal | str | int | float
        The total amount to split.
    percentages : dict
        ``{member: Decimal}``; values must sum to 100 (within 0.01).
    member_ids : list
        Members allowed to take part in the split.

    Returns
    -------
    list[Share]
        One share per entry in *percentages*, in the same order.

    Raises
    ------
    EmptyMembersError
        If *percentages* is empty.
    InvalidMemberError
        If a key of *percentages* is not in *member_ids*.
    SumMismatchError
        If the percentages do not sum to 100.
    """
    if not percentages:
        raise EmptyMembersError('At least one member must have a percentage.')

    amount = to_decimal(amount)
    entries = [(uid, to_decimal(pct)) for uid, pct in percentages.items()]
    _check_members(entries, member_ids)

    total_pct = sum((pct for _, pct in entries), Decimal('0'))
    if abs(total_pct - HUNDRED) > EPSILON:
        raise SumMismatchError(HUNDRED, total_pct, SumMismatchError.PERCENTAGE)

    amounts = distribute_remainder(
        [round2(amount * pct / HUNDRED) for _, pct in entries],
        amount,
    )
    return [
        Share(member=uid, amount=share, percentage=round_percentage(pct))
        for (uid, pct), share in zip(entries, amounts)
    ]


def calculate_fixed_split(amount, amounts, member_ids):
    """
    Validate and return fixed per-member amounts.

    The amounts must add up to *amount* within one cent. Percentages are
    back-computed for display only.

    Raises
    ------
    EmptyMembersError, InvalidMemberError, SumMismatchError
    """
    if not amounts:
        raise EmptyMembersError('At least one member must have an amount.')

    amount = to_decimal(amount)
    entries = [(uid, to_decimal(val)) for uid, val in amounts.items()]
    _check_members(entries, member_ids)

    total_split = sum((val for _, val in entries), Decimal('0'))
    if abs(total_split - amount) > EPSILON:
        raise SumMismatchError(amount, total_split, SumMismatchError.FIXED)

    return [
        Share(
            member=uid,
            amount=round2(val),
            percentage=round2(val / amount * HUNDRED) if amount else None,
        )
        for uid, val in entries
    ]


def calculate_splits(amount, member_ids, split_type, custom_values=None):
    """
    Allocate *amount* with the policy named by *split_type*.

    *custom_values* maps members to percentages (percentage split) or
    amounts (fixed split) and is ignored for equal splits.
    """
    split_type = SplitType(split_type)
    if split_type is SplitType.EQUAL:
        return calculate_equal_split(amount, member_ids)
    if split_type is SplitType.PERCENTAGE:
        return calculate_percentage_split(amount, custom_values or {}, member_ids)
    if split_type is SplitType.FIXED:
        return calculate_fixed_split(amount, custom_values or {}, member_ids)
    raise AssertionError(f'Unhandled split type: {split_type!r}')


def _check_members(entries, member_ids):
    allowed = set(member_ids)
    for uid, _ in entries:
        if uid not in allowed:
            raise InvalidMemberError(uid)
