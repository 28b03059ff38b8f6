"""
Shared money helpers for the ledger services.

Amounts are ``Decimal`` values rounded half-up to cents. Comparisons against
zero use :data:`EPSILON` (one minor currency unit) rather than exact equality,
since proportional splits always leave cent-level residue.
"""
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal('0.01')
EPSILON = Decimal('0.01')
HUNDRED = Decimal('100')
PERCENT_PLACES = Decimal('0.0001')


def to_decimal(value):
    """Coerce *value* (Decimal, int, float or str) to ``Decimal``."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value):
    """Round *value* half-up to 2 decimal places."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_percentage(value):
    return to_decimal(value).quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)


def distribute_remainder(amounts, total_target):
    """
    Make *amounts* add up to *total_target* exactly.

    The whole difference ``total_target - sum(amounts)`` is added to the
    last element, so every other amount keeps its rounded value.

    Parameters
    ----------
    amounts : list[Decimal]
        Already-rounded amounts, in allocation order.
    total_target : Decimal
        The total the amounts must reach.

    Returns
    -------
    list[Decimal]
        A new list; the input is not modified.
    """
    result = [round2(a) for a in amounts]
    if not result:
        return result

    drift = round2(to_decimal(total_target) - sum(result, Decimal('0')))
    if drift:
        result[-1] = round2(result[-1] + drift)
    return result
