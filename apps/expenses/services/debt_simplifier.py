"""
Debt simplification using a greedy largest-creditor / largest-debtor match.

Given the net balance of every member, this module proposes a list of
pairwise transfers that settles the group. The greedy matching keeps the
number of transfers low and never exceeds ``creditors + debtors - 1``, but
it is a heuristic: finding the true minimum number of transfers is a
combinatorial problem and is not attempted here.
"""
import logging

from apps.expenses.services.records import SimplifiedDebt
from apps.expenses.services.rounding import EPSILON, round2

logger = logging.getLogger(__name__)


def simplify_debts(balances):
    """
    Collapse *balances* into a list of ``SimplifiedDebt``.

    Algorithm
    ---------
    1. Drop balances that are not a number (NaN); they cannot be ordered.
    2. Separate members into *creditors* (balance > 0.01) and *debtors*
       (balance < -0.01, kept as a positive magnitude).
    3. Sort both lists by magnitude, largest first. The sort is stable, so
       ties keep the input order and the output is deterministic.
    4. Walk both lists with two cursors: move ``min(creditor, debtor)`` from
       the current debtor to the current creditor, emit a transfer when it
       exceeds one cent, and advance whichever side is exhausted.
    5. Stop when either list runs out. Any leftover is rounding residue and
       is discarded.
    """
    skipped = [b.member for b in balances if b.amount.is_nan()]
    if skipped:
        logger.debug('Skipping non-numeric balances for %s', ', '.join(skipped))
        balances = [b for b in balances if not b.amount.is_nan()]

    creditors = [
        [b.member, b.amount] for b in balances if b.amount > EPSILON
    ]
    debtors = [
        [b.member, -b.amount] for b in balances if b.amount < -EPSILON
    ]
    creditors.sort(key=lambda entry: entry[1], reverse=True)
    debtors.sort(key=lambda entry: entry[1], reverse=True)

    simplified = []
    c_index = 0
    d_index = 0

    while c_index < len(creditors) and d_index < len(debtors):
        creditor = creditors[c_index]
        debtor = debtors[d_index]

        settle_amount = min(creditor[1], debtor[1])
        if settle_amount > EPSILON:
            simplified.append(
                SimplifiedDebt(
                    from_member=debtor[0],
                    to_member=creditor[0],
                    amount=round2(settle_amount),
                )
            )

        creditor[1] -= settle_amount
        debtor[1] -= settle_amount

        if creditor[1] < EPSILON:
            c_index += 1
        if debtor[1] < EPSILON:
            d_index += 1

    logger.debug(
        'Simplified %d creditors and %d debtors into %d transfers',
        len(creditors), len(debtors), len(simplified),
    )
    return simplified
