"""
Net balances per member, and per-member views of a settlement plan.

Balances are never stored; they are folded from scratch out of the expense
and settlement records every time they are needed.
"""
from collections import defaultdict
from decimal import Decimal

from apps.expenses.services.records import Balance, Counterparty, MemberBalance


def calculate_balances(members, expenses, settlements):
    """
    Compute the net balance of every member in *members*.

    Algorithm
    ---------
    1. Every listed member starts at zero.
    2. For each expense, the payer is credited the full amount and each
       share holder is debited their share. A payer who also holds a share
       nets out naturally.
    3. For each settlement, the sender is credited and the receiver debited,
       exactly like an expense paid by the sender and consumed entirely by
       the receiver.
    4. Return one ``Balance`` per listed member, in the given order.

    Members that only appear in the records (for example someone already
    removed from the group) still take part in the arithmetic but are not
    reported.
    """
    net_balance = defaultdict(Decimal)
    for member in members:
        net_balance[member] = Decimal('0')

    for expense in expenses:
        net_balance[expense.paid_by] += expense.amount
        for share in expense.shares:
            net_balance[share.member] -= share.amount

    for settlement in settlements:
        net_balance[settlement.from_member] += settlement.amount
        net_balance[settlement.to_member] -= settlement.amount

    return [Balance(member=member, amount=net_balance[member]) for member in members]


def get_member_balance(member, debts):
    """
    Aggregate a list of ``SimplifiedDebt`` from *member*'s point of view.

    ``net_balance`` is what others owe the member minus what the member owes.
    """
    view = MemberBalance(member=member)

    for debt in debts or ():
        if debt.from_member == member:
            view.total_owed += debt.amount
            view.owes_to.append(Counterparty(member=debt.to_member, amount=debt.amount))
        elif debt.to_member == member:
            view.total_receivable += debt.amount
            view.owed_by.append(Counterparty(member=debt.from_member, amount=debt.amount))

    view.net_balance = view.total_receivable - view.total_owed
    return view
