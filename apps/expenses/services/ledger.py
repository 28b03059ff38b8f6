"""
Bridge between the ORM and the pure ledger services.

Loads a group's expenses and settlements as plain records, runs the balance
and simplification steps over them, and writes computed shares back.
"""
import logging
from dataclasses import dataclass, field

from apps.expenses.models import Expense, ExpenseSplit, Settlement
from apps.expenses.services.balance_calculator import calculate_balances, get_member_balance
from apps.expenses.services.debt_simplifier import simplify_debts
from apps.expenses.services.records import ExpenseRecord, SettlementRecord, Share, SplitType

logger = logging.getLogger(__name__)


@dataclass
class GroupLedger:
    members: list
    expenses: list = field(default_factory=list)
    settlements: list = field(default_factory=list)


@dataclass
class SettlementPlan:
    balances: list
    debts: list
    member_balances: list


def expense_to_record(expense):
    return ExpenseRecord(
        id=expense.id,
        amount=expense.amount,
        paid_by=expense.paid_by,
        split_type=SplitType(expense.split_type),
        shares=tuple(
            Share(member=s.member, amount=s.amount, percentage=s.percentage)
            for s in expense.splits.all()
        ),
    )


def settlement_to_record(settlement):
    return SettlementRecord(
        id=settlement.id,
        amount=settlement.amount,
        from_member=settlement.from_member,
        to_member=settlement.to_member,
    )


def get_group_ledger(group):
    """Snapshot *group* as ordered member names plus expense/settlement records."""
    expenses = Expense.objects.filter(group=group).prefetch_related('splits')
    settlements = Settlement.objects.filter(group=group)
    return GroupLedger(
        members=group.member_names,
        expenses=[expense_to_record(e) for e in expenses],
        settlements=[settlement_to_record(s) for s in settlements],
    )


def get_group_balances(group):
    ledger = get_group_ledger(group)
    return calculate_balances(ledger.members, ledger.expenses, ledger.settlements)


def get_settlement_plan(group):
    """
    Compute balances, suggested transfers and per-member views for *group*.
    """
    ledger = get_group_ledger(group)
    balances = calculate_balances(ledger.members, ledger.expenses, ledger.settlements)
    debts = simplify_debts(balances)
    return SettlementPlan(
        balances=balances,
        debts=debts,
        member_balances=[get_member_balance(m, debts) for m in ledger.members],
    )


def save_expense_shares(expense, shares):
    """
    Replace the stored splits of *expense* with *shares*.

    Must run inside the caller's transaction so the expense never exists
    with a partial set of splits.
    """
    expense.splits.all().delete()
    ExpenseSplit.objects.bulk_create([
        ExpenseSplit(
            expense=expense,
            member=share.member,
            amount=share.amount,
            percentage=share.percentage,
            position=index,
        )
        for index, share in enumerate(shares)
    ])
