"""
Plain value types the ledger services operate on.

These are deliberately detached from the ORM: the balance, simplification,
split and redistribution functions take and return these records, and
``apps.expenses.services.ledger`` converts between them and model rows.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Tuple

from django.db import models


class SplitType(models.TextChoices):
    EQUAL = 'equal', 'Equal'
    PERCENTAGE = 'percentage', 'Percentage'
    FIXED = 'fixed', 'Fixed Amount'


@dataclass(frozen=True)
class Share:
    member: str
    amount: Decimal
    percentage: Optional[Decimal] = None


@dataclass(frozen=True)
class ExpenseRecord:
    amount: Decimal
    paid_by: str
    split_type: SplitType
    shares: Tuple[Share, ...] = ()
    id: Any = None

    def involves(self, member):
        """True if *member* paid for this expense or holds a share of it."""
        return self.paid_by == member or any(s.member == member for s in self.shares)


@dataclass(frozen=True)
class SettlementRecord:
    amount: Decimal
    from_member: str
    to_member: str
    id: Any = None


@dataclass(frozen=True)
class Balance:
    """Net position of a member: positive is owed by the group, negative owes it."""
    member: str
    amount: Decimal


@dataclass(frozen=True)
class SimplifiedDebt:
    from_member: str
    to_member: str
    amount: Decimal


@dataclass(frozen=True)
class Counterparty:
    member: str
    amount: Decimal


@dataclass
class MemberBalance:
    member: str
    total_owed: Decimal = Decimal('0')
    total_receivable: Decimal = Decimal('0')
    net_balance: Decimal = Decimal('0')
    owes_to: list = field(default_factory=list)
    owed_by: list = field(default_factory=list)


@dataclass(frozen=True)
class RedistributionResult:
    updated_expenses: Tuple[ExpenseRecord, ...] = ()
    settlement_ids_to_delete: Tuple[Any, ...] = ()
