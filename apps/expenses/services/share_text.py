"""
Plain-text settlement summary for sharing in chat apps.
"""
from collections import defaultdict
from decimal import Decimal

from apps.expenses.services.rounding import round2

RECENT_EXPENSE_LIMIT = 5


def format_currency(amount, currency='PKR'):
    """
    Format *amount* with a thousands separator and up to two decimals.

    Whole amounts drop the fraction (``PKR 1,200``); others keep two digits
    (``PKR 1,200.50``).
    """
    value = round2(amount)
    if value == value.to_integral_value():
        text = f'{value:,.0f}'
    else:
        text = f'{value:,.2f}'
    return f'{currency} {text}'


def generate_share_text(group_name, currency, debts, expenses=None):
    """
    Build a settlement summary for *group_name*.

    *debts* is a list of ``SimplifiedDebt``. When *expenses* (model instances
    or anything with ``amount``, ``description`` and ``category``) is given,
    an overview with totals, category breakdown and the most recent entries
    is included as well.
    """
    lines = [f'*{group_name} - Settlement Summary*', '']

    if expenses:
        total_spent = sum((e.amount for e in expenses), Decimal('0'))
        category_totals = defaultdict(Decimal)
        for expense in expenses:
            category_totals[expense.category or 'Other'] += expense.amount

        lines.append('*Trip Overview*')
        lines.append(f'Total Spent: {format_currency(total_spent, currency)}')
        lines.append(f'Total Expenses: {len(expenses)}')
        lines.append('')

        lines.append('*Categories*')
        for category, amount in sorted(category_totals.items(), key=lambda kv: kv[1], reverse=True):
            lines.append(f'- {category}: {format_currency(amount, currency)}')

        lines.append('')
        lines.append('*Recent Expenses*')
        for index, expense in enumerate(expenses[:RECENT_EXPENSE_LIMIT], start=1):
            category = f' [{expense.category}]' if expense.category else ''
            lines.append(
                f'{index}. {expense.description}{category}: '
                f'{format_currency(expense.amount, currency)}'
            )
        if len(expenses) > RECENT_EXPENSE_LIMIT:
            lines.append(f'... and {len(expenses) - RECENT_EXPENSE_LIMIT} more expenses')
        lines.append('')

    if not debts:
        lines.append('*All Settled Up!*')
        lines.append('')
        lines.append("Everyone's balances are clear!")
    else:
        lines.append('*Settlements Needed*')
        for index, debt in enumerate(debts, start=1):
            lines.append(
                f'{index}. {debt.from_member} -> {debt.to_member}: '
                f'{format_currency(debt.amount, currency)}'
            )

    lines.append('')
    lines.append('_Generated by Expense Splitter_')
    return '\n'.join(lines)
