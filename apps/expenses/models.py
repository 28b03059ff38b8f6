"""
Models for the Expenses app.
"""
from django.db import models

from apps.expenses.services.records import SplitType
from common.models import TimestampedModel


class Expense(TimestampedModel):
    """
    An expense paid by one member of a group and shared among members.

    ``paid_by`` holds the member's name, as members have no row of their own
    outside the group membership table.
    """
    SplitType = SplitType

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='expenses',
    )
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateField()
    paid_by = models.CharField(max_length=100)
    split_type = models.CharField(
        max_length=20,
        choices=SplitType.choices,
        default=SplitType.EQUAL,
    )
    category = models.CharField(max_length=50, blank=True, default='', db_index=True)
    receipt_note = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'expenses'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'{self.description} - {self.amount}'


class ExpenseSplit(TimestampedModel):
    """
    One member's share of an expense.
    """
    expense = models.ForeignKey(
        Expense,
        on_delete=models.CASCADE,
        related_name='splits',
    )
    member = models.CharField(max_length=100)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text='Amount owed by this member.',
    )
    percentage = models.DecimalField(
        max_digits=9,
        decimal_places=4,
        null=True,
        blank=True,
        help_text='Share of the total in percent; informational only.',
    )
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'expense_splits'
        unique_together = ['expense', 'member']
        ordering = ['position']

    def __str__(self):
        return f'{self.member} owes {self.amount} for {self.expense}'


class Settlement(TimestampedModel):
    """
    A direct payment from one member to another.
    """
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='settlements',
    )
    from_member = models.CharField(
        max_length=100,
        help_text='The member who paid.',
    )
    to_member = models.CharField(
        max_length=100,
        help_text='The member who received the payment.',
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=50, blank=True, default='cash')
    date = models.DateField()
    note = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'settlements'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'{self.from_member} -> {self.to_member}: {self.amount}'
