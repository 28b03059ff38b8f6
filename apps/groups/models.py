"""
Models for the Groups app.
"""
from django.conf import settings
from django.db import models

from common.models import TimestampedModel


class Group(TimestampedModel):
    """
    A group of people sharing expenses, owned by the user who created it.
    """
    name = models.CharField(max_length=100)
    currency = models.CharField(
        max_length=3,
        default=settings.DEFAULT_CURRENCY,
        help_text='ISO 4217 currency code.',
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='expense_groups',
    )

    class Meta:
        db_table = 'groups'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    @property
    def member_count(self):
        return self.members.count()

    @property
    def member_names(self):
        """Member names in group order."""
        return [m.name for m in self.members.all()]


class GroupMember(TimestampedModel):
    """
    A named participant of a group.

    Members are identified by their display name within the group. The
    ``position`` field keeps the group order, which decides who absorbs the
    rounding cent of an equal split.
    """
    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        related_name='members',
    )
    name = models.CharField(max_length=100)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'group_members'
        unique_together = ['group', 'name']
        ordering = ['position', 'created_at']

    def __str__(self):
        return f'{self.name} in {self.group}'
