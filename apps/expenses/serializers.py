"""
Serializers for the Expenses app.
All output uses camelCase to match the web client.
"""
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from apps.expenses.models import Expense, ExpenseSplit, Settlement
from apps.expenses.services.exceptions import InvalidMemberError
from apps.expenses.services.ledger import save_expense_shares
from apps.expenses.services.records import SplitType
from apps.expenses.services.split_calculator import calculate_splits
from apps.groups.models import Group

MIN_AMOUNT = Decimal('0.01')


class ExpenseSplitSerializer(serializers.ModelSerializer):
    expenseId = serializers.CharField(source='expense_id', read_only=True)

    class Meta:
        model = ExpenseSplit
        fields = ['id', 'expenseId', 'member', 'amount', 'percentage']
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    groupId = serializers.CharField(source='group_id', read_only=True)
    paidBy = serializers.CharField(source='paid_by', read_only=True)
    splitType = serializers.CharField(source='split_type', read_only=True)
    splits = ExpenseSplitSerializer(many=True, read_only=True)
    receiptNote = serializers.CharField(source='receipt_note', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id', 'groupId', 'description', 'amount', 'date', 'category',
            'paidBy', 'splitType', 'splits', 'receiptNote', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class SplitValueSerializer(serializers.Serializer):
    """One entry of a percentage or fixed split: ``{"memberId": "Ali", "value": 40}``."""
    memberId = serializers.CharField(max_length=100)
    value = serializers.DecimalField(max_digits=12, decimal_places=4)


def _first_duplicate(names):
    seen = set()
    for name in names:
        if name in seen:
            return name
        seen.add(name)
    return None


class DistinctMembersMixin:
    """
    Reject a member listed twice in ``members`` or ``splits``.

    Each member holds at most one share of an expense.
    """

    def validate_members(self, value):
        duplicate = _first_duplicate(value)
        if duplicate is not None:
            raise serializers.ValidationError(f'"{duplicate}" is listed more than once.')
        return value

    def validate_splits(self, value):
        duplicate = _first_duplicate(s['memberId'] for s in value)
        if duplicate is not None:
            raise serializers.ValidationError(f'"{duplicate}" has more than one split value.')
        return value


class ExpenseWriteSerializer(DistinctMembersMixin, serializers.Serializer):
    """
    Accepts camelCase from the client and computes the splits.

    ``members`` limits an equal split to a subset of the group (all members
    by default). ``splits`` carries the percentages or fixed amounts of the
    other split types. On partial updates, omitted fields keep their stored
    values and the splits are only recomputed when something that affects
    them changes.
    """
    SPLIT_FIELDS = ('amount', 'splitType', 'splits', 'members')

    groupId = serializers.UUIDField()
    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=MIN_AMOUNT)
    date = serializers.DateField(required=False)
    paidBy = serializers.CharField(max_length=100)
    splitType = serializers.ChoiceField(choices=SplitType.choices, default=SplitType.EQUAL)
    members = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    splits = SplitValueSerializer(many=True, required=False)
    category = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    receiptNote = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_groupId(self, value):
        try:
            group = Group.objects.get(id=value, created_by=self.context['request'].user)
        except Group.DoesNotExist:
            raise serializers.ValidationError('Group not found.')

        if self.instance is not None and group.pk != self.instance.group_id:
            raise serializers.ValidationError('Expenses cannot be moved between groups.')
        return group

    def validate(self, attrs):
        group = attrs.get('groupId') or self.instance.group
        group_members = group.member_names

        paid_by = self._current(attrs, 'paidBy', 'paid_by')
        if paid_by not in group_members:
            raise serializers.ValidationError({'paidBy': f'"{paid_by}" is not a member of this group.'})

        attrs['group'] = group
        if self.instance is None or any(key in attrs for key in self.SPLIT_FIELDS):
            attrs['shares'] = self._compute_shares(attrs, group_members)
        return attrs

    def _current(self, attrs, key, attr):
        if key in attrs or self.instance is None:
            return attrs.get(key)
        return getattr(self.instance, attr)

    def _compute_shares(self, attrs, group_members):
        amount = self._current(attrs, 'amount', 'amount')
        split_type = SplitType(self._current(attrs, 'splitType', 'split_type'))
        stored = list(self.instance.splits.all()) if self.instance is not None else []

        if split_type is SplitType.EQUAL:
            if 'members' in attrs:
                participants = attrs['members']
            elif stored and self.instance.split_type == SplitType.EQUAL:
                participants = [s.member for s in stored]
            else:
                participants = group_members
            for member in participants:
                if member not in group_members:
                    raise InvalidMemberError(member)
            return calculate_splits(amount, participants, split_type)

        if 'splits' in attrs:
            custom_values = {s['memberId']: s['value'] for s in attrs['splits']}
        elif stored and self.instance.split_type == split_type:
            custom_values = {
                s.member: (s.percentage if split_type is SplitType.PERCENTAGE else s.amount)
                for s in stored
            }
        else:
            custom_values = {}
        return calculate_splits(amount, group_members, split_type, custom_values)

    @transaction.atomic
    def create(self, validated_data):
        expense = Expense.objects.create(
            group=validated_data['group'],
            description=validated_data['description'],
            amount=validated_data['amount'],
            date=validated_data.get('date') or timezone.localdate(),
            paid_by=validated_data['paidBy'],
            split_type=validated_data['splitType'],
            category=validated_data.get('category', ''),
            receipt_note=validated_data.get('receiptNote', ''),
        )
        save_expense_shares(expense, validated_data['shares'])
        return expense

    @transaction.atomic
    def update(self, instance, validated_data):
        field_map = {
            'description': 'description',
            'amount': 'amount',
            'date': 'date',
            'paidBy': 'paid_by',
            'splitType': 'split_type',
            'category': 'category',
            'receiptNote': 'receipt_note',
        }
        for key, attr in field_map.items():
            if key in validated_data:
                setattr(instance, attr, validated_data[key])
        instance.save()

        if 'shares' in validated_data:
            save_expense_shares(instance, validated_data['shares'])
        return instance


class SplitPreviewSerializer(DistinctMembersMixin, serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=MIN_AMOUNT)
    members = serializers.ListField(child=serializers.CharField(max_length=100))
    splitType = serializers.ChoiceField(choices=SplitType.choices, default=SplitType.EQUAL)
    splits = SplitValueSerializer(many=True, required=False, default=list)


class ShareSerializer(serializers.Serializer):
    member = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage = serializers.DecimalField(max_digits=9, decimal_places=4, allow_null=True)


# ---------------------------------------------------------------------------
# Settlements
# ---------------------------------------------------------------------------

class SettlementSerializer(serializers.ModelSerializer):
    groupId = serializers.CharField(source='group_id', read_only=True)
    fromMember = serializers.CharField(source='from_member', read_only=True)
    toMember = serializers.CharField(source='to_member', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Settlement
        fields = [
            'id', 'groupId', 'fromMember', 'toMember', 'amount',
            'method', 'date', 'note', 'createdAt',
        ]
        read_only_fields = fields


class SettlementCreateSerializer(serializers.Serializer):
    groupId = serializers.UUIDField()
    fromMember = serializers.CharField(max_length=100)
    toMember = serializers.CharField(max_length=100)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=MIN_AMOUNT)
    method = serializers.CharField(max_length=50, required=False, default='cash')
    date = serializers.DateField(required=False)
    note = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_groupId(self, value):
        try:
            return Group.objects.get(id=value, created_by=self.context['request'].user)
        except Group.DoesNotExist:
            raise serializers.ValidationError('Group not found.')

    def validate(self, attrs):
        group_members = attrs['groupId'].member_names
        errors = {}
        for key in ('fromMember', 'toMember'):
            if attrs[key] not in group_members:
                errors[key] = f'"{attrs[key]}" is not a member of this group.'
        if not errors and attrs['fromMember'] == attrs['toMember']:
            errors['toMember'] = 'A member cannot pay themselves.'
        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def create(self, validated_data):
        return Settlement.objects.create(
            group=validated_data['groupId'],
            from_member=validated_data['fromMember'],
            to_member=validated_data['toMember'],
            amount=validated_data['amount'],
            method=validated_data.get('method', 'cash'),
            date=validated_data.get('date') or timezone.localdate(),
            note=validated_data.get('note', ''),
        )


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------

class BalanceSerializer(serializers.Serializer):
    member = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class SimplifiedDebtSerializer(serializers.Serializer):
    fromMember = serializers.CharField(source='from_member')
    toMember = serializers.CharField(source='to_member')
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class CounterpartySerializer(serializers.Serializer):
    member = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class MemberBalanceSerializer(serializers.Serializer):
    member = serializers.CharField()
    totalOwed = serializers.DecimalField(source='total_owed', max_digits=14, decimal_places=2)
    totalReceivable = serializers.DecimalField(source='total_receivable', max_digits=14, decimal_places=2)
    netBalance = serializers.DecimalField(source='net_balance', max_digits=14, decimal_places=2)
    owesTo = CounterpartySerializer(source='owes_to', many=True)
    owedBy = CounterpartySerializer(source='owed_by', many=True)


class SettlementPlanSerializer(serializers.Serializer):
    balances = BalanceSerializer(many=True)
    debts = SimplifiedDebtSerializer(many=True)
    memberBalances = MemberBalanceSerializer(source='member_balances', many=True)
