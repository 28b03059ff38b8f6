"""
Serializers for the Groups app.
All output uses camelCase to match the web client.
"""
from django.conf import settings
from rest_framework import serializers

from apps.expenses.services.records import SplitType
from apps.expenses.services.rounding import round2, round_percentage
from apps.groups.models import Group, GroupMember
from apps.groups.services import create_group


class GroupMemberSerializer(serializers.ModelSerializer):
    groupId = serializers.CharField(source='group_id', read_only=True)
    joinedAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = GroupMember
        fields = ['id', 'groupId', 'name', 'position', 'joinedAt']
        read_only_fields = fields


class GroupSerializer(serializers.ModelSerializer):
    members = serializers.ListField(source='member_names', child=serializers.CharField(), read_only=True)
    memberCount = serializers.ReadOnlyField(source='member_count')
    createdBy = serializers.CharField(source='created_by.id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Group
        fields = [
            'id', 'name', 'currency', 'members', 'memberCount',
            'createdBy', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class GroupCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    currency = serializers.CharField(max_length=3, default=settings.DEFAULT_CURRENCY)
    members = serializers.ListField(
        child=serializers.CharField(max_length=100, allow_blank=True),
        allow_empty=False,
    )

    def create(self, validated_data):
        return create_group(
            user=self.context['request'].user,
            name=validated_data['name'],
            currency=validated_data['currency'],
            members=validated_data['members'],
        )


class GroupUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Group
        fields = ['name', 'currency']

    def validate_currency(self, value):
        return value.upper()


class AddMemberSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, allow_blank=True)


class RemoveMemberSerializer(serializers.Serializer):
    member = serializers.CharField(max_length=100)
    fallbackPayer = serializers.CharField(max_length=100, required=False, allow_null=True, default=None)


# ---------------------------------------------------------------------------
# Import payload
# ---------------------------------------------------------------------------

class RoundedAmountsMixin:
    """
    Round incoming amounts before field validation.

    Offline backups store floats with arbitrary precision, which the
    ``DecimalField`` limits would otherwise reject.
    """
    rounded_fields = {'amount': round2}

    def to_internal_value(self, data):
        if isinstance(data, dict):
            data = dict(data)
            for key, rounder in self.rounded_fields.items():
                if data.get(key) is not None:
                    data[key] = _rounded(data[key], rounder)
        return super().to_internal_value(data)


class ImportSplitSerializer(RoundedAmountsMixin, serializers.Serializer):
    rounded_fields = {'amount': round2, 'percentage': round_percentage}

    memberId = serializers.CharField(max_length=100)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)
    percentage = serializers.DecimalField(
        max_digits=9, decimal_places=4, required=False, allow_null=True, coerce_to_string=False,
    )


class ImportGroupSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField(max_length=100)
    currency = serializers.CharField(max_length=3, default=settings.DEFAULT_CURRENCY)
    members = serializers.ListField(child=serializers.CharField(max_length=100), default=list)


class ImportExpenseSerializer(RoundedAmountsMixin, serializers.Serializer):
    id = serializers.CharField(required=False)
    groupId = serializers.CharField()
    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    date = serializers.DateField()
    paidBy = serializers.CharField(max_length=100)
    splitType = serializers.ChoiceField(choices=SplitType.choices)
    splits = ImportSplitSerializer(many=True, default=list)
    category = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    receiptNote = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ImportSettlementSerializer(RoundedAmountsMixin, serializers.Serializer):
    id = serializers.CharField(required=False)
    groupId = serializers.CharField()
    fromMember = serializers.CharField(max_length=100)
    toMember = serializers.CharField(max_length=100)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    method = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    date = serializers.DateField()
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DataImportSerializer(serializers.Serializer):
    groups = ImportGroupSerializer(many=True, default=list)
    expenses = ImportExpenseSerializer(many=True, default=list)
    settlements = ImportSettlementSerializer(many=True, default=list)


def _rounded(value, rounder):
    try:
        return str(rounder(value))
    except (ArithmeticError, ValueError, TypeError):
        # Leave it to the field to report the bad value.
        return value
