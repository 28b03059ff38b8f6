"""
Unit tests for expense split allocation.
"""
import pytest
from decimal import Decimal

from apps.expenses.services.exceptions import (
    EmptyMembersError,
    InvalidMemberError,
    SplitValidationError,
    SumMismatchError,
)
from apps.expenses.services.records import SplitType
from apps.expenses.services.rounding import distribute_remainder, round2
from apps.expenses.services.split_calculator import (
    calculate_equal_split,
    calculate_fixed_split,
    calculate_percentage_split,
    calculate_splits,
)

MEMBERS = ['A', 'B', 'C']


def amounts(shares):
    return {s.member: s.amount for s in shares}


class TestRounding:

    def test_round2_rounds_half_up(self):
        assert round2(Decimal('0.005')) == Decimal('0.01')
        assert round2(Decimal('2.675')) == Decimal('2.68')
        assert round2('-1.005') == Decimal('-1.01')

    def test_round2_accepts_floats_via_str(self):
        assert round2(0.1 + 0.2) == Decimal('0.30')

    def test_distribute_remainder_moves_drift_to_last(self):
        result = distribute_remainder([Decimal('33.33')] * 3, Decimal('100'))
        assert result == [Decimal('33.33'), Decimal('33.33'), Decimal('33.34')]

    def test_distribute_remainder_handles_negative_drift(self):
        result = distribute_remainder([Decimal('33.34')] * 3, Decimal('100'))
        assert result == [Decimal('33.34'), Decimal('33.34'), Decimal('33.32')]

    def test_distribute_remainder_does_not_modify_input(self):
        original = [Decimal('50'), Decimal('49.99')]
        distribute_remainder(original, Decimal('100'))
        assert original == [Decimal('50'), Decimal('49.99')]

    def test_distribute_remainder_empty(self):
        assert distribute_remainder([], Decimal('10')) == []


class TestEqualSplit:

    def test_drift_goes_to_last_member(self):
        shares = calculate_equal_split(Decimal('100'), MEMBERS)

        assert [s.member for s in shares] == MEMBERS
        assert amounts(shares) == {
            'A': Decimal('33.33'),
            'B': Decimal('33.33'),
            'C': Decimal('33.34'),
        }

    def test_percentage_is_even(self):
        shares = calculate_equal_split(Decimal('90'), MEMBERS)
        assert {s.percentage for s in shares} == {Decimal('33.3333')}

    def test_single_member_takes_everything(self):
        [share] = calculate_equal_split(Decimal('12.34'), ['A'])
        assert share.amount == Decimal('12.34')
        assert share.percentage == Decimal('100')

    def test_negative_drift(self):
        # 0.05 / 3 rounds up to 0.02 each, so the last member gives back 0.01.
        shares = calculate_equal_split(Decimal('0.05'), MEMBERS)
        assert [s.amount for s in shares] == [Decimal('0.02'), Decimal('0.02'), Decimal('0.01')]

    def test_empty_members_fails(self):
        with pytest.raises(EmptyMembersError):
            calculate_equal_split(Decimal('100'), [])

    @pytest.mark.parametrize('total, count', [
        ('100', 3),
        ('0.01', 7),
        ('1234.56', 9),
        ('999.99', 6),
        ('10', 11),
    ])
    def test_sum_is_exact(self, total, count):
        members = [f'M{i}' for i in range(count)]
        shares = calculate_equal_split(Decimal(total), members)
        assert sum(s.amount for s in shares) == Decimal(total)


class TestPercentageSplit:

    def test_amounts_follow_percentages(self):
        shares = calculate_percentage_split(
            Decimal('100'), {'A': 50, 'B': 30, 'C': 20}, MEMBERS,
        )
        assert amounts(shares) == {
            'A': Decimal('50.00'),
            'B': Decimal('30.00'),
            'C': Decimal('20.00'),
        }
        assert [s.percentage for s in shares] == [Decimal('50'), Decimal('30'), Decimal('20')]

    def test_rounding_drift_is_absorbed(self):
        shares = calculate_percentage_split(
            Decimal('100'),
            {'A': Decimal('33.33'), 'B': Decimal('33.33'), 'C': Decimal('33.34')},
            MEMBERS,
        )
        assert sum(s.amount for s in shares) == Decimal('100')

    def test_sum_within_one_cent_of_hundred_is_accepted(self):
        shares = calculate_percentage_split(
            Decimal('10'), {'A': Decimal('50'), 'B': Decimal('49.99')}, MEMBERS,
        )
        assert sum(s.amount for s in shares) == Decimal('10')

    def test_subset_of_members(self):
        shares = calculate_percentage_split(Decimal('80'), {'B': 100}, MEMBERS)
        assert amounts(shares) == {'B': Decimal('80.00')}

    def test_sum_mismatch(self):
        with pytest.raises(SumMismatchError) as excinfo:
            calculate_percentage_split(Decimal('100'), {'A': 50, 'B': 30}, MEMBERS)

        error = excinfo.value
        assert error.kind == SumMismatchError.PERCENTAGE
        assert error.expected == Decimal('100')
        assert error.actual == Decimal('80')
        assert error.details['kind'] == 'percentage'
        assert '80.00' in error.message

    def test_invalid_member(self):
        with pytest.raises(InvalidMemberError) as excinfo:
            calculate_percentage_split(Decimal('100'), {'A': 50, 'Z': 50}, MEMBERS)
        assert excinfo.value.member == 'Z'
        assert excinfo.value.details == {'member': 'Z'}

    def test_empty_values(self):
        with pytest.raises(EmptyMembersError):
            calculate_percentage_split(Decimal('100'), {}, MEMBERS)


class TestFixedSplit:

    def test_amounts_kept_and_percentages_back_computed(self):
        shares = calculate_fixed_split(
            Decimal('200'), {'A': Decimal('120'), 'B': Decimal('80')}, MEMBERS,
        )
        assert amounts(shares) == {'A': Decimal('120.00'), 'B': Decimal('80.00')}
        assert [s.percentage for s in shares] == [Decimal('60.00'), Decimal('40.00')]

    def test_amounts_are_rounded(self):
        shares = calculate_fixed_split(
            Decimal('10'), {'A': Decimal('3.333'), 'B': Decimal('6.667')}, MEMBERS,
        )
        assert amounts(shares) == {'A': Decimal('3.33'), 'B': Decimal('6.67')}

    def test_sum_mismatch(self):
        with pytest.raises(SumMismatchError) as excinfo:
            calculate_fixed_split(Decimal('100'), {'A': 40, 'B': 40}, MEMBERS)

        assert excinfo.value.kind == SumMismatchError.FIXED
        assert excinfo.value.expected == Decimal('100')
        assert excinfo.value.actual == Decimal('80')

    def test_invalid_member(self):
        with pytest.raises(InvalidMemberError):
            calculate_fixed_split(Decimal('100'), {'Z': 100}, MEMBERS)

    def test_empty_values(self):
        with pytest.raises(EmptyMembersError):
            calculate_fixed_split(Decimal('100'), {}, MEMBERS)


class TestCalculateSplits:

    @pytest.mark.parametrize('split_type, values', [
        (SplitType.EQUAL, None),
        (SplitType.PERCENTAGE, {'A': 25, 'B': 25, 'C': 50}),
        (SplitType.FIXED, {'A': '10.01', 'B': '20.02', 'C': '47.87'}),
    ])
    def test_every_policy_sums_to_total(self, split_type, values):
        shares = calculate_splits(Decimal('77.90'), MEMBERS, split_type, values)
        assert abs(sum(s.amount for s in shares) - Decimal('77.90')) <= Decimal('0.01')

    def test_accepts_plain_string_split_type(self):
        shares = calculate_splits(Decimal('10'), ['A', 'B'], 'equal')
        assert amounts(shares) == {'A': Decimal('5.00'), 'B': Decimal('5.00')}

    def test_unknown_split_type(self):
        with pytest.raises(ValueError):
            calculate_splits(Decimal('10'), ['A'], 'shares')

    def test_missing_custom_values_fail(self):
        with pytest.raises(EmptyMembersError):
            calculate_splits(Decimal('10'), ['A'], SplitType.FIXED)

    def test_validation_errors_share_a_base(self):
        assert issubclass(SumMismatchError, SplitValidationError)
        assert issubclass(InvalidMemberError, SplitValidationError)
        assert issubclass(EmptyMembersError, SplitValidationError)
