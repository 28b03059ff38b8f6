"""
Errors raised while allocating an expense across members.

All of them are raised before any share is produced, so callers can simply
re-prompt for input.
"""
from common.exceptions import ServiceError


class SplitValidationError(ServiceError, ValueError):
    """Base exception for invalid split input."""
    code = 'split_validation_error'
    default_message = 'Invalid split.'


class EmptyMembersError(SplitValidationError):
    """Raised when there is nobody to split an expense between."""
    code = 'empty_members'
    default_message = 'Cannot split an expense with no members.'


class InvalidMemberError(SplitValidationError):
    """Raised when a split references someone outside the allowed members."""
    code = 'invalid_member'

    def __init__(self, member):
        self.member = member
        super().__init__(
            f'Member "{member}" is not in this group.',
            details={'member': member},
        )


class SumMismatchError(SplitValidationError):
    """Raised when percentages or fixed amounts do not add up."""
    code = 'sum_mismatch'

    PERCENTAGE = 'percentage'
    FIXED = 'fixed'

    def __init__(self, expected, actual, kind):
        self.expected = expected
        self.actual = actual
        self.kind = kind
        if kind == self.PERCENTAGE:
            message = f'Percentages must sum to {expected}% (current: {actual:.2f}%).'
        else:
            message = f'Split amounts must equal total (split: {actual:.2f}, total: {expected:.2f}).'
        super().__init__(
            message,
            details={'expected': str(expected), 'actual': str(actual), 'kind': kind},
        )
