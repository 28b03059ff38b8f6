"""
Domain-specific exceptions for the groups app.

These represent business rule violations; the DRF exception handler turns
them into 4xx responses carrying their ``code``.
"""
from rest_framework import status

from common.exceptions import ServiceError


class GroupsServiceError(ServiceError):
    """Base exception for all groups service errors."""
    code = 'groups_error'


class DuplicateMemberError(GroupsServiceError):
    """Raised when a name is already taken inside the group."""
    code = 'duplicate_member'

    def __init__(self, name):
        super().__init__(f'"{name}" is already a member of this group.', details={'member': name})


class InvalidMemberNameError(GroupsServiceError):
    """Raised when a member name is blank."""
    code = 'invalid_member_name'
    default_message = 'Member name must not be blank.'


class MemberNotFoundError(GroupsServiceError):
    """Raised when the member to act on is not in the group."""
    code = 'member_not_found'
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, name):
        super().__init__(f'"{name}" is not a member of this group.', details={'member': name})


class LastMemberError(GroupsServiceError):
    """Raised when removing a member would leave the group empty."""
    code = 'last_member'
    default_message = 'Cannot remove the last member.'


class InvalidImportError(GroupsServiceError):
    """Raised when an import payload is malformed."""
    code = 'invalid_import'
    default_message = 'Import data is malformed.'
