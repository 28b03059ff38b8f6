"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations run inside a transaction.
"""

from .exceptions import (
    GroupsServiceError,
    DuplicateMemberError,
    InvalidMemberNameError,
    MemberNotFoundError,
    LastMemberError,
    InvalidImportError,
)

from .group_management import (
    create_group,
    normalize_member_names,
)

from .membership_management import (
    add_member,
    remove_member,
)

from .data_transfer import (
    export_user_data,
    import_user_data,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'DuplicateMemberError',
    'InvalidMemberNameError',
    'MemberNotFoundError',
    'LastMemberError',
    'InvalidImportError',

    # Group Management
    'create_group',
    'normalize_member_names',

    # Membership Management
    'add_member',
    'remove_member',

    # Export / Import
    'export_user_data',
    'import_user_data',
]
