"""
Group management service.
"""
import logging
from typing import Iterable, Optional

from django.conf import settings
from django.db import transaction

from apps.groups.models import Group, GroupMember

from .exceptions import DuplicateMemberError, InvalidMemberNameError

logger = logging.getLogger(__name__)


def normalize_member_names(names: Iterable[str]) -> list:
    """
    Strip whitespace from *names* and reject blanks and duplicates.

    Raises:
        InvalidMemberNameError: If a name is blank
        DuplicateMemberError: If a name appears twice
    """
    cleaned = []
    for raw in names:
        name = (raw or '').strip()
        if not name:
            raise InvalidMemberNameError()
        if name in cleaned:
            raise DuplicateMemberError(name)
        cleaned.append(name)
    return cleaned


@transaction.atomic
def create_group(
    *,
    user,
    name: str,
    members: Iterable[str],
    currency: Optional[str] = None,
) -> Group:
    """
    Create a group together with its ordered member list.

    Args:
        user: Owner of the new group
        name: Display name of the group
        members: Member names, in the order used for equal splits
        currency: ISO 4217 code; defaults to ``settings.DEFAULT_CURRENCY``

    Returns:
        The created Group
    """
    names = normalize_member_names(members)
    group = Group.objects.create(
        name=name,
        currency=(currency or settings.DEFAULT_CURRENCY).upper(),
        created_by=user,
    )
    GroupMember.objects.bulk_create([
        GroupMember(group=group, name=member, position=index)
        for index, member in enumerate(names)
    ])
    logger.info('Created group %s with %d members', group.id, len(names))
    return group
