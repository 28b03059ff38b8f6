"""
Custom permissions for the Groups app.
"""
from rest_framework.permissions import BasePermission

from apps.groups.models import Group


class IsGroupOwner(BasePermission):
    """
    Allows access only to the user who created the group.
    Checks the group from the object or from URL kwargs.
    """
    message = 'You do not have access to this group.'

    def has_object_permission(self, request, view, obj):
        # obj can be a Group or anything with a ``group`` attribute
        group = obj if isinstance(obj, Group) else getattr(obj, 'group', None)
        if group is None:
            return False

        return group.created_by_id == request.user.id

    def has_permission(self, request, view):
        group_pk = view.kwargs.get('group_pk')
        if group_pk is None:
            return True  # Let object permission handle it

        return Group.objects.filter(
            id=group_pk,
            created_by=request.user,
        ).exists()
