"""
Custom permissions for the Expenses app.
"""
from rest_framework.permissions import BasePermission


class IsExpenseGroupOwner(BasePermission):
    """
    Allows access only to the owner of the group an expense or settlement
    belongs to.
    """
    message = 'You do not have access to this group.'

    def has_object_permission(self, request, view, obj):
        return obj.group.created_by_id == request.user.id
