"""
Views for the Groups app.
"""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import generics, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.groups.models import Group, GroupMember
from apps.groups.permissions import IsGroupOwner
from apps.groups.serializers import (
    AddMemberSerializer,
    DataImportSerializer,
    GroupCreateSerializer,
    GroupMemberSerializer,
    GroupSerializer,
    GroupUpdateSerializer,
    RemoveMemberSerializer,
)
from apps.groups.services import (
    add_member,
    export_user_data,
    import_user_data,
    remove_member,
)

logger = logging.getLogger(__name__)


class GroupViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Group CRUD operations.

    list:   GET    /api/v1/groups/
    create: POST   /api/v1/groups/
    read:   GET    /api/v1/groups/{id}/
    update: PATCH  /api/v1/groups/{id}/
    delete: DELETE /api/v1/groups/{id}/
    """
    permission_classes = [IsAuthenticated, IsGroupOwner]

    def get_queryset(self):
        return Group.objects.filter(
            created_by=self.request.user,
        ).prefetch_related('members')

    def get_serializer_class(self):
        if self.action == 'create':
            return GroupCreateSerializer
        if self.action in ('update', 'partial_update'):
            return GroupUpdateSerializer
        return GroupSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        group = serializer.save()
        return Response(
            {
                'success': True,
                'data': GroupSerializer(group).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = GroupSerializer(instance)
        return Response({'success': True, 'data': serializer.data})

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = GroupSerializer(queryset, many=True)
        return Response({'success': True, 'data': serializer.data})

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        group = serializer.save()
        return Response({'success': True, 'data': GroupSerializer(group).data})

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        logger.info('Deleting group %s with all its expenses and settlements', instance.id)
        instance.delete()
        return Response(
            {'success': True, 'message': 'Group deleted.'},
            status=status.HTTP_200_OK,
        )


class GroupMemberListView(generics.ListCreateAPIView):
    """
    List or add members of a group.

    GET  /api/v1/groups/{group_id}/members/
    POST /api/v1/groups/{group_id}/members/
    """
    permission_classes = [IsAuthenticated, IsGroupOwner]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return AddMemberSerializer
        return GroupMemberSerializer

    def get_group(self):
        return get_object_or_404(Group, id=self.kwargs['group_pk'], created_by=self.request.user)

    def get_queryset(self):
        return GroupMember.objects.filter(group_id=self.kwargs['group_pk'])

    def list(self, request, *args, **kwargs):
        serializer = GroupMemberSerializer(self.get_queryset(), many=True)
        return Response({'success': True, 'data': serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        member = add_member(group=self.get_group(), name=serializer.validated_data['name'])
        return Response(
            {
                'success': True,
                'data': GroupMemberSerializer(member).data,
            },
            status=status.HTTP_201_CREATED,
        )


class RemoveMemberView(generics.GenericAPIView):
    """
    Remove a member and redistribute their share of past expenses.

    POST /api/v1/groups/{group_id}/members/remove/
    Body: {"member": "name", "fallbackPayer": "name"}
    """
    serializer_class = RemoveMemberSerializer
    permission_classes = [IsAuthenticated, IsGroupOwner]

    def post(self, request, group_pk=None):
        group = get_object_or_404(Group, id=group_pk, created_by=request.user)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = remove_member(
            group=group,
            member=serializer.validated_data['member'],
            fallback_payer=serializer.validated_data['fallbackPayer'],
        )
        group.refresh_from_db()

        return Response(
            {
                'success': True,
                'data': {
                    'group': GroupSerializer(group).data,
                    'updatedExpenses': [str(e.id) for e in result.updated_expenses],
                    'deletedSettlements': [str(pk) for pk in result.settlement_ids_to_delete],
                },
                'message': 'Member removed.',
            }
        )


class DataExportView(APIView):
    """
    Export every group of the current user as JSON.

    GET /api/v1/groups/export/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({'success': True, 'data': export_user_data(request.user)})


class DataImportView(generics.GenericAPIView):
    """
    Replace the current user's groups with an exported JSON document.

    POST /api/v1/groups/import/
    """
    serializer_class = DataImportSerializer
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        groups = import_user_data(request.user, serializer.validated_data)
        return Response(
            {
                'success': True,
                'data': GroupSerializer(groups, many=True).data,
                'message': 'Data imported successfully.',
            },
            status=status.HTTP_201_CREATED,
        )
