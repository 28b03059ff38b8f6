"""
URL configuration for the Groups app.
"""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from apps.groups.views import (
    DataExportView,
    DataImportView,
    GroupMemberListView,
    GroupViewSet,
    RemoveMemberView,
)

app_name = 'groups'

router = DefaultRouter()
router.register(r'', GroupViewSet, basename='group')

urlpatterns = [
    # Explicit paths BEFORE router to avoid conflicts with router's {pk} patterns
    path('export/', DataExportView.as_view(), name='data-export'),
    path('import/', DataImportView.as_view(), name='data-import'),
    path(
        '<uuid:group_pk>/members/',
        GroupMemberListView.as_view(),
        name='group-member-list',
    ),
    path(
        '<uuid:group_pk>/members/remove/',
        RemoveMemberView.as_view(),
        name='group-member-remove',
    ),
    path('', include(router.urls)),
]
