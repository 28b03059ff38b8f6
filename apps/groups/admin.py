"""
Admin configuration for the Groups app.
"""
from django.contrib import admin

from apps.groups.models import Group, GroupMember


class GroupMemberInline(admin.TabularInline):
    model = GroupMember
    extra = 0
    readonly_fields = ['created_at']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ['name', 'currency', 'created_by', 'member_count', 'created_at']
    list_filter = ['currency', 'created_at']
    search_fields = ['name', 'members__name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [GroupMemberInline]


@admin.register(GroupMember)
class GroupMemberAdmin(admin.ModelAdmin):
    list_display = ['name', 'group', 'position', 'created_at']
    search_fields = ['name', 'group__name']
