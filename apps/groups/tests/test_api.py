import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.expenses.models import Expense, ExpenseSplit, Settlement
from apps.groups.models import Group, GroupMember


# =============================================================================
# Group CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupCreate:
    """Tests for POST /api/v1/groups/"""

    def test_create_group(self, authenticated_client, group_owner):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {
            'name': 'Hunza Trip',
            'members': ['Ali', 'Sara', 'Omar'],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        data = response.data['data']
        assert data['members'] == ['Ali', 'Sara', 'Omar']
        assert data['memberCount'] == 3
        assert data['currency'] == 'PKR'
        assert Group.objects.get(id=data['id']).created_by == group_owner

    def test_duplicate_members(self, authenticated_client):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {
            'name': 'Trip',
            'members': ['Ali', 'Ali'],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'duplicate_member'
        assert not Group.objects.exists()

    def test_blank_member(self, authenticated_client):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {
            'name': 'Trip',
            'members': ['Ali', ''],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_member_name'

    def test_members_required(self, authenticated_client):
        url = reverse('groups:group-list')
        response = authenticated_client.post(url, {'name': 'Trip', 'members': []}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'members' in response.data['error']['details']

    def test_create_group_unauthenticated(self, api_client):
        url = reverse('groups:group-list')
        response = api_client.post(url, {'name': 'Trip'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestGroupReadUpdateDelete:
    """Tests for /api/v1/groups/ and /api/v1/groups/{id}/"""

    def test_list_only_own_groups(self, authenticated_client, other_client, group):
        url = reverse('groups:group-list')

        response = authenticated_client.get(url)
        assert [g['name'] for g in response.data['data']] == ['Weekend']

        response = other_client.get(url)
        assert response.data['data'] == []

    def test_retrieve(self, authenticated_client, group):
        url = reverse('groups:group-detail', args=[group.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['members'] == ['A', 'B', 'C']

    def test_retrieve_other_users_group(self, other_client, group):
        url = reverse('groups:group-detail', args=[group.id])
        response = other_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_name_and_currency(self, authenticated_client, group):
        url = reverse('groups:group-detail', args=[group.id])
        response = authenticated_client.patch(url, {'name': 'Long Weekend', 'currency': 'usd'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['name'] == 'Long Weekend'
        assert response.data['data']['currency'] == 'USD'

    def test_delete_removes_ledger(self, authenticated_client, group, equal_expense, settlements):
        url = reverse('groups:group-detail', args=[group.id])
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not Group.objects.filter(id=group.id).exists()
        assert not Expense.objects.exists()
        assert not Settlement.objects.exists()


# =============================================================================
# Membership Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupMembers:
    """Tests for /api/v1/groups/{id}/members/"""

    def test_list_members(self, authenticated_client, group):
        url = reverse('groups:group-member-list', args=[group.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [(m['name'], m['position']) for m in response.data['data']] == [
            ('A', 0), ('B', 1), ('C', 2),
        ]

    def test_add_member(self, authenticated_client, group):
        url = reverse('groups:group-member-list', args=[group.id])
        response = authenticated_client.post(url, {'name': 'D'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['data']['position'] == 3
        assert group.member_names == ['A', 'B', 'C', 'D']

    def test_add_duplicate_member(self, authenticated_client, group):
        url = reverse('groups:group-member-list', args=[group.id])
        response = authenticated_client.post(url, {'name': 'A'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'duplicate_member'

    def test_other_user_cannot_add(self, other_client, group):
        url = reverse('groups:group-member-list', args=[group.id])
        response = other_client.post(url, {'name': 'D'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert GroupMember.objects.filter(group=group).count() == 3


@pytest.mark.django_db
class TestRemoveMember:
    """Tests for POST /api/v1/groups/{id}/members/remove/"""

    def test_remove_member_redistributes(
        self, authenticated_client, group, equal_expense, percentage_expense, untouched_expense, settlements,
    ):
        url = reverse('groups:group-member-remove', args=[group.id])
        response = authenticated_client.post(url, {'member': 'C', 'fallbackPayer': 'B'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        data = response.data['data']
        assert data['group']['members'] == ['A', 'B']
        assert set(data['updatedExpenses']) == {str(equal_expense.id), str(percentage_expense.id)}
        assert data['deletedSettlements'] == [str(settlements[0].id)]

        splits = ExpenseSplit.objects.filter(expense=percentage_expense)
        assert {s.member: s.amount for s in splits} == {'A': Decimal('62.50'), 'B': Decimal('37.50')}

        balances_url = reverse('expenses:group-balances', args=[group.id])
        balances = authenticated_client.get(balances_url).data['data']['balances']
        assert [b['member'] for b in balances] == ['A', 'B']

    def test_remove_unknown_member(self, authenticated_client, group):
        url = reverse('groups:group-member-remove', args=[group.id])
        response = authenticated_client.post(url, {'member': 'Z'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error']['code'] == 'member_not_found'

    def test_remove_last_member(self, authenticated_client, group):
        url = reverse('groups:group-member-remove', args=[group.id])
        authenticated_client.post(url, {'member': 'A'}, format='json')
        authenticated_client.post(url, {'member': 'B'}, format='json')
        response = authenticated_client.post(url, {'member': 'C'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'last_member'
        assert group.member_names == ['C']

    def test_invalid_fallback_payer(self, authenticated_client, group, equal_expense):
        url = reverse('groups:group-member-remove', args=[group.id])
        response = authenticated_client.post(url, {'member': 'C', 'fallbackPayer': 'C'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_member'
        assert group.member_names == ['A', 'B', 'C']

    def test_other_user_cannot_remove(self, other_client, group):
        url = reverse('groups:group-member-remove', args=[group.id])
        response = other_client.post(url, {'member': 'C'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert group.member_names == ['A', 'B', 'C']


# =============================================================================
# Export / Import Tests
# =============================================================================

@pytest.mark.django_db
class TestDataTransferApi:
    """Tests for /api/v1/groups/export/ and /api/v1/groups/import/"""

    def test_export_then_import(self, authenticated_client, group, equal_expense, settlements):
        export_url = reverse('groups:data-export')
        exported = authenticated_client.get(export_url)

        assert exported.status_code == status.HTTP_200_OK
        payload = exported.data['data']
        assert len(payload['expenses']) == 1

        import_url = reverse('groups:data-import')
        response = authenticated_client.post(import_url, payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        [imported] = response.data['data']
        assert imported['members'] == ['A', 'B', 'C']
        assert imported['id'] != str(group.id)
        assert Expense.objects.get().group_id != group.id

    def test_import_unknown_group_reference(self, authenticated_client, group):
        url = reverse('groups:data-import')
        response = authenticated_client.post(url, {
            'groups': [],
            'expenses': [{
                'groupId': 'nope',
                'description': 'X',
                'amount': '1',
                'date': '2024-01-01',
                'paidBy': 'A',
                'splitType': 'equal',
            }],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_import'
        assert Group.objects.filter(id=group.id).exists()

    def test_import_rejects_bad_split_type(self, authenticated_client):
        url = reverse('groups:data-import')
        response = authenticated_client.post(url, {
            'groups': [{'id': 'g', 'name': 'G', 'members': ['A']}],
            'expenses': [{
                'groupId': 'g',
                'description': 'X',
                'amount': '1',
                'date': '2024-01-01',
                'paidBy': 'A',
                'splitType': 'shares',
            }],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'validation_error'

    def test_import_rejects_duplicate_split_member(self, authenticated_client, group):
        url = reverse('groups:data-import')
        response = authenticated_client.post(url, {
            'groups': [{'id': 'g', 'name': 'G', 'members': ['A', 'B']}],
            'expenses': [{
                'groupId': 'g',
                'description': 'Lunch',
                'amount': '10',
                'date': '2024-01-01',
                'paidBy': 'A',
                'splitType': 'equal',
                'splits': [
                    {'memberId': 'A', 'amount': '5'},
                    {'memberId': 'A', 'amount': '5'},
                ],
            }],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_import'
        assert response.data['error']['details'] == {'memberId': 'A'}
        assert Group.objects.filter(id=group.id).exists()
        assert not Group.objects.filter(name='G').exists()
