import pytest
from datetime import date
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.expenses.models import Expense, Settlement
from apps.expenses.services.ledger import save_expense_shares
from apps.expenses.services.records import SplitType
from apps.expenses.services.split_calculator import calculate_splits
from apps.groups.services import create_group

User = get_user_model()


def add_expense(group, description, amount, paid_by, split_type=SplitType.EQUAL,
                custom_values=None, members=None, category=''):
    """Create an expense with its splits computed the way the API does."""
    expense = Expense.objects.create(
        group=group,
        description=description,
        amount=Decimal(amount),
        date=date(2024, 6, 1),
        paid_by=paid_by,
        split_type=split_type,
        category=category,
    )
    shares = calculate_splits(
        Decimal(amount), members or group.member_names, split_type, custom_values,
    )
    save_expense_shares(expense, shares)
    return expense


@pytest.fixture(autouse=True)
def clear_cache():
    """Throttle counters live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def group_owner(db):
    """Create and return a test user (group owner)."""
    return User.objects.create_user(
        username='owner',
        email='owner@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def group_other_user(db):
    """Create and return a user who owns no groups."""
    return User.objects.create_user(
        username='other',
        email='other@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def authenticated_client(api_client, group_owner):
    """Return API client authenticated as group owner."""
    refresh = RefreshToken.for_user(group_owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(group_other_user):
    """Return a separate API client authenticated as a non-owner."""
    client = APIClient()
    refresh = RefreshToken.for_user(group_other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def group(group_owner):
    """A group of three: A, B and C."""
    return create_group(user=group_owner, name='Weekend', members=['A', 'B', 'C'])


@pytest.fixture
def equal_expense(group):
    """100 paid by A, split equally between A, B and C."""
    return add_expense(group, 'Dinner', '100', 'A', category='Food')


@pytest.fixture
def percentage_expense(group):
    """100 paid by C, split 50/30/20."""
    return add_expense(
        group, 'Fuel', '100', 'C', SplitType.PERCENTAGE,
        {'A': Decimal('50'), 'B': Decimal('30'), 'C': Decimal('20')},
    )


@pytest.fixture
def untouched_expense(group):
    """40 paid by A, split between A and B only."""
    return add_expense(group, 'Coffee', '40', 'A', members=['A', 'B'])


@pytest.fixture
def settlements(group):
    """One settlement involving C, one that does not."""
    return [
        Settlement.objects.create(
            group=group, from_member='C', to_member='A',
            amount=Decimal('10'), date=date(2024, 6, 2),
        ),
        Settlement.objects.create(
            group=group, from_member='B', to_member='A',
            amount=Decimal('5'), date=date(2024, 6, 2),
        ),
    ]
