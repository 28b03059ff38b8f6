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
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        username='owner',
        email='owner@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user who owns no groups."""
    return User.objects.create_user(
        username='other',
        email='other@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as the group owner."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_user):
    """Return a separate API client authenticated as another user."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def group(user):
    """A group of three: Ali, Sara and Omar."""
    return create_group(user=user, name='Hunza Trip', members=['Ali', 'Sara', 'Omar'])


@pytest.fixture
def dinner(group):
    """Dinner for 100, paid by Ali, split equally."""
    expense = Expense.objects.create(
        group=group,
        description='Dinner',
        amount=Decimal('100.00'),
        date=date(2024, 6, 1),
        paid_by='Ali',
        split_type=SplitType.EQUAL,
        category='Food',
    )
    save_expense_shares(expense, calculate_splits(Decimal('100'), group.member_names, SplitType.EQUAL))
    return expense


@pytest.fixture
def fuel(group):
    """Fuel for 3000, paid by Sara, split 50/30/20."""
    expense = Expense.objects.create(
        group=group,
        description='Fuel',
        amount=Decimal('3000.00'),
        date=date(2024, 6, 2),
        paid_by='Sara',
        split_type=SplitType.PERCENTAGE,
        category='Transport',
    )
    save_expense_shares(
        expense,
        calculate_splits(
            Decimal('3000'),
            group.member_names,
            SplitType.PERCENTAGE,
            {'Ali': Decimal('50'), 'Sara': Decimal('30'), 'Omar': Decimal('20')},
        ),
    )
    return expense


@pytest.fixture
def settlement(group):
    """Omar paid Ali 10."""
    return Settlement.objects.create(
        group=group,
        from_member='Omar',
        to_member='Ali',
        amount=Decimal('10.00'),
        date=date(2024, 6, 3),
    )
