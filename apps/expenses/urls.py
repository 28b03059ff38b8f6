"""
URL configuration for the Expenses app.
"""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from apps.expenses.views import (
    ExpensesByGroupView,
    ExpenseSummaryView,
    ExpenseViewSet,
    GroupBalancesView,
    SettlementDetailView,
    SettlementListCreateView,
    ShareTextView,
    SplitPreviewView,
)

app_name = 'expenses'

router = DefaultRouter()
router.register(r'', ExpenseViewSet, basename='expense')

urlpatterns = [
    # Explicit paths BEFORE router to avoid conflicts with router's {pk} patterns
    path('group/<uuid:group_id>/', ExpensesByGroupView.as_view(), name='expenses-by-group'),
    path('summary/', ExpenseSummaryView.as_view(), name='expense-summary'),
    path('split-preview/', SplitPreviewView.as_view(), name='split-preview'),
    path('balances/<uuid:group_id>/', GroupBalancesView.as_view(), name='group-balances'),
    path('share-text/<uuid:group_id>/', ShareTextView.as_view(), name='share-text'),
    path('settlements/', SettlementListCreateView.as_view(), name='settlement-list'),
    path('settlements/<uuid:pk>/', SettlementDetailView.as_view(), name='settlement-detail'),
    path('', include(router.urls)),
]
