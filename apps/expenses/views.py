"""
Views for the Expenses app.
"""
import logging
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404
from rest_framework import generics, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.expenses.models import Expense, Settlement
from apps.expenses.permissions import IsExpenseGroupOwner
from apps.expenses.serializers import (
    ExpenseSerializer,
    ExpenseWriteSerializer,
    SettlementCreateSerializer,
    SettlementPlanSerializer,
    SettlementSerializer,
    ShareSerializer,
    SplitPreviewSerializer,
)
from apps.expenses.services.ledger import get_settlement_plan
from apps.expenses.services.share_text import generate_share_text
from apps.expenses.services.split_calculator import calculate_splits
from apps.groups.models import Group

logger = logging.getLogger(__name__)


def _missing_group_response():
    return Response(
        {
            'success': False,
            'error': {
                'code': 'validation_error',
                'message': 'group query parameter is required.',
            },
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class ExpenseFilterMixin:
    """
    Query-string filters shared by the expense list endpoints.

    ``?category=``, ``?paid_by=`` and ``?split_type=`` are handled by
    django-filter, ``?search=`` and ``?ordering=`` by DRF; the date range is
    applied here.
    """
    filterset_fields = ['category', 'paid_by', 'split_type']
    search_fields = ['description', 'category', 'receipt_note']
    ordering_fields = ['date', 'amount', 'created_at']

    def filter_by_date(self, queryset):
        date_from = self.request.query_params.get('date_from')
        if date_from:
            queryset = queryset.filter(date__gte=date_from)

        date_to = self.request.query_params.get('date_to')
        if date_to:
            queryset = queryset.filter(date__lte=date_to)

        return queryset


class ExpenseViewSet(ExpenseFilterMixin, viewsets.ModelViewSet):
    """
    ViewSet for Expense CRUD operations.

    list:   GET    /api/v1/expenses/?group=<group_id>&category=<c>&search=<q>
    create: POST   /api/v1/expenses/
    read:   GET    /api/v1/expenses/{id}/
    update: PUT    /api/v1/expenses/{id}/
    patch:  PATCH  /api/v1/expenses/{id}/
    delete: DELETE /api/v1/expenses/{id}/
    """
    permission_classes = [IsAuthenticated, IsExpenseGroupOwner]

    def get_queryset(self):
        queryset = Expense.objects.filter(
            group__created_by=self.request.user,
        ).select_related('group').prefetch_related('splits')

        group_id = self.request.query_params.get('group')
        if group_id:
            queryset = queryset.filter(group_id=group_id)

        return self.filter_by_date(queryset)

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return ExpenseWriteSerializer
        return ExpenseSerializer

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = ExpenseSerializer(queryset, many=True)
        return Response({'success': True, 'data': serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expense = serializer.save()
        return Response(
            {
                'success': True,
                'data': ExpenseSerializer(expense).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = ExpenseSerializer(instance)
        return Response({'success': True, 'data': serializer.data})

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        expense = serializer.save()
        # Drop the prefetched splits so the response shows the rewritten ones.
        expense = Expense.objects.prefetch_related('splits').get(pk=expense.pk)
        return Response({'success': True, 'data': ExpenseSerializer(expense).data})

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        instance.delete()
        return Response(
            {'success': True, 'message': 'Expense deleted.'},
            status=status.HTTP_200_OK,
        )


class ExpensesByGroupView(ExpenseFilterMixin, generics.ListAPIView):
    """
    List expenses for a specific group.

    GET /api/v1/expenses/group/{group_id}/
    """
    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = Expense.objects.filter(
            group_id=self.kwargs['group_id'],
            group__created_by=self.request.user,
        ).prefetch_related('splits')
        return self.filter_by_date(queryset)

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({'success': True, 'data': serializer.data})


class SplitPreviewView(generics.GenericAPIView):
    """
    Calculate the splits of an expense without saving anything.

    POST /api/v1/expenses/split-preview/
    Body: {"amount": "100", "members": [...], "splitType": "percentage",
           "splits": [{"memberId": "Ali", "value": 60}, ...]}
    """
    serializer_class = SplitPreviewSerializer
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        shares = calculate_splits(
            data['amount'],
            data['members'],
            data['splitType'],
            {s['memberId']: s['value'] for s in data['splits']},
        )
        return Response({'success': True, 'data': ShareSerializer(shares, many=True).data})


class GroupBalancesView(APIView):
    """
    Net balances, suggested transfers and per-member views for a group.

    GET /api/v1/expenses/balances/{group_id}/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, group_id):
        group = get_object_or_404(Group, id=group_id, created_by=request.user)
        plan = get_settlement_plan(group)
        return Response({'success': True, 'data': SettlementPlanSerializer(plan).data})


class ShareTextView(APIView):
    """
    Settlement summary text for pasting into a chat.

    GET /api/v1/expenses/share-text/{group_id}/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, group_id):
        group = get_object_or_404(Group, id=group_id, created_by=request.user)
        plan = get_settlement_plan(group)
        expenses = list(Expense.objects.filter(group=group))
        text = generate_share_text(group.name, group.currency, plan.debts, expenses)
        return Response({'success': True, 'data': {'text': text}})


class ExpenseSummaryView(APIView):
    """
    Get expense summary for a group.

    GET /api/v1/expenses/summary/?group=<group_id>
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        group_id = request.query_params.get('group')
        if not group_id:
            return _missing_group_response()

        group = get_object_or_404(Group, id=group_id, created_by=request.user)
        expenses = Expense.objects.filter(group=group)

        totals = expenses.aggregate(total=Sum('amount'), count=Count('id'))

        category_totals = (
            expenses.values('category')
            .annotate(total=Sum('amount'))
            .order_by('-total')
        )

        member_spending = (
            expenses.values('paid_by')
            .annotate(total_paid=Sum('amount'))
            .order_by('-total_paid')
        )

        settled = Settlement.objects.filter(group=group).aggregate(
            total=Sum('amount'),
        )['total'] or Decimal('0')

        return Response({
            'success': True,
            'data': {
                'currency': group.currency,
                'totalExpenses': str(totals['total'] or Decimal('0')),
                'expenseCount': totals['count'],
                'totalSettled': str(settled),
                'categoryBreakdown': [
                    {'category': row['category'] or 'Other', 'total': str(row['total'])}
                    for row in category_totals
                ],
                'memberSpending': [
                    {'member': row['paid_by'], 'totalPaid': str(row['total_paid'])}
                    for row in member_spending
                ],
            },
        })


class SettlementListCreateView(generics.ListCreateAPIView):
    """
    List or record settlements.

    GET  /api/v1/expenses/settlements/?group=<group_id>
    POST /api/v1/expenses/settlements/
    """
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return SettlementCreateSerializer
        return SettlementSerializer

    def get_queryset(self):
        queryset = Settlement.objects.filter(group__created_by=self.request.user)

        group_id = self.request.query_params.get('group')
        if group_id:
            queryset = queryset.filter(group_id=group_id)

        member = self.request.query_params.get('member')
        if member:
            queryset = queryset.filter(Q(from_member=member) | Q(to_member=member))

        return queryset

    def list(self, request, *args, **kwargs):
        serializer = SettlementSerializer(self.get_queryset(), many=True)
        return Response({'success': True, 'data': serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        settlement = serializer.save()
        logger.info(
            'Recorded settlement %s -> %s (%s) in group %s',
            settlement.from_member, settlement.to_member, settlement.amount, settlement.group_id,
        )
        return Response(
            {
                'success': True,
                'data': SettlementSerializer(settlement).data,
                'message': 'Settlement recorded.',
            },
            status=status.HTTP_201_CREATED,
        )


class SettlementDetailView(generics.RetrieveDestroyAPIView):
    """
    Read or delete a settlement.

    GET    /api/v1/expenses/settlements/{id}/
    DELETE /api/v1/expenses/settlements/{id}/
    """
    serializer_class = SettlementSerializer
    permission_classes = [IsAuthenticated, IsExpenseGroupOwner]

    def get_queryset(self):
        return Settlement.objects.filter(group__created_by=self.request.user)

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({'success': True, 'data': serializer.data})

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response(
            {'success': True, 'message': 'Settlement deleted.'},
            status=status.HTTP_200_OK,
        )
