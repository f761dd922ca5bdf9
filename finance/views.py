import logging

from rest_framework import generics, status, filters
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from django.conf import settings
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from authentication.permissions import IsManager
from . import exports
from .exceptions import StoreUnavailable
from .models import Expense, DailySummary
from .periods import range_from_query
from .profit import (
    ProfitData, summarize, bucket_daily, breakdown_expenses, calculate_profit,
    get_daily_trend, empty_trend, get_expense_breakdown, store_daily_summary,
    format_currency, format_percentage
)
from .serializers import (
    ExpenseSerializer, ProfitDataSerializer, TrendPointSerializer, ExpenseBreakdownSerializer,
    DailySummarySerializer, CloseDaySerializer
)
from .store import get_orders_in_range, get_expenses_in_range

logger = logging.getLogger(__name__)

PERIOD_PARAMETERS = [
    openapi.Parameter('period', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                      enum=['today', 'week', 'month', 'custom'], default='today'),
    openapi.Parameter('start_date', openapi.IN_QUERY, description="YYYY-MM-DD, with period=custom",
                      type=openapi.TYPE_STRING),
    openapi.Parameter('end_date', openapi.IN_QUERY, description="YYYY-MM-DD, with period=custom",
                      type=openapi.TYPE_STRING),
]


def _degrade_on_store_error(compute, fallback, what):
    """Run ``compute``; on a store failure log it and return ``fallback()`` flagged as degraded"""
    try:
        return compute(), False
    except StoreUnavailable:
        logger.exception(f"Store unavailable while computing {what}, returning zeros")
        return fallback(), True


def _period_label(params):
    if params.get('period'):
        return params['period']
    return 'custom' if params.get('start_date') or params.get('end_date') else 'today'


# =============== EXPENSES ===============

class ExpenseListCreateView(generics.ListCreateAPIView):
    """
    get: List expenses, newest first; optional period / start_date / end_date
    post: Record an expense
    """
    serializer_class = ExpenseSerializer
    permission_classes = [IsManager]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category']
    search_fields = ['description']
    ordering_fields = ['date', 'amount']
    ordering = ['-date']

    def get_queryset(self):
        queryset = Expense.objects.all()
        date_range = range_from_query(self.request.query_params, default=None)
        if date_range is not None:
            queryset = queryset.in_range(*date_range)
        return queryset

    def perform_create(self, serializer):
        expense = serializer.save()
        logger.info(f"Expense recorded: {expense.category} {expense.amount} by {self.request.user.email}")


class ExpenseDetailView(generics.RetrieveDestroyAPIView):
    """
    get: Expense details
    delete: Remove an expense. Expenses are never edited in place.
    """
    queryset = Expense.objects.all()
    serializer_class = ExpenseSerializer
    permission_classes = [IsManager]

    def perform_destroy(self, instance):
        logger.info(f"Expense #{instance.id} deleted by {self.request.user.email}")
        instance.delete()


# =============== REPORTS ===============

@swagger_auto_schema(
    method='get',
    operation_description="Revenue, expenses, net profit, margin and order count for a period",
    manual_parameters=PERIOD_PARAMETERS,
    responses={200: ProfitDataSerializer}
)
@api_view(['GET'])
@permission_classes([IsManager])
def profit_summary(request):
    date_range = range_from_query(request.query_params)
    custom = (date_range.start_date, date_range.end_date)

    profit, degraded = _degrade_on_store_error(
        lambda: calculate_profit('custom', custom, fail_silently=False),
        ProfitData.zero,
        'profit summary',
    )
    return Response({
        'period': _period_label(request.query_params),
        'start_date': date_range.start_date,
        'end_date': date_range.end_date,
        'profit': ProfitDataSerializer(profit).data,
        'degraded': degraded,
    })


@swagger_auto_schema(
    method='get',
    operation_description="Per-day revenue, expenses and profit for the last N days, oldest first",
    manual_parameters=[
        openapi.Parameter('days', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, default=7),
    ],
    responses={200: TrendPointSerializer(many=True)}
)
@api_view(['GET'])
@permission_classes([IsManager])
def profit_trend(request):
    raw = request.query_params.get('days', '7')
    try:
        days = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({'days': 'Must be a whole number.'})
    if not 1 <= days <= settings.TREND_MAX_DAYS:
        raise ValidationError({'days': f'Must be between 1 and {settings.TREND_MAX_DAYS}.'})

    trend, degraded = _degrade_on_store_error(
        lambda: get_daily_trend(days, fail_silently=False),
        lambda: empty_trend(days),
        f'{days}-day trend',
    )
    return Response({
        'days': days,
        'trend': TrendPointSerializer(trend, many=True).data,
        'degraded': degraded,
    })


@swagger_auto_schema(
    method='get',
    operation_description="Expense totals per category (non-zero only, largest first) and their share",
    manual_parameters=PERIOD_PARAMETERS,
    responses={200: ExpenseBreakdownSerializer}
)
@api_view(['GET'])
@permission_classes([IsManager])
def expense_breakdown(request):
    date_range = range_from_query(request.query_params)
    custom = (date_range.start_date, date_range.end_date)

    breakdown, degraded = _degrade_on_store_error(
        lambda: get_expense_breakdown('custom', custom, fail_silently=False),
        lambda: breakdown_expenses([]),
        'expense breakdown',
    )
    data = ExpenseBreakdownSerializer(breakdown).data
    data['formatted_total'] = format_currency(breakdown['total_expenses'])
    data['degraded'] = degraded
    return Response(data)


@swagger_auto_schema(
    method='get',
    operation_description="Download the profit report for a period as Excel or PDF",
    manual_parameters=PERIOD_PARAMETERS + [
        openapi.Parameter('format', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                          enum=['excel', 'pdf'], default='excel'),
    ],
)
@api_view(['GET'])
@permission_classes([IsManager])
def export_profit_report(request):
    """Exports read the store directly; a failure is a 503, never a report of zeros"""
    export_format = request.query_params.get('format', 'excel')
    if export_format not in ('excel', 'pdf'):
        raise ValidationError({'format': "Must be 'excel' or 'pdf'."})

    date_range = range_from_query(request.query_params)
    orders = get_orders_in_range(*date_range)
    expenses = get_expenses_in_range(*date_range)
    report = {
        'profit': summarize(orders, expenses),
        'trend': bucket_daily(orders, expenses, date_range),
        'breakdown': breakdown_expenses(expenses),
    }
    logger.info(f"Profit report ({export_format}) for {date_range} exported by {request.user.email}")

    if export_format == 'pdf':
        symbol = 'Rs. ' if settings.CURRENCY_SYMBOL == '₹' else settings.CURRENCY_SYMBOL
        return exports.generate_profit_pdf(
            report, date_range, settings.BUSINESS_NAME,
            format_money=lambda amount: format_currency(amount, symbol=symbol),
            format_percent=format_percentage,
        )
    return exports.generate_profit_excel(report, date_range, settings.BUSINESS_NAME)


# =============== DAILY SUMMARIES ===============

class DailySummaryListView(generics.ListAPIView):
    queryset = DailySummary.objects.all()
    serializer_class = DailySummarySerializer
    permission_classes = [IsManager]
    filterset_fields = {'date': ['exact', 'gte', 'lte']}


@swagger_auto_schema(
    method='post',
    operation_description="Compute and store the summary of a day (default: today)",
    request_body=CloseDaySerializer,
    responses={200: DailySummarySerializer}
)
@api_view(['POST'])
@permission_classes([IsManager])
def close_day(request):
    serializer = CloseDaySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    day = serializer.validated_data.get('date') or timezone.localdate()

    summary = store_daily_summary(day)
    return Response(DailySummarySerializer(summary).data, status=status.HTTP_200_OK)
