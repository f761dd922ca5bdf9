"""
Profit reporting: summary totals, per-day trend and expense breakdown.

The pure reducers (``summarize``, ``bucket_daily``, ``breakdown_expenses``)
take already-fetched orders and expenses. The ``get_*`` / ``calculate_*``
wrappers resolve the period, fetch once per entity kind and reduce. With
``fail_silently=True`` a store failure is logged with its traceback and
zeros are returned instead.
"""
import logging
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.utils import timezone

from orders.models import Order
from .exceptions import StoreUnavailable
from .models import DailySummary, Expense
from .periods import get_date_range, trend_range
from .store import get_orders_in_range, get_expenses_in_range

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
HUNDRED = Decimal('100')


@dataclass(frozen=True)
class ProfitData:
    total_revenue: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    profit_margin: Decimal
    total_orders: int

    @classmethod
    def zero(cls):
        return cls(ZERO, ZERO, ZERO, ZERO, 0)

    def as_dict(self):
        return asdict(self)


def _revenue_orders(orders):
    return [order for order in orders if order.status != Order.Status.CANCELLED]


def summarize(orders, expenses) -> ProfitData:
    """Reduce orders and expenses to totals. Cancelled orders count for nothing."""
    counted = _revenue_orders(orders)
    total_revenue = sum((order.total_amount for order in counted), ZERO)
    total_expenses = sum((expense.amount for expense in expenses), ZERO)
    net_profit = total_revenue - total_expenses
    # No revenue means no meaningful margin, even when there are expenses
    profit_margin = net_profit / total_revenue * HUNDRED if total_revenue > 0 else ZERO

    return ProfitData(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_profit=net_profit,
        profit_margin=profit_margin,
        total_orders=len(counted),
    )


def calculate_profit(period, custom_range=None, fail_silently=True) -> ProfitData:
    date_range = get_date_range(period, custom_range)
    try:
        orders = get_orders_in_range(*date_range)
        expenses = get_expenses_in_range(*date_range)
    except StoreUnavailable:
        if not fail_silently:
            raise
        logger.exception(f"Error calculating profit for {period} ({date_range}), returning zeros")
        return ProfitData.zero()
    return summarize(orders, expenses)


def get_today_profit(fail_silently=True):
    return calculate_profit('today', fail_silently=fail_silently)


def get_weekly_profit(fail_silently=True):
    return calculate_profit('week', fail_silently=fail_silently)


def get_monthly_profit(fail_silently=True):
    return calculate_profit('month', fail_silently=fail_silently)


# =============== TREND ===============

def _trend_point(day, revenue=ZERO, expenses=ZERO):
    return {
        'date': day.isoformat(),
        'revenue': revenue,
        'expenses': expenses,
        'profit': revenue - expenses,
    }


def bucket_daily(orders, expenses, date_range):
    """
    One point per local calendar day of ``date_range``, oldest first, no gaps.

    Records outside the range are ignored. The result does not depend on
    the order of the inputs.
    """
    days = list(date_range.days())
    revenue = {day: ZERO for day in days}
    spent = {day: ZERO for day in days}

    for order in _revenue_orders(orders):
        day = timezone.localdate(order.order_date)
        if day in revenue:
            revenue[day] += order.total_amount

    for expense in expenses:
        day = timezone.localdate(expense.date)
        if day in spent:
            spent[day] += expense.amount

    return [_trend_point(day, revenue[day], spent[day]) for day in days]


def empty_trend(days, now=None):
    return [_trend_point(day) for day in trend_range(days, now).days()]


def get_daily_trend(days=7, fail_silently=True):
    date_range = trend_range(days)
    try:
        orders = get_orders_in_range(*date_range)
        expenses = get_expenses_in_range(*date_range)
    except StoreUnavailable:
        if not fail_silently:
            raise
        logger.exception(f"Error calculating daily profit trend for {days} days, returning zeros")
        return empty_trend(days)
    return bucket_daily(orders, expenses, date_range)


# =============== EXPENSE BREAKDOWN ===============

def breakdown_expenses(expenses):
    totals = {category: ZERO for category in Expense.Category.values}
    for expense in expenses:
        totals[expense.category] += expense.amount

    total_expenses = sum(totals.values(), ZERO)
    if total_expenses <= 0:
        return {'breakdown': [], 'total_expenses': ZERO}

    breakdown = [
        {
            'category': category,
            'amount': amount,
            'percentage': amount / total_expenses * HUNDRED,
        }
        for category, amount in totals.items()
        if amount > 0
    ]
    # sorted() is stable, so equal amounts keep category order
    breakdown.sort(key=lambda row: row['amount'], reverse=True)
    return {'breakdown': breakdown, 'total_expenses': total_expenses}


def get_expense_breakdown(period, custom_range=None, fail_silently=True):
    date_range = get_date_range(period, custom_range)
    try:
        expenses = get_expenses_in_range(*date_range)
    except StoreUnavailable:
        if not fail_silently:
            raise
        logger.exception(f"Error calculating expense breakdown for {period}, returning empty breakdown")
        return {'breakdown': [], 'total_expenses': ZERO}
    return breakdown_expenses(expenses)


# =============== DAILY SUMMARY ===============

def store_daily_summary(day):
    """Compute the summary of one local day and upsert it. Store errors propagate."""
    date_range = get_date_range('custom', (day, day))
    profit = summarize(get_orders_in_range(*date_range), get_expenses_in_range(*date_range))
    summary, created = DailySummary.objects.update_or_create(
        date=day,
        defaults={
            'total_orders': profit.total_orders,
            'total_revenue': profit.total_revenue,
            'total_expenses': profit.total_expenses,
            'net_profit': profit.net_profit,
        }
    )
    logger.info(f"Daily summary for {day} {'created' if created else 'updated'}: net {profit.net_profit}")
    return summary


# =============== DISPLAY ===============

def _group_digits(digits, style):
    if style == 'indian' and len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        return ','.join(groups + [tail])
    return f"{int(digits):,}"


def format_currency(amount, symbol=None, grouping=None):
    """
    Whole currency units with locale digit grouping, e.g. ``₹1,23,457``.

    Rounds half away from zero. Negative amounts keep the symbol first: ``₹-500``.
    """
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    grouping = grouping or settings.CURRENCY_GROUPING

    value = Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    return f"{symbol}{sign}{_group_digits(str(abs(value)), grouping)}"


def format_percentage(value):
    value = Decimal(str(value)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
    return f"{value}%"
