from datetime import timedelta
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError, OperationalError

from finance import profit
from finance.exceptions import StoreUnavailable
from finance.periods import get_date_range, trend_range
from finance.profit import ProfitData, calculate_profit, get_daily_trend, get_expense_breakdown
from finance.store import get_orders_in_range, get_expenses_in_range
from orders.models import Order

pytestmark = pytest.mark.django_db


def test_range_bounds_are_inclusive(make_order, make_expense):
    date_range = get_date_range('today')
    first = make_order(100, when=date_range.start_date)
    last = make_order(200, when=date_range.end_date)
    make_order(300, when=date_range.start_date - timedelta(microseconds=1))
    make_order(400, when=date_range.end_date + timedelta(microseconds=1))
    make_expense(10, when=date_range.start_date)
    make_expense(20, when=date_range.end_date + timedelta(seconds=1))

    orders = get_orders_in_range(*date_range)
    expenses = get_expenses_in_range(*date_range)

    assert {o.id for o in orders} == {first.id, last.id}
    assert [e.amount for e in expenses] == [Decimal('10.00')]


def test_fetch_returns_cancelled_orders_too(make_order):
    make_order(100, status=Order.Status.CANCELLED)
    assert len(get_orders_in_range(*get_date_range('today'))) == 1


def test_trend_fetches_once_per_entity_kind(make_order, make_expense, days_ago, django_assert_num_queries):
    for n in range(30):
        make_order(100 + n, when=days_ago(n))
        make_expense(10, when=days_ago(n))

    with django_assert_num_queries(2):
        trend = get_daily_trend(30)

    assert len(trend) == 30
    assert all(point['expenses'] == Decimal('10.00') for point in trend)


def test_summary_fetches_once_per_entity_kind(make_order, make_expense, django_assert_num_queries):
    make_order(500)
    make_order(200)
    make_expense(150)

    with django_assert_num_queries(2):
        result = calculate_profit('today')

    assert result.total_revenue == Decimal('700.00')
    assert result.net_profit == Decimal('550.00')


def test_trend_sum_matches_summary_over_same_range(make_order, make_expense, days_ago):
    make_order(500, when=days_ago(0))
    make_order(300, status=Order.Status.CANCELLED, when=days_ago(1))
    make_order(200, when=days_ago(6))
    make_expense(150, when=days_ago(2))
    make_expense(50, when=days_ago(6))

    trend = get_daily_trend(7)
    summary = calculate_profit('week')

    assert sum(p['revenue'] for p in trend) == summary.total_revenue == Decimal('700.00')
    assert sum(p['expenses'] for p in trend) == summary.total_expenses == Decimal('200.00')
    assert sum(p['profit'] for p in trend) == summary.net_profit


def test_database_errors_become_store_unavailable():
    with mock.patch('orders.models.OrderQuerySet.in_range', side_effect=OperationalError('database is locked')):
        with pytest.raises(StoreUnavailable) as excinfo:
            get_orders_in_range(*get_date_range('today'))

    assert isinstance(excinfo.value.__cause__, DatabaseError)


def broken_store():
    return mock.patch.object(profit, 'get_orders_in_range', side_effect=StoreUnavailable())


def test_profit_degrades_to_zero_and_logs(caplog):
    with broken_store():
        result = calculate_profit('week')

    assert result == ProfitData.zero()
    assert 'Error calculating profit' in caplog.text


def test_trend_degrades_to_zero_series_of_same_length():
    with broken_store():
        trend = get_daily_trend(5)

    assert len(trend) == 5
    assert [p['date'] for p in trend] == [d.isoformat() for d in trend_range(5).days()]
    assert all(p['profit'] == 0 for p in trend)


def test_breakdown_degrades_to_empty():
    with mock.patch.object(profit, 'get_expenses_in_range', side_effect=StoreUnavailable()):
        result = get_expense_breakdown('month')

    assert result == {'breakdown': [], 'total_expenses': Decimal('0')}


def test_store_errors_propagate_when_not_silent():
    with broken_store():
        with pytest.raises(StoreUnavailable):
            calculate_profit('today', fail_silently=False)
