import random
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from django.utils import timezone

from finance.periods import get_date_range
from finance.profit import (
    ProfitData, summarize, bucket_daily, breakdown_expenses, empty_trend,
    format_currency, format_percentage
)

D = Decimal


def at(day, hour=12):
    return timezone.make_aware(datetime.combine(day, datetime.min.time()) + timedelta(hours=hour))


def order(amount, status='completed', when=None):
    return SimpleNamespace(total_amount=D(str(amount)), status=status, order_date=when or timezone.now())


def expense(amount, category='ingredients', when=None):
    return SimpleNamespace(amount=D(str(amount)), category=category, date=when or timezone.now())


# =============== SUMMARY ===============

def test_summary_scenario():
    orders = [order(500, 'completed'), order(300, 'cancelled'), order(200, 'pending')]
    expenses = [expense(150), expense(50)]

    profit = summarize(orders, expenses)

    assert profit.total_revenue == D('700')
    assert profit.total_expenses == D('200')
    assert profit.net_profit == D('500')
    assert format_percentage(profit.profit_margin) == '71.4%'
    assert profit.total_orders == 2


def test_revenue_ignores_cancelled_orders_only():
    orders = [order(100, status) for status in ('pending', 'preparing', 'ready', 'completed', 'cancelled')]
    profit = summarize(orders, [])
    assert profit.total_revenue == D('400')
    assert profit.total_orders == 4


def test_margin_is_zero_without_revenue():
    profit = summarize([order(250, 'cancelled')], [expense(80)])

    assert profit.total_revenue == 0
    assert profit.net_profit == D('-80')
    assert profit.profit_margin == 0


def test_net_profit_can_be_negative():
    profit = summarize([order(100)], [expense(300)])
    assert profit.net_profit == D('-200')
    assert profit.profit_margin == D('-200')


def test_empty_inputs_give_zero_summary():
    assert summarize([], []) == ProfitData.zero()


# =============== TREND ===============

def three_day_fixture():
    first = date(2024, 5, 1)
    date_range = get_date_range('custom', (first, first + timedelta(days=2)))
    orders = [
        order(100, when=at(first)),
        order(40, 'cancelled', when=at(first + timedelta(days=1))),
        order(50, when=at(first + timedelta(days=2), hour=23)),
    ]
    expenses = [
        expense(20, when=at(first, hour=1)),
        expense(80, when=at(first + timedelta(days=2))),
    ]
    return date_range, orders, expenses


def test_trend_scenario_and_sum_matches_summary():
    date_range, orders, expenses = three_day_fixture()

    trend = bucket_daily(orders, expenses, date_range)

    assert [point['date'] for point in trend] == ['2024-05-01', '2024-05-02', '2024-05-03']
    assert [point['revenue'] for point in trend] == [D('100'), D('0'), D('50')]
    assert [point['expenses'] for point in trend] == [D('20'), D('0'), D('80')]
    assert [point['profit'] for point in trend] == [D('80'), D('0'), D('-30')]

    summary = summarize(orders, expenses)
    assert sum(p['revenue'] for p in trend) == summary.total_revenue
    assert sum(p['expenses'] for p in trend) == summary.total_expenses
    assert sum(p['profit'] for p in trend) == summary.net_profit == D('50')


def test_trend_is_order_independent_and_idempotent():
    date_range, orders, expenses = three_day_fixture()
    expected = bucket_daily(orders, expenses, date_range)

    rng = random.Random(7)
    for _ in range(5):
        shuffled_orders = orders[:]
        shuffled_expenses = expenses[:]
        rng.shuffle(shuffled_orders)
        rng.shuffle(shuffled_expenses)
        assert bucket_daily(shuffled_orders, shuffled_expenses, date_range) == expected

    assert bucket_daily(orders, expenses, date_range) == expected


def test_trend_has_no_gaps_and_ignores_records_outside_range():
    first = date(2024, 5, 1)
    date_range = get_date_range('custom', (first, first + timedelta(days=4)))
    outside = [order(999, when=at(first - timedelta(days=1))), order(999, when=at(first + timedelta(days=5)))]

    trend = bucket_daily(outside, [], date_range)

    assert len(trend) == 5
    assert all(point['revenue'] == 0 for point in trend)


def test_empty_trend_has_requested_length_and_zeros():
    trend = empty_trend(7)

    assert len(trend) == 7
    assert trend[-1]['date'] == timezone.localdate().isoformat()
    assert all(p['revenue'] == p['expenses'] == p['profit'] == 0 for p in trend)


# =============== BREAKDOWN ===============

def test_breakdown_keeps_non_zero_categories_largest_first():
    expenses = [
        expense(100, 'fuel'),
        expense(300, 'ingredients'),
        expense(50, 'ingredients'),
        expense(150, 'rent'),
    ]

    result = breakdown_expenses(expenses)

    assert result['total_expenses'] == D('600')
    assert [row['category'] for row in result['breakdown']] == ['ingredients', 'rent', 'fuel']
    assert [row['amount'] for row in result['breakdown']] == [D('350'), D('150'), D('100')]
    assert abs(sum(row['percentage'] for row in result['breakdown']) - 100) < D('0.0001')


def test_breakdown_percentages_sum_to_hundred_for_odd_splits():
    result = breakdown_expenses([expense(1, 'fuel'), expense(1, 'rent'), expense(1, 'other')])
    assert abs(sum(row['percentage'] for row in result['breakdown']) - 100) < D('0.0001')


def test_breakdown_without_expenses_is_empty():
    assert breakdown_expenses([]) == {'breakdown': [], 'total_expenses': D('0')}


# =============== DISPLAY ===============

@pytest.mark.parametrize('amount, expected', [
    (0, '₹0'),
    (999, '₹999'),
    (1000, '₹1,000'),
    (123456.7, '₹1,23,457'),
    (D('12345678'), '₹1,23,45,678'),
    (D('499.5'), '₹500'),
    (-1500, '₹-1,500'),
])
def test_format_currency_indian_grouping(settings, amount, expected):
    settings.CURRENCY_SYMBOL = '₹'
    settings.CURRENCY_GROUPING = 'indian'
    assert format_currency(amount) == expected


def test_format_currency_western_grouping():
    assert format_currency(D('12345678'), symbol='$', grouping='western') == '$12,345,678'


@pytest.mark.parametrize('value, expected', [
    (71.42857, '71.4%'),
    (D('0'), '0.0%'),
    (100, '100.0%'),
    (D('12.25'), '12.3%'),
])
def test_format_percentage(value, expected):
    assert format_percentage(value) == expected
