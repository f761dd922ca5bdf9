from decimal import Decimal

import pytest
from django.core.cache import cache

from orders.models import Order, OrderItem
from orders.snapshot import TodayOrdersSnapshot

pytestmark = pytest.mark.django_db


def test_snapshot_holds_only_todays_orders(make_order, days_ago):
    today = make_order(150)
    make_order(90, when=days_ago(1))

    snapshot = TodayOrdersSnapshot.get()

    assert isinstance(snapshot.orders, tuple)
    assert [o['id'] for o in snapshot.orders] == [today.id]


def test_snapshot_is_cached_between_reads(make_order, django_assert_num_queries):
    make_order(150)
    first = TodayOrdersSnapshot.get()

    with django_assert_num_queries(0):
        second = TodayOrdersSnapshot.get()

    assert second == first


def test_snapshot_is_frozen(make_order):
    make_order(150)
    snapshot = TodayOrdersSnapshot.get()

    with pytest.raises(AttributeError):
        snapshot.orders = ()


def test_order_write_invalidates_snapshot(make_order):
    order = make_order(150)
    assert len(TodayOrdersSnapshot.get()) == 1

    order.status = Order.Status.PREPARING
    order.save()
    assert cache.get(TodayOrdersSnapshot.cache_key()) is None

    assert TodayOrdersSnapshot.get().orders[0]['status'] == 'preparing'


def test_item_write_invalidates_snapshot(make_order):
    order = make_order(100)
    TodayOrdersSnapshot.get()

    OrderItem.objects.create(order=order, name='Raita', price=Decimal('10.00'), quantity=2)

    snapshot = TodayOrdersSnapshot.get()
    assert snapshot.orders[0]['total_amount'] == '120.00'


def test_order_delete_invalidates_snapshot(make_order):
    order = make_order(100)
    TodayOrdersSnapshot.get()

    order.delete()

    assert len(TodayOrdersSnapshot.get()) == 0


def test_active_excludes_finished_orders(make_order):
    make_order(100, status=Order.Status.COMPLETED)
    make_order(100, status=Order.Status.CANCELLED)
    pending = make_order(100)

    assert [o['id'] for o in TodayOrdersSnapshot.get().active()] == [pending.id]
