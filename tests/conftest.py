from datetime import datetime, time, timedelta
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from authentication.models import CustomUser
from finance.models import Expense
from inventory.models import MenuItem
from orders.models import Order, OrderItem


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def manager(db):
    return CustomUser.objects.create_user(
        email='manager@biryanihouse.in', password='Kitchen#2024', name='Asha', role=CustomUser.Role.MANAGER
    )


@pytest.fixture
def staff(db):
    return CustomUser.objects.create_user(
        email='staff@biryanihouse.in', password='Counter#2024', role=CustomUser.Role.STAFF
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def manager_client(manager):
    client = APIClient()
    client.force_authenticate(user=manager)
    return client


@pytest.fixture
def staff_client(staff):
    client = APIClient()
    client.force_authenticate(user=staff)
    return client


@pytest.fixture
def make_menu_item(db):
    def _make(name='Chicken Biryani', price='100.00', category=MenuItem.Category.CHICKEN, is_active=True):
        return MenuItem.objects.create(name=name, price=Decimal(price), category=category, is_active=is_active)
    return _make


@pytest.fixture
def make_order(db):
    """Order with a single line whose total is ``amount``"""
    def _make(amount, status=Order.Status.PENDING, when=None, payment_mode=Order.PaymentMode.CASH, **extra):
        order = Order.objects.create(
            status=status,
            payment_mode=payment_mode,
            order_date=when or timezone.now(),
            **extra
        )
        OrderItem.objects.create(order=order, name='Chicken Biryani', price=Decimal(str(amount)), quantity=1)
        order.refresh_from_db()
        return order
    return _make


@pytest.fixture
def make_expense(db):
    def _make(amount, category=Expense.Category.INGREDIENTS, when=None, description='Rice and spices'):
        return Expense.objects.create(
            amount=Decimal(str(amount)),
            category=category,
            date=when or timezone.now(),
            description=description,
        )
    return _make


@pytest.fixture
def days_ago():
    """Aware datetime at local noon ``n`` days before today"""
    def _days_ago(n):
        day = timezone.localdate() - timedelta(days=n)
        return timezone.make_aware(datetime.combine(day, time(12)))
    return _days_ago
