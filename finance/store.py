import logging

from django.db import DatabaseError

from orders.models import Order
from .exceptions import StoreUnavailable
from .models import Expense

logger = logging.getLogger(__name__)


def get_orders_in_range(start_date, end_date):
    """All orders (any status) with ``start_date <= order_date <= end_date``. One query."""
    try:
        orders = list(Order.objects.in_range(start_date, end_date).order_by('order_date'))
    except DatabaseError as exc:
        raise StoreUnavailable() from exc
    logger.debug(f"Fetched {len(orders)} orders between {start_date} and {end_date}")
    return orders


def get_expenses_in_range(start_date, end_date):
    """All expenses with ``start_date <= date <= end_date``. One query."""
    try:
        expenses = list(Expense.objects.in_range(start_date, end_date).order_by('date'))
    except DatabaseError as exc:
        raise StoreUnavailable() from exc
    logger.debug(f"Fetched {len(expenses)} expenses between {start_date} and {end_date}")
    return expenses
