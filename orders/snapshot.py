"""
Short-lived, shared view of today's orders.

The snapshot is built once from a single bounded query, stored in the Django
cache for ``TODAY_ORDERS_CACHE_TTL`` seconds and handed out read-only. Any
write to an order or order item drops it (see ``orders.signals``); the next
reader rebuilds it. It is never patched in place.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodayOrdersSnapshot:
    day: str
    orders: Tuple[dict, ...]
    built_at: datetime

    CACHE_KEY_PREFIX = 'orders:today:'

    @classmethod
    def cache_key(cls, day=None):
        day = day or timezone.localdate().isoformat()
        return f"{cls.CACHE_KEY_PREFIX}{day}"

    @classmethod
    def get(cls):
        key = cls.cache_key()
        snapshot = cache.get(key)
        if snapshot is None:
            snapshot = cls.build()
            cache.set(key, snapshot, settings.TODAY_ORDERS_CACHE_TTL)
        return snapshot

    @classmethod
    def build(cls):
        from finance.periods import get_date_range
        from .models import Order
        from .serializers import OrderReadSerializer

        date_range = get_date_range('today')
        queryset = (
            Order.objects.in_range(date_range.start_date, date_range.end_date)
            .select_related('created_by')
            .prefetch_related('items')
            .order_by('-order_date')
        )
        orders = tuple(dict(row) for row in OrderReadSerializer(queryset, many=True).data)
        logger.debug(f"Built today's orders snapshot with {len(orders)} orders")
        return cls(
            day=date_range.start_date.date().isoformat(),
            orders=orders,
            built_at=timezone.now(),
        )

    @classmethod
    def invalidate(cls):
        cache.delete(cls.cache_key())

    def __len__(self):
        return len(self.orders)

    def __iter__(self):
        return iter(self.orders)

    def active(self):
        """Orders still being worked on (not completed or cancelled)"""
        return tuple(o for o in self.orders if o['status'] not in ('completed', 'cancelled'))
