from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from django.utils import timezone

from .models import Order, OrderItem
from .snapshot import TodayOrdersSnapshot


@receiver([post_save, post_delete], sender=OrderItem)
def update_order_totals_on_item_change(sender, instance, **kwargs):
    """Update order totals when items are added/removed/modified"""
    order = instance.order
    order.calculate_totals()
    # update() so a cascade delete of the order does not fail on a missing row
    Order.objects.filter(pk=order.pk).update(
        total_quantity=order.total_quantity,
        total_amount=order.total_amount,
        updated_at=timezone.now(),
    )


@receiver([post_save, post_delete], sender=Order)
@receiver([post_save, post_delete], sender=OrderItem)
def invalidate_today_orders(sender, instance, **kwargs):
    TodayOrdersSnapshot.invalidate()
