from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils import timezone

from authentication.models import CustomUser, TimeStampedModel
from inventory.models import MenuItem


class OrderQuerySet(models.QuerySet):

    def not_cancelled(self):
        return self.exclude(status=Order.Status.CANCELLED)

    def in_range(self, start_date, end_date):
        return self.filter(order_date__gte=start_date, order_date__lte=end_date)


class Order(TimeStampedModel):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PREPARING = 'preparing', 'Preparing'
        READY = 'ready', 'Ready'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    class PaymentMode(models.TextChoices):
        UPI = 'UPI', 'UPI'
        CASH = 'Cash', 'Cash'

    class OrderType(models.TextChoices):
        ONLINE = 'online', 'Online'
        OFFLINE = 'offline', 'Offline'

    # Allowed next states; completed and cancelled are terminal
    TRANSITIONS = {
        Status.PENDING: {Status.PREPARING, Status.CANCELLED},
        Status.PREPARING: {Status.READY, Status.CANCELLED},
        Status.READY: {Status.COMPLETED, Status.CANCELLED},
        Status.COMPLETED: set(),
        Status.CANCELLED: set(),
    }

    total_quantity = models.PositiveIntegerField(default=0)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    discount = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
        help_text="Discount percentage (0-100)"
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_mode = models.CharField(max_length=10, choices=PaymentMode.choices, blank=True, default='')
    order_type = models.CharField(max_length=10, choices=OrderType.choices, blank=True, default='')
    notes = models.TextField(blank=True, default='')
    customer_name = models.CharField(max_length=100, blank=True, default='')
    customer_phone = models.CharField(max_length=20, blank=True, default='')
    order_date = models.DateTimeField(default=timezone.now, db_index=True)
    created_by = models.ForeignKey(
        CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_orders'
    )

    objects = OrderQuerySet.as_manager()

    def calculate_totals(self):
        """Recalculate quantity and amount from the line items"""
        totals = self.items.aggregate(quantity=Sum('quantity'), amount=Sum('total'))
        self.total_quantity = totals['quantity'] or 0
        self.total_amount = totals['amount'] or Decimal('0.00')

    def can_transition_to(self, new_status):
        return new_status in self.TRANSITIONS.get(self.status, set())

    @property
    def is_terminal(self):
        return not self.TRANSITIONS.get(self.status)

    @property
    def discount_amount(self):
        if not self.discount:
            return Decimal('0.00')
        return (self.total_amount * self.discount / Decimal('100')).quantize(Decimal('0.01'))

    @property
    def payable_amount(self):
        return self.total_amount - self.discount_amount

    def __str__(self):
        return f"#{self.id} - {self.total_quantity} items - {self.status}"

    class Meta:
        db_table = 'orders'
        ordering = ['-order_date']


class OrderItem(models.Model):
    order = models.ForeignKey(Order, related_name='items', on_delete=models.CASCADE)
    # Name and price are copied so that history survives menu edits and deletes
    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='order_items'
    )
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    def save(self, *args, **kwargs):
        self.price = round(self.price, 2)
        self.total = self.price * self.quantity
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    class Meta:
        db_table = 'order_items'
        ordering = ['id']
