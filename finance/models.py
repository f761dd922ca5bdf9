from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from authentication.models import TimeStampedModel


def validate_expense_amount(value):
    if value is None or value <= 0:
        raise ValidationError('Amount must be greater than zero.')
    if value > settings.EXPENSE_MAX_AMOUNT:
        raise ValidationError(f'Amount cannot exceed {settings.EXPENSE_MAX_AMOUNT}.')


class ExpenseQuerySet(models.QuerySet):

    def in_range(self, start_date, end_date):
        return self.filter(date__gte=start_date, date__lte=end_date)


class Expense(TimeStampedModel):
    class Category(models.TextChoices):
        INGREDIENTS = 'ingredients', 'Ingredients'
        FUEL = 'fuel', 'Fuel'
        PACKAGING = 'packaging', 'Packaging'
        UTILITIES = 'utilities', 'Utilities'
        LABOR = 'labor', 'Labor'
        RENT = 'rent', 'Rent'
        OTHER = 'other', 'Other'

    category = models.CharField(max_length=20, choices=Category.choices)
    description = models.CharField(max_length=500)
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[validate_expense_amount])
    date = models.DateTimeField(default=timezone.now, db_index=True)
    receipt = models.CharField(max_length=500, blank=True, default='', help_text="Receipt reference or URL")

    objects = ExpenseQuerySet.as_manager()

    def __str__(self):
        return f"{self.get_category_display()} - {self.amount} ({self.description})"

    class Meta:
        db_table = 'expenses'
        ordering = ['-date']


class DailySummary(models.Model):
    """Persisted end-of-day figures. Live reports never read these."""
    date = models.DateField(unique=True)
    total_orders = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_expenses = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    net_profit = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.date}: {self.net_profit}"

    class Meta:
        db_table = 'daily_summaries'
        ordering = ['-date']
        verbose_name_plural = "Daily Summaries"
