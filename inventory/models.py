from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Case, IntegerField, Value, When

from authentication.models import TimeStampedModel


class MenuItemQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def in_menu_order(self):
        """Category order mutton -> chicken -> egg -> veg -> extras -> beverages, then by name"""
        ranking = [
            When(category=value, then=Value(position))
            for position, value in enumerate(MenuItem.Category.values)
        ]
        return self.annotate(
            category_rank=Case(*ranking, default=Value(len(ranking)), output_field=IntegerField())
        ).order_by('category_rank', 'name')


class MenuItem(TimeStampedModel):
    class Category(models.TextChoices):
        MUTTON = 'mutton', 'Mutton'
        CHICKEN = 'chicken', 'Chicken'
        EGG = 'egg', 'Egg'
        VEG = 'veg', 'Veg'
        EXTRAS = 'extras', 'Extras'
        BEVERAGES = 'beverages', 'Beverages'

    name = models.CharField(max_length=255)
    price = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    category = models.CharField(max_length=20, choices=Category.choices)
    description = models.CharField(max_length=1000, blank=True, default='')
    image_url = models.URLField(max_length=500, blank=True, default='')
    is_active = models.BooleanField(default=True)

    objects = MenuItemQuerySet.as_manager()

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'menu_items'
        ordering = ['category', 'name']
        constraints = [
            models.CheckConstraint(condition=models.Q(price__gt=0), name='menu_item_price_positive'),
        ]
