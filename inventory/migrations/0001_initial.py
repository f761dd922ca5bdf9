import django.core.validators
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='MenuItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('category', models.CharField(choices=[('mutton', 'Mutton'), ('chicken', 'Chicken'), ('egg', 'Egg'), ('veg', 'Veg'), ('extras', 'Extras'), ('beverages', 'Beverages')], max_length=20)),
                ('description', models.CharField(blank=True, default='', max_length=1000)),
                ('image_url', models.URLField(blank=True, default='', max_length=500)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'db_table': 'menu_items',
                'ordering': ['category', 'name'],
                'constraints': [models.CheckConstraint(condition=models.Q(('price__gt', 0)), name='menu_item_price_positive')],
            },
        ),
    ]
