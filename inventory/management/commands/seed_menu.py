import logging
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from inventory.models import MenuItem

logger = logging.getLogger(__name__)

C = MenuItem.Category

INITIAL_MENU = [
    ("Mutton Biryani (Special) 2 pc", '300.00', C.MUTTON, "Special mutton biryani with 2 pieces"),
    ("Mutton Egg Biryani", '180.00', C.MUTTON, "Mutton biryani with egg"),
    ("Mutton Biryani", '170.00', C.MUTTON, "Classic mutton biryani"),
    ("Mutton Biryani (Half)", '150.00', C.MUTTON, "Half portion mutton biryani"),
    ("Mutton Chaap", '120.00', C.MUTTON, "Tender mutton chaap"),

    ("Chicken Biryani (Special) 2 pc", '160.00', C.CHICKEN, "Special chicken biryani with 2 pieces"),
    ("Chicken Egg Biryani", '110.00', C.CHICKEN, "Chicken biryani with egg"),
    ("Chicken Biryani", '100.00', C.CHICKEN, "Classic chicken biryani"),
    ("Chicken Biryani (Half)", '80.00', C.CHICKEN, "Half portion chicken biryani"),
    ("Chicken Chaap", '50.00', C.CHICKEN, "Tender chicken chaap"),

    ("Egg Biryani", '80.00', C.EGG, "Delicious egg biryani"),
    ("Half Egg Biryani", '60.00', C.EGG, "Half portion egg biryani"),
    ("Aloo Biryani", '70.00', C.VEG, "Vegetarian potato biryani"),
    ("Half Aloo Biryani", '50.00', C.VEG, "Half portion potato biryani"),

    ("Water Bottle", '10.00', C.BEVERAGES, "Fresh water bottle"),
    ("Water Bottle (Large)", '20.00', C.BEVERAGES, "Large water bottle"),
    ("Soft Drink (Small)", '10.00', C.BEVERAGES, "Small soft drink"),
    ("Soft Drink (Medium)", '15.00', C.BEVERAGES, "Medium soft drink"),
    ("Soft Drink (Large)", '20.00', C.BEVERAGES, "Large soft drink"),
    ("Soft Drink (Premium)", '50.00', C.BEVERAGES, "Premium soft drink"),

    ("Extra Rice", '50.00', C.EXTRAS, "Additional rice portion"),
    ("Mutton Extra", '110.00', C.EXTRAS, "Extra mutton pieces"),
    ("Chicken Extra", '40.00', C.EXTRAS, "Extra chicken pieces"),
    ("Gravy", '10.00', C.EXTRAS, "Extra gravy/curry"),
    ("Raita", '10.00', C.EXTRAS, "Fresh raita"),
    ("Aloo Extra", '5.00', C.EXTRAS, "Extra potato"),
    ("Salad", '10.00', C.EXTRAS, "Fresh salad"),
]


class Command(BaseCommand):
    help = "Load the initial biryani menu. Items that already exist (by name) are left untouched."

    def add_arguments(self, parser):
        parser.add_argument(
            '--inactive', action='store_true',
            help="Create the items deactivated so they can be reviewed before going live",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        created = skipped = 0
        for name, price, category, description in INITIAL_MENU:
            _, was_created = MenuItem.objects.get_or_create(
                name=name,
                defaults={
                    'price': Decimal(price),
                    'category': category,
                    'description': description,
                    'is_active': not options['inactive'],
                }
            )
            if was_created:
                created += 1
            else:
                skipped += 1

        logger.info(f"seed_menu: {created} created, {skipped} already present")
        self.stdout.write(self.style.SUCCESS(
            f"Added {created} menu items ({skipped} already present, {len(INITIAL_MENU)} total)"
        ))
