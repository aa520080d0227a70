from decimal import Decimal

from django.core.management.base import BaseCommand
from menu.models import MenuItem


class Command(BaseCommand):
    help = 'Seed the database with a starter lounge menu'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing menu items before seeding',
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing menu items...')
            MenuItem.objects.all().delete()
            self.stdout.write(
                self.style.SUCCESS('Successfully cleared menu items')
            )

        menu_items = [
            {
                "name": "Masala Fries",
                "category": "Food",
                "subcategory": "Snacks",
                "price": Decimal("120.00"),
                "printer": "Kitchen Printer",
                "preparation_time": 10,
            },
            {
                "name": "Chicken Burger",
                "category": "Food",
                "subcategory": "Burgers",
                "price": Decimal("250.00"),
                "printer": "Kitchen Printer",
                "is_popular": True,
            },
            {
                "name": "Paneer Tikka",
                "category": "Food",
                "subcategory": "Starters",
                "price": Decimal("280.00"),
                "printer": "Kitchen Printer",
                "preparation_time": 20,
            },
            {
                "name": "Cold Coffee",
                "category": "Beverages",
                "subcategory": "Coffee",
                "price": Decimal("150.00"),
                "printer": "Bar Printer",
                "preparation_time": 5,
            },
            {
                "name": "Fresh Lime Soda",
                "category": "Drinks",
                "subcategory": "Mocktails",
                "price": Decimal("90.00"),
                "printer": "Bar Printer",
                "preparation_time": 5,
            },
            {
                "name": "Cue Chalk Pack",
                "category": "Games",
                "subcategory": "Accessories",
                "price": Decimal("40.00"),
                "printer": "Game Zone Printer",
                "preparation_time": 0,
            },
            {
                "name": "Extra Controller",
                "category": "Games",
                "subcategory": "PlayStation",
                "price": Decimal("60.00"),
                "printer": "Game Zone Printer",
                "preparation_time": 0,
            },
            {
                "name": "Combo Platter",
                "category": "Mixed",
                "subcategory": "Combos",
                "price": Decimal("499.00"),
                "printer": "Main Printer",
                "preparation_time": 25,
            },
        ]

        created_items = []
        for item_data in menu_items:
            name = item_data.pop('name')
            item, created = MenuItem.objects.get_or_create(name=name, defaults=item_data)
            if created:
                created_items.append(item)
                self.stdout.write(
                    f"Created: {item.name} - {item.price:.2f} ({item.category}/{item.subcategory} -> {item.printer})"
                )
            else:
                self.stdout.write(
                    f"Already exists: {item.name}"
                )

        self.stdout.write(
            self.style.SUCCESS(f'\nTotal new menu items created: {len(created_items)}')
        )

        self.stdout.write("\nAll menu items in database:")
        self.stdout.write("-" * 70)
        for item in MenuItem.objects.all().order_by('category', 'name'):
            self.stdout.write(
                f"ID: {item.id:2d} | {item.name:20s} | {item.price:8.2f} | {item.category:9s} | {item.printer}"
            )
