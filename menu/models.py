from django.core.validators import MinValueValidator
from django.db import models


class MenuItem(models.Model):
	CATEGORY_CHOICES = [
		('Food', 'Food'),
		('Drinks', 'Drinks'),
		('Games', 'Games'),
		('Beverages', 'Beverages'),
		('Mixed', 'Mixed'),
	]
	PRINTER_CHOICES = [
		('Kitchen Printer', 'Kitchen Printer'),
		('Bar Printer', 'Bar Printer'),
		('Main Printer', 'Main Printer'),
		('Game Zone Printer', 'Game Zone Printer'),
	]
	name = models.CharField(max_length=100)
	description = models.TextField(null=True, blank=True)
	category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
	subcategory = models.CharField(max_length=50)
	price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
	image = models.CharField(max_length=255, null=True, blank=True)
	printer = models.CharField(max_length=30, choices=PRINTER_CHOICES)
	is_available = models.BooleanField(default=True)
	variants = models.JSONField(default=list, blank=True)
	nutritional_info = models.JSONField(default=dict, blank=True)
	preparation_time = models.PositiveIntegerField(default=15)  # minutes
	is_popular = models.BooleanField(default=False)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	def __str__(self):
		return self.name
