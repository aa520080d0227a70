from django.db import models


class Device(models.Model):
	TYPE_CHOICES = [
		('smart_plug', 'Smart plug'),
		('light', 'Light'),
		('tv', 'TV'),
		('gaming_console', 'Gaming console'),
		('sound_system', 'Sound system'),
		('other', 'Other'),
	]
	STATUS_CHOICES = [
		('online', 'Online'),
		('offline', 'Offline'),
		('maintenance', 'Maintenance'),
	]
	POWER_CHOICES = [
		('on', 'On'),
		('off', 'Off'),
	]
	device_id = models.CharField(max_length=50, unique=True)
	name = models.CharField(max_length=100)
	type = models.CharField(max_length=20, choices=TYPE_CHOICES)
	location = models.CharField(max_length=100)
	table = models.ForeignKey('tables.Table', on_delete=models.SET_NULL, null=True, blank=True, related_name='devices')
	status = models.CharField(max_length=15, choices=STATUS_CHOICES, default='offline')
	power_state = models.CharField(max_length=3, choices=POWER_CHOICES, default='off')
	power_consumption = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)  # watts
	last_updated = models.DateTimeField(auto_now=True)
	is_active = models.BooleanField(default=True)
	created_at = models.DateTimeField(auto_now_add=True)

	def __str__(self):
		return f"{self.name} ({self.device_id})"


class Printer(models.Model):
	TYPE_CHOICES = [
		('Kitchen Printer', 'Kitchen Printer'),
		('Bar Printer', 'Bar Printer'),
		('Receipt Printer', 'Receipt Printer'),
		('Main Printer', 'Main Printer'),
		('Game Zone Printer', 'Game Zone Printer'),
	]
	STATUS_CHOICES = [
		('online', 'Online'),
		('offline', 'Offline'),
		('error', 'Error'),
	]
	name = models.CharField(max_length=100)
	type = models.CharField(max_length=20, choices=TYPE_CHOICES)
	ip_address = models.GenericIPAddressField(null=True, blank=True)
	port = models.PositiveIntegerField(null=True, blank=True)
	status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='offline')
	is_active = models.BooleanField(default=True)
	last_test = models.DateTimeField(null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	def __str__(self):
		return f"{self.name} ({self.type})"
