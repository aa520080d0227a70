from django.core.validators import MinValueValidator
from django.db import models


class Table(models.Model):
	TYPE_CHOICES = [
		('Snooker', 'Snooker'),
		('Pool', 'Pool'),
		('PlayStation', 'PlayStation'),
		('Restaurant', 'Restaurant'),
		('Dining', 'Dining'),
		('Food', 'Food'),
	]
	STATUS_CHOICES = [
		('available', 'Available'),
		('occupied', 'Occupied'),
		('reserved', 'Reserved'),
		('maintenance', 'Maintenance'),
	]
	PLUG_STATUS_CHOICES = [
		('online', 'Online'),
		('offline', 'Offline'),
	]
	table_number = models.CharField(max_length=20, unique=True)
	name = models.CharField(max_length=100)
	type = models.CharField(max_length=20, choices=TYPE_CHOICES)
	location = models.CharField(max_length=100)
	capacity = models.PositiveIntegerField(default=4, validators=[MinValueValidator(1)])
	status = models.CharField(max_length=15, choices=STATUS_CHOICES, default='available', db_index=True)
	hourly_rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	plug_id = models.CharField(max_length=50, null=True, blank=True)
	plug_status = models.CharField(max_length=10, choices=PLUG_STATUS_CHOICES, default='offline')
	session_start_time = models.DateTimeField(null=True, blank=True)
	session_end_time = models.DateTimeField(null=True, blank=True)
	customer_name = models.CharField(max_length=100, null=True, blank=True)
	customer_phone = models.CharField(max_length=20, null=True, blank=True)
	features = models.JSONField(default=list, blank=True)
	is_active = models.BooleanField(default=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	@property
	def current_session(self):
		# Derived from the sessions themselves; the table stores no pointer
		return self.sessions.filter(status__in=['active', 'paused']).order_by('-start_time').first()

	def __str__(self):
		return f"Table {self.table_number} ({self.name})"
