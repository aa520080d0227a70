from django.db import models
from django.utils import timezone

from lounge.identifiers import generate_reference
from lounge.state_machine import StateMachine


SESSION_TRANSITIONS = StateMachine('session', {
	'active': ('paused', 'completed'),
	'paused': ('active',),
	'completed': (),
	'cancelled': (),
})


class Session(models.Model):
	STATUS_CHOICES = [
		('active', 'Active'),
		('paused', 'Paused'),
		('completed', 'Completed'),
		('cancelled', 'Cancelled'),
	]
	PAYMENT_STATUS_CHOICES = [
		('unpaid', 'Unpaid'),
		('paid', 'Paid'),
		('refunded', 'Refunded'),
	]
	PAYMENT_METHOD_CHOICES = [
		('cash', 'Cash'),
		('card', 'Card'),
		('upi', 'UPI'),
		('online', 'Online'),
	]
	session_id = models.CharField(max_length=50, unique=True, editable=False)
	table = models.ForeignKey('tables.Table', on_delete=models.PROTECT, related_name='sessions')
	table_number = models.CharField(max_length=20)
	customer_name = models.CharField(max_length=100)
	customer_phone = models.CharField(max_length=20, db_index=True)
	start_time = models.DateTimeField(default=timezone.now)
	end_time = models.DateTimeField(null=True, blank=True)
	duration = models.PositiveIntegerField(default=0)  # minutes
	hourly_rate = models.DecimalField(max_digits=10, decimal_places=2)
	session_cost = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	total_order_cost = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	tax = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	service_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	discount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	total = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='unpaid')
	payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, null=True, blank=True)
	status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active', db_index=True)
	extensions = models.JSONField(default=list, blank=True)
	plug_controlled = models.BooleanField(default=False)
	created_by = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='sessions')
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	def save(self, *args, **kwargs):
		if not self.session_id:
			self.session_id = generate_reference('SES', Session, 'session_id')
		super().save(*args, **kwargs)

	def __str__(self):
		return f"{self.session_id} (Table {self.table_number})"
