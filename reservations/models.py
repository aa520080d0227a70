from django.core.validators import MinValueValidator
from django.db import models

from lounge.identifiers import generate_reference
from lounge.state_machine import StateMachine


RESERVATION_TRANSITIONS = StateMachine('reservation', {
	'confirmed': ('arrived', 'cancelled', 'no-show'),
	'arrived': ('completed', 'cancelled'),
	'cancelled': (),
	'completed': (),
	'no-show': (),
})

# Booking categories as customers see them, mapped to the table type they book
TABLE_TYPE_MAP = {
	'Snooker Table': 'Snooker',
	'Pool Table': 'Pool',
	'PlayStation Station': 'PlayStation',
	'Restaurant Table': 'Restaurant',
	'Dining Table': 'Dining',
}


class Reservation(models.Model):
	TABLE_TYPE_CHOICES = [(label, label) for label in TABLE_TYPE_MAP]
	STATUS_CHOICES = [
		('confirmed', 'Confirmed'),
		('arrived', 'Arrived'),
		('cancelled', 'Cancelled'),
		('completed', 'Completed'),
		('no-show', 'No-show'),
	]
	LIVE_STATUSES = ('confirmed', 'arrived')

	reservation_id = models.CharField(max_length=50, unique=True, editable=False)
	customer_name = models.CharField(max_length=100)
	customer_phone = models.CharField(max_length=20, db_index=True)
	customer_email = models.EmailField(null=True, blank=True)
	table = models.ForeignKey('tables.Table', on_delete=models.SET_NULL, null=True, blank=True, related_name='reservations')
	table_type = models.CharField(max_length=30, choices=TABLE_TYPE_CHOICES)
	reservation_date = models.DateField()
	reservation_time = models.TimeField()
	duration = models.PositiveIntegerField(default=2)  # hours
	party_size = models.PositiveIntegerField(validators=[MinValueValidator(1)])
	special_requests = models.TextField(null=True, blank=True)
	status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='confirmed', db_index=True)
	sms_notification = models.BooleanField(default=True)
	email_notification = models.BooleanField(default=True)
	advance_payment = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	created_by = models.ForeignKey('accounts.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='reservations')
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		indexes = [
			models.Index(fields=['table_type', 'reservation_date', 'reservation_time']),
		]

	def save(self, *args, **kwargs):
		if not self.reservation_id:
			self.reservation_id = generate_reference('RES', Reservation, 'reservation_id')
		super().save(*args, **kwargs)

	def __str__(self):
		return f"{self.reservation_id} {self.customer_name} on {self.reservation_date} {self.reservation_time}"
