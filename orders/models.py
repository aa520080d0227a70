from django.db import models

from lounge.identifiers import generate_reference
from lounge.state_machine import StateMachine


ORDER_TRANSITIONS = StateMachine('order', {
	'pending': ('confirmed', 'preparing', 'ready', 'cancelled'),
	'confirmed': ('preparing', 'ready', 'cancelled'),
	'preparing': ('ready', 'cancelled'),
	'ready': ('served', 'cancelled'),
	'served': (),
	'cancelled': (),
})

ORDER_ITEM_TRANSITIONS = StateMachine('order item', {
	'pending': ('preparing', 'ready'),
	'preparing': ('ready',),
	'ready': ('served',),
	'served': (),
})


class Order(models.Model):
	SERVICE_TYPE_CHOICES = [
		('dine-in', 'Dine-in'),
		('takeaway', 'Takeaway'),
	]
	ORDER_TYPE_CHOICES = [
		('food', 'Food'),
		('drinks', 'Drinks'),
		('games', 'Games'),
		('mixed', 'Mixed'),
	]
	STATUS_CHOICES = [
		('pending', 'Pending'),
		('confirmed', 'Confirmed'),
		('preparing', 'Preparing'),
		('ready', 'Ready'),
		('served', 'Served'),
		('cancelled', 'Cancelled'),
	]
	DISCOUNT_TYPE_CHOICES = [
		('percentage', 'Percentage'),
		('fixed', 'Fixed'),
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
	order_id = models.CharField(max_length=50, unique=True, editable=False)
	table = models.ForeignKey('tables.Table', on_delete=models.PROTECT, related_name='orders')
	table_number = models.CharField(max_length=20)
	customer_name = models.CharField(max_length=100)
	customer_phone = models.CharField(max_length=20)
	service_type = models.CharField(max_length=10, choices=SERVICE_TYPE_CHOICES, default='dine-in')
	order_type = models.CharField(max_length=10, choices=ORDER_TYPE_CHOICES)
	status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending', db_index=True)
	subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	tax = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	discount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	discount_type = models.CharField(max_length=10, choices=DISCOUNT_TYPE_CHOICES, default='percentage')
	total = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='unpaid')
	payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, null=True, blank=True)
	kot_printed = models.BooleanField(default=False)
	kot_printed_at = models.DateTimeField(null=True, blank=True)
	created_by = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='orders')
	special_instructions = models.TextField(null=True, blank=True)
	estimated_time = models.PositiveIntegerField(default=30)  # minutes
	actual_time = models.PositiveIntegerField(null=True, blank=True)  # minutes
	created_at = models.DateTimeField(auto_now_add=True, db_index=True)
	updated_at = models.DateTimeField(auto_now=True)

	def save(self, *args, **kwargs):
		if not self.order_id:
			self.order_id = generate_reference('ORD', Order, 'order_id')
		super().save(*args, **kwargs)

	def __str__(self):
		return f"{self.order_id} (Table {self.table_number})"


class OrderItem(models.Model):
	STATUS_CHOICES = [
		('pending', 'Pending'),
		('preparing', 'Preparing'),
		('ready', 'Ready'),
		('served', 'Served'),
	]
	order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
	menu_item = models.ForeignKey('menu.MenuItem', on_delete=models.SET_NULL, null=True, related_name='order_items')
	name = models.CharField(max_length=100)
	price = models.DecimalField(max_digits=10, decimal_places=2)
	quantity = models.PositiveIntegerField()
	status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
	special_instructions = models.TextField(null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	@property
	def line_total(self):
		return self.price * self.quantity

	def __str__(self):
		return f"{self.quantity} x {self.name} for {self.order.order_id}"
