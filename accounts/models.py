from django.contrib.auth.hashers import check_password, make_password
from django.db import models


class User(models.Model):
	ROLE_CHOICES = [
		('Admin', 'Admin'),
		('Manager', 'Manager'),
		('Staff', 'Staff'),
		('User', 'User'),
	]
	name = models.CharField(max_length=100)
	username = models.CharField(max_length=150, unique=True)
	email = models.EmailField(unique=True)
	password = models.CharField(max_length=128)
	phone = models.CharField(max_length=20)
	role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='User')
	permissions = models.JSONField(default=dict, blank=True)
	is_active = models.BooleanField(default=True)
	last_login = models.DateTimeField(null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	# DRF checks these on request.user
	is_authenticated = True
	is_anonymous = False

	def set_password(self, raw_password):
		self.password = make_password(raw_password)

	def check_password(self, raw_password):
		return check_password(raw_password, self.password)

	def __str__(self):
		return f"{self.username} ({self.role})"
