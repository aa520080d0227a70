"""Fixtures shared by the app test suites."""
from decimal import Decimal

from accounts.models import User
from accounts.roles import permissions_for_role
from menu.models import MenuItem
from tables.models import Table
from .tokens import issue_token

_counter = {'n': 0}


def _next():
    _counter['n'] += 1
    return _counter['n']


def make_user(role='Staff', **fields):
    n = _next()
    defaults = {
        'name': f'{role} {n}',
        'username': f'{role.lower()}{n}',
        'email': f'{role.lower()}{n}@example.com',
        'phone': f'98000{n:05d}',
        'role': role,
        'permissions': permissions_for_role(role),
    }
    defaults.update(fields)
    password = defaults.pop('password', 'secret')
    user = User(**defaults)
    user.set_password(password)
    user.save()
    return user


def authenticate(client, user):
    client.defaults['HTTP_AUTHORIZATION'] = f'Bearer {issue_token(user)}'
    return client


def make_table(**fields):
    n = _next()
    defaults = {
        'table_number': f'T{n}',
        'name': f'Table {n}',
        'type': 'Snooker',
        'location': 'Hall A',
        'capacity': 4,
        'hourly_rate': Decimal('300.00'),
    }
    defaults.update(fields)
    return Table.objects.create(**defaults)


def make_menu_item(**fields):
    defaults = {
        'name': f'Item {_next()}',
        'category': 'Food',
        'subcategory': 'Snacks',
        'price': Decimal('100.00'),
        'printer': 'Kitchen Printer',
    }
    defaults.update(fields)
    return MenuItem.objects.create(**defaults)
