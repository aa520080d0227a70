from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from lounge.testing import authenticate, make_menu_item, make_user
from .models import MenuItem
from .serializers import group_menu


class MenuGroupingTests(TestCase):
    def test_group_by_category_then_subcategory(self):
        """Test grouping by category then subcategory"""
        items = [
            {'name': 'Fries', 'category': 'Food', 'subcategory': 'Snacks'},
            {'name': 'Burger', 'category': 'Food', 'subcategory': 'Burgers'},
            {'name': 'Nachos', 'category': 'Food', 'subcategory': 'Snacks'},
            {'name': 'Soda', 'category': 'Drinks', 'subcategory': 'Mocktails'},
        ]
        grouped = group_menu(items)

        self.assertEqual(set(grouped), {'Food', 'Drinks'})
        self.assertEqual([i['name'] for i in grouped['Food']['Snacks']], ['Fries', 'Nachos'])


class SeedMenuCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        """Test seeding twice creates nothing new"""
        call_command('seed_menu', stdout=StringIO())
        first = MenuItem.objects.count()
        call_command('seed_menu', stdout=StringIO())

        self.assertGreater(first, 0)
        self.assertEqual(MenuItem.objects.count(), first)

    def test_clear_removes_existing_items(self):
        """Test --clear wipes the menu before seeding"""
        make_menu_item(name='Old Special')
        call_command('seed_menu', '--clear', stdout=StringIO())
        self.assertFalse(MenuItem.objects.filter(name='Old Special').exists())


class MenuAPITests(APITestCase):
    def test_anonymous_can_browse(self):
        """Test the menu is readable without logging in"""
        make_menu_item(name='Fries', category='Food', subcategory='Snacks')
        make_menu_item(name='Soda', category='Drinks', subcategory='Mocktails', is_available=False)

        response = self.client.get(reverse('menu_list'), {'available': 'true'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [item['name'] for item in response.data['data']['menu_items']]
        self.assertEqual(names, ['Fries'])
        self.assertIn('Snacks', response.data['data']['grouped_menu']['Food'])

    def test_anonymous_cannot_create(self):
        """Test creating items needs a login"""
        response = self.client.post(reverse('menu_list'), {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_manager_creates_item(self):
        """Test a manager can add a menu item"""
        authenticate(self.client, make_user('Manager'))
        data = {'name': 'Cold Coffee', 'category': 'Beverages', 'subcategory': 'Coffee',
                'price': '150.00', 'printer': 'Bar Printer'}

        response = self.client.post(reverse('menu_list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(MenuItem.objects.get(name='Cold Coffee').price, Decimal('150.00'))

    def test_toggle_availability(self):
        """Test availability toggle flips the flag"""
        authenticate(self.client, make_user('Manager'))
        item = make_menu_item()

        response = self.client.patch(reverse('menu_availability', kwargs={'pk': item.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item.refresh_from_db()
        self.assertFalse(item.is_available)

    def test_delete_is_admin_only_and_hard(self):
        """Test menu delete is admin only and removes the row"""
        item = make_menu_item()
        url = reverse('menu_detail', kwargs={'pk': item.pk})

        authenticate(self.client, make_user('Manager'))
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_403_FORBIDDEN)

        authenticate(self.client, make_user('Admin'))
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_200_OK)
        self.assertFalse(MenuItem.objects.filter(pk=item.pk).exists())

    def test_category_structure(self):
        """Test category to subcategory structure"""
        make_menu_item(category='Food', subcategory='Snacks')
        make_menu_item(category='Food', subcategory='Burgers')

        response = self.client.get(reverse('menu_structure'))

        self.assertEqual(response.data['data']['structure'], {'Food': ['Burgers', 'Snacks']})
