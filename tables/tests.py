from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from lounge.testing import authenticate, make_table, make_user
from .models import Table


class TableAPITests(APITestCase):
    def setUp(self):
        self.manager = make_user('Manager')
        authenticate(self.client, self.manager)

    def test_create_table(self):
        data = {'table_number': 'S1', 'name': 'Snooker 1', 'type': 'Snooker', 'location': 'Hall A',
                'capacity': 4, 'hourly_rate': '300.00'}
        response = self.client.post(reverse('table_list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Table.objects.get(table_number='S1').status, 'available')

    def test_duplicate_table_number_rejected(self):
        """Test table numbers are unique"""
        make_table(table_number='S1')
        data = {'table_number': 'S1', 'name': 'Again', 'type': 'Pool', 'location': 'Hall B',
                'capacity': 2, 'hourly_rate': '100.00'}
        response = self.client.post(reverse('table_list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'table_number')

    def test_staff_cannot_create_table(self):
        """Test staff cannot add tables"""
        authenticate(self.client, make_user('Staff'))
        response = self.client.post(reverse('table_list'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filters_and_hides_inactive(self):
        """Test table list filters and hides deactivated tables"""
        make_table(type='Pool')
        make_table(type='Snooker')
        make_table(type='Snooker', is_active=False)

        response = self.client.get(reverse('table_list'), {'type': 'Snooker'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        tables = response.data['data']['tables']
        self.assertEqual(len(tables), 1)
        self.assertIsNone(tables[0]['current_session'])
        self.assertEqual(tables[0]['devices'], [])

    def test_cannot_delete_occupied_table(self):
        """Test occupied tables cannot be deleted"""
        authenticate(self.client, make_user('Admin'))
        table = make_table(status='occupied')

        response = self.client.delete(reverse('table_detail', kwargs={'pk': table.pk}))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        table.refresh_from_db()
        self.assertTrue(table.is_active)

    def test_missing_table_is_404(self):
        """Test a missing table gives 404"""
        response = self.client.get(reverse('table_detail', kwargs={'pk': 999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Table not found')

    def test_plug_mapping_and_control(self):
        """Test mapping a plug and switching it"""
        table = make_table()
        control_url = reverse('table_plug_control', kwargs={'pk': table.pk})

        response = self.client.post(control_url, {'action': 'on'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.client.post(reverse('table_plug', kwargs={'pk': table.pk}), {'plug_id': 'PLUG-9'}, format='json')
        response = self.client.post(control_url, {'action': 'on'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        table.refresh_from_db()
        self.assertEqual(table.plug_status, 'online')
