from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from lounge.testing import authenticate, make_table, make_user
from .models import Device, Printer


class DeviceAPITests(APITestCase):
    def setUp(self):
        authenticate(self.client, make_user('Manager'))
        self.table = make_table()

    def create(self, **overrides):
        data = {'device_id': 'PLUG-01', 'name': 'Snooker plug', 'type': 'smart_plug',
                'location': 'Hall A', 'table': self.table.pk}
        data.update(overrides)
        return self.client.post(reverse('device_list'), data, format='json')

    def test_create_and_show_on_table(self):
        """Test a new device shows up on its table"""
        response = self.create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(reverse('table_detail', kwargs={'pk': self.table.pk}))
        self.assertEqual([d['device_id'] for d in response.data['data']['table']['devices']], ['PLUG-01'])

    def test_duplicate_device_id_rejected(self):
        """Test device IDs are unique"""
        self.create()
        response = self.create(name='Another')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['message'], 'Device ID already exists')

    def test_control_refused_while_offline(self):
        """Test offline devices cannot be switched"""
        device_id = self.create().data['data']['device']['id']
        control_url = reverse('device_control', kwargs={'pk': device_id})

        response = self.client.post(control_url, {'action': 'on'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Device is offline')

        self.client.patch(reverse('device_status', kwargs={'pk': device_id}), {'status': 'online'}, format='json')
        response = self.client.post(control_url, {'action': 'on'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Device.objects.get(pk=device_id).power_state, 'on')

    def test_delete_is_admin_only_and_soft(self):
        """Test device delete is admin only and keeps the row"""
        device_id = self.create().data['data']['device']['id']
        url = reverse('device_detail', kwargs={'pk': device_id})
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_403_FORBIDDEN)

        authenticate(self.client, make_user('Admin'))
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_200_OK)
        self.assertFalse(Device.objects.get(pk=device_id).is_active)

    def test_stats_overview(self):
        """Test device counts by status and type"""
        self.create()
        self.create(device_id='TV-01', type='tv')
        Device.objects.filter(device_id='TV-01').update(status='online')

        stats = self.client.get(reverse('device_stats')).data['data']['stats']

        self.assertEqual(stats['total'], 2)
        self.assertEqual(stats['online'], 1)
        self.assertEqual(stats['by_type']['tv']['online'], 1)

    def test_list_filters_by_table(self):
        """Test device list filtered by table"""
        self.create()
        self.create(device_id='TV-01', type='tv', table=make_table().pk)

        response = self.client.get(reverse('device_list'), {'table_id': self.table.pk})

        self.assertEqual([d['device_id'] for d in response.data['data']['devices']], ['PLUG-01'])

    def test_list_rejects_malformed_table_id(self):
        """Test a non-numeric table filter gives 400"""
        response = self.client.get(reverse('device_list'), {'table_id': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'table_id')


class PrinterAPITests(APITestCase):
    def setUp(self):
        authenticate(self.client, make_user('Manager'))
        self.printer = Printer.objects.create(name='Kitchen 1', type='Kitchen Printer')

    def test_test_print_marks_online(self):
        """Test a test print marks the printer online"""
        response = self.client.post(reverse('printer_test', kwargs={'pk': self.printer.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.printer.refresh_from_db()
        self.assertEqual(self.printer.status, 'online')
        self.assertIsNotNone(self.printer.last_test)

    def test_disabled_printer_cannot_test(self):
        """Test disabled printers refuse test prints"""
        self.client.patch(reverse('printer_toggle', kwargs={'pk': self.printer.pk}))

        response = self.client.post(reverse('printer_test', kwargs={'pk': self.printer.pk}))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Printer is not active')

    def test_invalid_type_rejected(self):
        """Test unknown printer types are refused"""
        response = self.client.post(reverse('printer_list'), {'name': 'X', 'type': 'Laser'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['message'], 'Invalid printer type')

    def test_delete_is_soft(self):
        """Test printer delete only deactivates"""
        authenticate(self.client, make_user('Admin'))
        self.client.delete(reverse('printer_detail', kwargs={'pk': self.printer.pk}))

        self.assertTrue(Printer.objects.filter(pk=self.printer.pk).exists())
        response = self.client.get(reverse('printer_list'))
        self.assertEqual(response.data['data']['printers'], [])
