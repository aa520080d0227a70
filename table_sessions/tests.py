from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from lounge.exceptions import StateConflict
from lounge.money import money
from lounge.testing import authenticate, make_menu_item, make_table, make_user
from orders import services as order_services
from .models import Session
from . import services


class SessionBillingTests(TestCase):
    """Time charge, order roll-up, tax and service fee at session end"""

    def setUp(self):
        self.staff = make_user('Staff')
        self.table = make_table(hourly_rate=Decimal('300.00'), plug_id='PLUG-1')

    def start(self):
        return services.start_session(table_id=self.table.pk, customer_name='Ravi',
                                      customer_phone='9800000001', created_by=self.staff)

    def test_partial_minutes_round_up(self):
        """Test started minutes are charged in full"""
        session = self.start()
        ended = services.end_session(session, now=session.start_time + timedelta(minutes=90, seconds=30))

        self.assertEqual(ended.duration, 91)
        self.assertEqual(ended.session_cost, Decimal('455.00'))

    def test_end_rolls_up_orders_placed_during_session(self):
        """Test session end adds orders, tax and service fee"""
        session = self.start()
        fries = make_menu_item(price=Decimal('100.00'))
        order = order_services.create_order(
            table_id=self.table.pk, items=[{'menu_item_id': fries.pk, 'quantity': 1}],
            created_by=self.staff, customer_name='Ravi', customer_phone='9800000001', order_type='food',
        )

        ended = services.end_session(session, now=session.start_time + timedelta(minutes=60))

        self.assertEqual(ended.total_order_cost, order.total)
        subtotal = Decimal('300.00') + order.total
        self.assertEqual(ended.subtotal, subtotal)
        self.assertEqual(ended.tax, money(subtotal * Decimal('0.085')))
        self.assertEqual(ended.service_fee, money(subtotal * Decimal('0.05')))
        self.assertEqual(ended.total, ended.subtotal + ended.tax + ended.service_fee)
        self.assertAlmostEqual(float(ended.total), float(subtotal * Decimal('1.135')), delta=0.01)

    def test_end_frees_the_table(self):
        """Test ending a session frees the table"""
        session = self.start()
        services.end_session(session)

        self.table.refresh_from_db()
        self.assertEqual(self.table.status, 'available')
        self.assertIsNone(self.table.customer_name)
        self.assertEqual(self.table.plug_status, 'offline')
        self.assertIsNone(self.table.current_session)

    def test_paused_session_cannot_end(self):
        """Test a paused session must resume before ending"""
        session = self.start()
        services.pause_session(session)

        with self.assertRaises(StateConflict):
            services.end_session(session)

    def test_resume_only_from_paused(self):
        """Test only paused sessions resume"""
        session = self.start()
        with self.assertRaises(StateConflict):
            services.resume_session(session)
        services.pause_session(session)
        services.resume_session(session)
        self.assertEqual(session.status, 'active')


class SessionAPITests(APITestCase):
    def setUp(self):
        self.staff = make_user('Staff')
        authenticate(self.client, self.staff)
        self.table = make_table(plug_id='PLUG-7')

    def start(self, table=None):
        data = {'table_id': (table or self.table).pk, 'customer_name': 'Ravi', 'customer_phone': '9800000001'}
        return self.client.post(reverse('session_start'), data, format='json')

    def test_start_occupies_table(self):
        """Test starting a session occupies the table"""
        response = self.start()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        session = response.data['data']['session']
        self.assertEqual(session['status'], 'active')
        self.assertTrue(session['session_id'].startswith('SES-'))
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, 'occupied')
        self.assertEqual(self.table.plug_status, 'online')
        self.assertEqual(self.table.current_session.pk, session['id'])

    def test_start_on_busy_table_rejected(self):
        """Test sessions only start on available tables"""
        for busy in ('occupied', 'reserved', 'maintenance'):
            table = make_table(status=busy)
            response = self.start(table)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data['message'], 'Table is not available')
        self.assertEqual(Session.objects.count(), 0)

    def test_second_start_on_same_table_rejected(self):
        """Test a table holds one session at a time"""
        self.start()
        response = self.start()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_extend_logs_entry(self):
        """Test extending records an extension entry"""
        session_id = self.start().data['data']['session']['id']

        response = self.client.post(reverse('session_extend', kwargs={'pk': session_id}),
                                    {'minutes': 30, 'reason': 'Customer request'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        extensions = Session.objects.get(pk=session_id).extensions
        self.assertEqual(extensions[0]['extended_by'], 30)
        self.assertEqual(extensions[0]['reason'], 'Customer request')

    def test_extend_needs_positive_minutes(self):
        """Test extensions need at least one minute"""
        session_id = self.start().data['data']['session']['id']
        response = self.client.post(reverse('session_extend', kwargs={'pk': session_id}),
                                    {'minutes': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pause_end_flow(self):
        """Test pause, resume and end through the API"""
        session_id = self.start().data['data']['session']['id']

        self.assertEqual(self.client.post(reverse('session_pause', kwargs={'pk': session_id})).status_code, 200)
        self.assertEqual(self.client.post(reverse('session_end', kwargs={'pk': session_id})).status_code, 400)
        self.assertEqual(self.client.post(reverse('session_resume', kwargs={'pk': session_id})).status_code, 200)

        response = self.client.post(reverse('session_end', kwargs={'pk': session_id}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['session']['status'], 'completed')

    def test_history_needs_phone_for_customers(self):
        """Test customers need a phone number for history"""
        authenticate(self.client, make_user('User'))
        response = self.client.get(reverse('session_history'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(reverse('session_history'), {'customer_phone': '9800000001'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_start_on_deactivated_table_not_found(self):
        """Test a deactivated table cannot start a session"""
        self.table.is_active = False
        self.table.save()

        response = self.start()

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Session.objects.count(), 0)

    def test_list_filters_by_table(self):
        """Test session list filtered by table"""
        self.start()
        other = make_table()

        response = self.client.get(reverse('session_list'), {'table_id': self.table.pk})
        self.assertEqual(len(response.data['data']['sessions']), 1)

        response = self.client.get(reverse('session_list'), {'table_id': other.pk})
        self.assertEqual(response.data['data']['sessions'], [])

    def test_list_rejects_malformed_table_id(self):
        """Test a non-numeric table filter gives 400"""
        response = self.client.get(reverse('session_list'), {'table_id': 'abc'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'table_id')
