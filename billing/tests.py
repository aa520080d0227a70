from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from lounge.testing import authenticate, make_menu_item, make_table, make_user
from orders import services as order_services
from orders.models import Order
from table_sessions import services as session_services
from table_sessions.models import Session


class BillingAPITests(APITestCase):
    def setUp(self):
        self.manager = make_user('Manager')
        authenticate(self.client, self.manager)
        self.table = make_table(hourly_rate=Decimal('300.00'))
        self.session = session_services.start_session(
            table_id=self.table.pk, customer_name='Ravi', customer_phone='9800000001', created_by=self.manager,
        )

    def end_after_an_hour(self):
        return session_services.end_session(self.session, now=self.session.start_time + timedelta(minutes=60))

    def discount(self, discount_type, value):
        return self.client.post(reverse('session_discount', kwargs={'pk': self.session.pk}),
                                {'discount_type': discount_type, 'discount_value': value}, format='json')

    def test_percentage_discount_within_limit(self):
        """Test percentage discount within the manager limit"""
        ended = self.end_after_an_hour()
        self.assertEqual(ended.total, Decimal('340.50'))

        response = self.discount('percentage', 10)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.session.refresh_from_db()
        self.assertEqual(self.session.discount, Decimal('30.00'))
        self.assertEqual(self.session.total, Decimal('310.50'))

    def test_percentage_above_limit_rejected(self):
        """Test percentage above the caller's limit is refused"""
        self.end_after_an_hour()

        response = self.discount('percentage', 20)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['message'], 'Maximum discount allowed is 15%')
        self.session.refresh_from_db()
        self.assertEqual(self.session.discount, Decimal('0'))

    def test_staff_without_discount_rights_forbidden(self):
        """Test staff without discount rights get 403"""
        self.end_after_an_hour()
        authenticate(self.client, make_user('Staff'))

        response = self.discount('percentage', 5)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Insufficient permissions to apply discount')

    def test_fixed_discount_floors_at_zero(self):
        """Test a fixed discount never takes the total below zero"""
        self.end_after_an_hour()

        self.discount('fixed', '1000.00')

        self.session.refresh_from_db()
        self.assertEqual(self.session.total, Decimal('0'))

    def test_bill_shows_live_cost_without_saving(self):
        """Test the bill of a running session shows the cost so far"""
        Session.objects.filter(pk=self.session.pk).update(start_time=self.session.start_time - timedelta(minutes=30))

        response = self.client.get(reverse('session_bill', kwargs={'pk': self.session.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        live = Decimal(str(response.data['data']['bill']['session']['current_session_cost']))
        self.assertGreaterEqual(live, Decimal('150.00'))
        self.session.refresh_from_db()
        self.assertEqual(self.session.session_cost, Decimal('0'))

    def test_paying_active_session_ends_it(self):
        """Test paying a running session ends it first"""
        fries = make_menu_item(price=Decimal('100.00'))
        order = order_services.create_order(
            table_id=self.table.pk, items=[{'menu_item_id': fries.pk, 'quantity': 1}],
            created_by=self.manager, customer_name='Ravi', customer_phone='9800000001', order_type='food',
        )

        response = self.client.post(reverse('session_payment', kwargs={'pk': self.session.pk}),
                                    {'payment_method': 'cash', 'amount_paid': '2000.00'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.session.refresh_from_db()
        self.assertEqual(self.session.status, 'completed')
        self.assertEqual(self.session.payment_status, 'paid')
        self.assertEqual(self.session.total_order_cost, order.total)
        self.assertEqual(Order.objects.get(pk=order.pk).payment_status, 'paid')
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, 'available')

    def test_double_payment_rejected(self):
        """Test a paid session cannot be paid again"""
        url = reverse('session_payment', kwargs={'pk': self.session.pk})
        self.client.post(url, {'payment_method': 'card', 'amount_paid': '500'}, format='json')

        response = self.client.post(url, {'payment_method': 'card', 'amount_paid': '500'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Session already paid')

    def test_paused_session_cannot_be_paid(self):
        """Test paused sessions must resume before payment"""
        session_services.pause_session(self.session)
        response = self.client.post(reverse('session_payment', kwargs={'pk': self.session.pk}),
                                    {'payment_method': 'upi', 'amount_paid': '100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receipt(self):
        self.end_after_an_hour()

        response = self.client.get(reverse('session_receipt', kwargs={'pk': self.session.pk}))

        receipt = response.data['data']['receipt']
        self.assertEqual(receipt['session_id'], self.session.session_id)
        self.assertEqual(receipt['session_charges']['duration_hours'], '1.00')

    def test_history_is_public_and_needs_phone(self):
        """Test billing history is public but needs a phone number"""
        self.client.defaults.pop('HTTP_AUTHORIZATION')
        self.assertEqual(self.client.get(reverse('billing_history')).status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(reverse('billing_history'), {'customer_phone': '9800000001'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['sessions'], [])
