from decimal import Decimal
from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from lounge.exceptions import StateConflict
from lounge.testing import authenticate, make_menu_item, make_table, make_user
from .models import ORDER_TRANSITIONS, Order, OrderItem
from . import services


class OrderStateMachineTests(TestCase):
    def test_forward_moves_allowed(self):
        self.assertTrue(ORDER_TRANSITIONS.can_transition('pending', 'confirmed'))
        self.assertTrue(ORDER_TRANSITIONS.can_transition('ready', 'served'))

    def test_terminal_states_are_final(self):
        """Test served and cancelled orders cannot move"""
        self.assertFalse(ORDER_TRANSITIONS.can_transition('served', 'pending'))
        self.assertFalse(ORDER_TRANSITIONS.can_transition('cancelled', 'confirmed'))
        with self.assertRaises(StateConflict):
            ORDER_TRANSITIONS.check('served', 'cancelled')


class OrderServiceTests(TestCase):
    def setUp(self):
        self.staff = make_user('Staff')
        self.table = make_table()
        self.fries = make_menu_item(name='Fries', price=Decimal('100.00'))
        self.soda = make_menu_item(name='Soda', price=Decimal('60.00'), printer='Bar Printer')

    def place(self, *lines):
        return services.create_order(
            table_id=self.table.pk,
            items=[{'menu_item_id': item.pk, 'quantity': qty} for item, qty in lines],
            created_by=self.staff,
            customer_name='Ravi',
            customer_phone='9800000001',
            order_type='mixed',
        )

    def test_totals_include_tax(self):
        """Test subtotal, tax and total of a new order"""
        order = self.place((self.fries, 2), (self.soda, 1))

        self.assertEqual(order.subtotal, Decimal('260.00'))
        self.assertEqual(order.tax, Decimal('22.10'))
        self.assertEqual(order.total, Decimal('282.10'))
        self.assertTrue(order.order_id.startswith('ORD-'))
        self.assertEqual(order.items.count(), 2)

    def test_unavailable_item_rejects_whole_order(self):
        """Test one unavailable item rejects the whole order"""
        self.soda.is_available = False
        self.soda.save()

        with self.assertRaises(StateConflict):
            self.place((self.fries, 1), (self.soda, 1))

        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderItem.objects.count(), 0)

    def test_last_ready_item_cascades_to_order(self):
        """Test the order becomes ready with its last item"""
        order = self.place((self.fries, 1), (self.soda, 1))
        services.mark_kot_printed(order)
        first, second = order.items.order_by('id')

        services.complete_item(first)
        order.refresh_from_db()
        self.assertEqual(order.status, 'confirmed')

        services.complete_item(second)
        order.refresh_from_db()
        self.assertEqual(order.status, 'ready')
        self.assertIsNotNone(order.actual_time)

    def test_completing_ready_item_again_still_cascades(self):
        """Test completing a ready item again re-checks the order"""
        order = self.place((self.fries, 1), (self.soda, 1))
        services.mark_kot_printed(order)
        first, second = order.items.order_by('id')
        services.complete_item(first)
        second.status = 'ready'
        second.save()

        services.complete_item(first)

        first.refresh_from_db()
        order.refresh_from_db()
        self.assertEqual(first.status, 'ready')
        self.assertEqual(order.status, 'ready')

    def test_kot_print_confirms_pending_order(self):
        """Test printing the KOT confirms a pending order"""
        order = self.place((self.fries, 1))
        services.mark_kot_printed(order)
        order.refresh_from_db()

        self.assertTrue(order.kot_printed)
        self.assertEqual(order.status, 'confirmed')

    def test_actual_time_counts_minutes_to_ready(self):
        """Test actual time rounds up to whole minutes"""
        order = self.place((self.fries, 1))
        services.set_order_status(order, 'ready', now=order.created_at + timedelta(minutes=12, seconds=5))
        self.assertEqual(order.actual_time, 13)

    def test_served_order_cannot_be_cancelled(self):
        """Test served orders cannot be cancelled"""
        order = self.place((self.fries, 1))
        services.set_order_status(order, 'ready')
        services.set_order_status(order, 'served')

        with self.assertRaisesMessage(StateConflict, 'Cannot cancel served order'):
            services.cancel_order(order)


class OrderAPITests(APITestCase):
    def setUp(self):
        self.staff = make_user('Staff')
        authenticate(self.client, self.staff)
        self.table = make_table()
        self.fries = make_menu_item(name='Fries', price=Decimal('100.00'))

    def create_payload(self, **overrides):
        data = {
            'table_id': self.table.pk,
            'customer_name': 'Ravi',
            'customer_phone': '9800000001',
            'order_type': 'food',
            'items': [{'menu_item_id': self.fries.pk, 'quantity': 2}],
        }
        data.update(overrides)
        return data

    def test_create_order(self):
        """Test creating an order through the API"""
        response = self.client.post(reverse('order_list'), self.create_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = response.data['data']['order']
        self.assertEqual(order['status'], 'pending')
        self.assertEqual(order['creator']['id'], self.staff.pk)
        self.assertEqual(order['items'][0]['printer'], 'Kitchen Printer')

    def test_create_order_needs_items(self):
        """Test an order needs at least one item"""
        response = self.client.post(reverse('order_list'), self.create_payload(items=[]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'items')

    def test_create_order_unknown_table(self):
        """Test ordering for a missing table gives 404"""
        response = self.client.post(reverse('order_list'), self.create_payload(table_id=999), format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_order_on_deactivated_table(self):
        """Test ordering for a deactivated table gives 404"""
        self.table.is_active = False
        self.table.save()

        response = self.client.post(reverse('order_list'), self.create_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Order.objects.count(), 0)

    def test_illegal_status_change_rejected(self):
        """Test status changes follow the order lifecycle"""
        order = services.create_order(table_id=self.table.pk, items=[{'menu_item_id': self.fries.pk, 'quantity': 1}],
                                      created_by=self.staff, customer_name='Ravi', customer_phone='1',
                                      order_type='food')
        services.cancel_order(order)

        response = self.client.patch(reverse('order_status', kwargs={'pk': order.pk}),
                                     {'status': 'preparing'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("from 'cancelled' to 'preparing'", response.data['message'])

    def test_list_filters_by_status(self):
        """Test order list filters"""
        self.client.post(reverse('order_list'), self.create_payload(), format='json')
        response = self.client.get(reverse('order_list'), {'status': 'served'})
        self.assertEqual(response.data['data']['orders'], [])

        response = self.client.get(reverse('order_list'), {'date': timezone.localdate().isoformat()})
        self.assertEqual(len(response.data['data']['orders']), 1)

        response = self.client.get(reverse('order_list'), {'table_id': self.table.pk})
        self.assertEqual(len(response.data['data']['orders']), 1)

    def test_list_rejects_malformed_filters(self):
        """Test malformed order filters give 400"""
        response = self.client.get(reverse('order_list'), {'table_id': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'table_id')

        response = self.client.get(reverse('order_list'), {'date': 'tomorrow'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['message'], 'Date must be YYYY-MM-DD')


class KOTAPITests(APITestCase):
    def setUp(self):
        self.staff = make_user('Staff')
        authenticate(self.client, self.staff)
        table = make_table()
        fries = make_menu_item(name='Fries', printer='Kitchen Printer')
        soda = make_menu_item(name='Soda', printer='Bar Printer')
        self.order = services.create_order(
            table_id=table.pk,
            items=[{'menu_item_id': fries.pk, 'quantity': 1}, {'menu_item_id': soda.pk, 'quantity': 2}],
            created_by=self.staff, customer_name='Ravi', customer_phone='1', order_type='mixed',
        )

    def test_unprinted_orders_stay_out_of_queue(self):
        """Test orders without a printed KOT stay off the queue"""
        response = self.client.get(reverse('kot_queue'))
        self.assertEqual(response.data['data']['orders'], [])

    def test_queue_groups_by_printer(self):
        """Test the KOT queue is split by printer"""
        self.client.post(reverse('order_kot', kwargs={'pk': self.order.pk}))

        response = self.client.get(reverse('kot_queue'))

        grouped = response.data['data']['grouped_by_printer']
        self.assertEqual(set(grouped), {'Kitchen Printer', 'Bar Printer'})
        self.assertEqual([i['name'] for i in grouped['Bar Printer'][0]['items']], ['Soda'])

        response = self.client.get(reverse('kot_queue'), {'printer': 'Bar Printer'})
        orders = response.data['data']['orders']
        self.assertEqual(len(orders), 1)
        self.assertEqual(len(orders[0]['items']), 1)

    def test_complete_whole_kot(self):
        """Test completing a whole KOT readies every item"""
        services.mark_kot_printed(self.order)

        response = self.client.patch(reverse('kot_order_complete', kwargs={'pk': self.order.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(set(self.order.items.values_list('status', flat=True)), {'ready'})
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'ready')

    def test_stats(self):
        services.mark_kot_printed(self.order)
        item = self.order.items.first()
        self.client.patch(reverse('kot_item_complete', kwargs={'pk': item.pk}))

        response = self.client.get(reverse('kot_stats'))

        stats = response.data['data']['stats']
        self.assertEqual(stats['total_kots'], 1)
        self.assertEqual(stats['pending_kots'], 1)
        self.assertEqual(stats['printer_stats']['Bar Printer']['total'], 1)
        self.assertEqual(stats['printer_stats']['Game Zone Printer']['total'], 0)

    def test_completing_item_twice_succeeds(self):
        """Test completing the same KOT item twice"""
        services.mark_kot_printed(self.order)
        item = self.order.items.first()
        url = reverse('kot_item_complete', kwargs={'pk': item.pk})

        self.assertEqual(self.client.patch(url).status_code, status.HTTP_200_OK)
        response = self.client.patch(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item.refresh_from_db()
        self.assertEqual(item.status, 'ready')
