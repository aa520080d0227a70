from datetime import date, time, timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from lounge.exceptions import StateConflict
from lounge.testing import authenticate, make_table, make_user
from .models import Reservation
from . import services

SLOT = {'reservation_date': date(2026, 12, 24), 'reservation_time': time(18, 30)}


def book(table_type='Snooker Table', **fields):
    data = {'customer_name': 'Asha', 'customer_phone': '9800000002', 'party_size': 2}
    data.update(SLOT)
    data.update(fields)
    return services.create_reservation(table_type=table_type, **data)


class ReservationAssignmentTests(TestCase):
    def setUp(self):
        self.first = make_table(table_number='S1', type='Snooker')
        self.second = make_table(table_number='S2', type='Snooker')

    def test_each_booking_in_a_slot_gets_its_own_table(self):
        """Test bookings in one slot get different tables"""
        one = book()
        two = book(customer_phone='9800000003')

        self.assertEqual(one.table, self.first)
        self.assertEqual(two.table, self.second)
        self.assertTrue(one.reservation_id.startswith('RES-'))

    def test_full_slot_is_rejected(self):
        """Test booking a full slot is refused"""
        book()
        book()
        with self.assertRaisesMessage(StateConflict, 'No tables available at the requested time'):
            book()

    def test_other_slot_is_independent(self):
        """Test a different slot can reuse the table"""
        book()
        book()
        later = book(reservation_time=time(21, 0))
        self.assertEqual(later.table, self.first)

    def test_cancelled_booking_frees_its_slot(self):
        """Test cancelling frees the slot for a new booking"""
        one = book()
        book()
        services.cancel_reservation(one)

        again = book()
        self.assertEqual(again.table, self.first)

    def test_type_without_tables_rejected(self):
        """Test booking a type with no tables"""
        with self.assertRaisesMessage(StateConflict, 'No tables available for the selected type'):
            book('Pool Table')


class ReservationStatusTests(TestCase):
    def setUp(self):
        self.table = make_table(type='Dining')
        self.reservation = book('Dining Table')

    def test_arrival_reserves_and_completion_frees_table(self):
        """Test arrival reserves the table and completion frees it"""
        services.set_reservation_status(self.reservation, 'arrived')
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, 'reserved')

        services.set_reservation_status(self.reservation, 'completed')
        self.table.refresh_from_db()
        self.assertEqual(self.table.status, 'available')

    def test_freeing_leaves_an_occupied_table_alone(self):
        """Test finishing a booking leaves an occupied table alone"""
        self.table.status = 'occupied'
        self.table.save()

        services.set_reservation_status(self.reservation, 'no-show')

        self.table.refresh_from_db()
        self.assertEqual(self.table.status, 'occupied')

    def test_completed_cannot_be_cancelled(self):
        """Test completed reservations cannot be cancelled"""
        services.set_reservation_status(self.reservation, 'arrived')
        services.set_reservation_status(self.reservation, 'completed')
        with self.assertRaisesMessage(StateConflict, 'Cannot cancel completed reservation'):
            services.cancel_reservation(self.reservation)

    def test_no_show_is_terminal(self):
        """Test no-show reservations cannot move"""
        services.set_reservation_status(self.reservation, 'no-show')
        with self.assertRaises(StateConflict):
            services.set_reservation_status(self.reservation, 'arrived')


class ReservationAPITests(APITestCase):
    def setUp(self):
        self.table = make_table(type='PlayStation')

    def payload(self, **overrides):
        data = {'customer_name': 'Asha', 'customer_phone': '9800000002', 'table_type': 'PlayStation Station',
                'reservation_date': '2026-12-24', 'reservation_time': '18:30', 'party_size': 3}
        data.update(overrides)
        return data

    def test_anonymous_booking(self):
        """Test customers can book without an account"""
        response = self.client.post(reverse('reservation_list'), self.payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        reservation = response.data['data']['reservation']
        self.assertEqual(reservation['table']['id'], self.table.pk)
        self.assertIsNone(reservation['creator'])

    def test_staff_booking_records_creator(self):
        """Test staff bookings record who made them"""
        staff = make_user('Staff')
        authenticate(self.client, staff)
        response = self.client.post(reverse('reservation_list'), self.payload(), format='json')
        self.assertEqual(response.data['data']['reservation']['creator']['id'], staff.pk)

    def test_bad_time_format(self):
        """Test reservation time must be HH:MM"""
        response = self.client.post(reverse('reservation_list'), self.payload(reservation_time='6pm'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'reservation_time')

    def test_listing_requires_login(self):
        """Test the reservation list needs a login"""
        response = self.client.get(reverse('reservation_list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_my_reservations_by_phone(self):
        """Test customers find their bookings by phone"""
        self.client.post(reverse('reservation_list'), self.payload(), format='json')

        response = self.client.get(reverse('my_reservations'), {'customer_phone': '9800000002'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['reservations']), 1)

    def test_today_groups_by_status(self):
        """Test today's reservations grouped by status"""
        authenticate(self.client, make_user('Staff'))
        today = timezone.localdate()
        Reservation.objects.create(customer_name='A', customer_phone='1', table_type='Pool Table',
                                   reservation_date=today, reservation_time=time(12, 0), party_size=2)
        Reservation.objects.create(customer_name='B', customer_phone='2', table_type='Pool Table',
                                   reservation_date=today + timedelta(days=1), reservation_time=time(12, 0),
                                   party_size=2)

        response = self.client.get(reverse('reservation_today'))

        data = response.data['data']
        self.assertEqual(data['stats']['total'], 1)
        self.assertEqual(len(data['grouped']['confirmed']), 1)
        self.assertEqual(data['grouped']['no-show'], [])

    def test_status_endpoint_rejects_illegal_move(self):
        """Test status changes follow the reservation lifecycle"""
        authenticate(self.client, make_user('Staff'))
        reservation_id = self.client.post(reverse('reservation_list'), self.payload(),
                                          format='json').data['data']['reservation']['id']

        response = self.client.patch(reverse('reservation_status', kwargs={'pk': reservation_id}),
                                     {'status': 'completed'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters_by_date(self):
        """Test reservation list filtered by date"""
        authenticate(self.client, make_user('Staff'))
        self.client.post(reverse('reservation_list'), self.payload(), format='json')

        response = self.client.get(reverse('reservation_list'), {'date': '2026-12-24'})
        self.assertEqual(len(response.data['data']['reservations']), 1)

        response = self.client.get(reverse('reservation_list'), {'date': '2026-12-25'})
        self.assertEqual(response.data['data']['reservations'], [])

    def test_list_rejects_malformed_date(self):
        """Test a malformed date filter gives 400"""
        authenticate(self.client, make_user('Staff'))

        response = self.client.get(reverse('reservation_list'), {'date': 'tomorrow'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'], [{'field': 'date', 'message': 'Date must be YYYY-MM-DD'}])
