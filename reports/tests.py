import csv
import io
from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from lounge.testing import authenticate, make_menu_item, make_table, make_user
from orders import services as order_services
from table_sessions import services as session_services
from . import aggregates


class ReportAPITests(APITestCase):
    def setUp(self):
        self.admin = make_user('Admin')
        authenticate(self.client, self.admin)
        self.table = make_table(name='Snooker 1', hourly_rate=Decimal('300.00'))
        self.fries = make_menu_item(name='Fries', category='Food', price=Decimal('100.00'))
        self.soda = make_menu_item(name='Soda', category='Drinks', price=Decimal('50.00'), printer='Bar Printer')

        session = session_services.start_session(table_id=self.table.pk, customer_name='Ravi',
                                                 customer_phone='9800000001', created_by=self.admin)
        self.order = order_services.create_order(
            table_id=self.table.pk,
            items=[{'menu_item_id': self.fries.pk, 'quantity': 2}, {'menu_item_id': self.soda.pk, 'quantity': 1}],
            created_by=self.admin, customer_name='Ravi', customer_phone='9800000001', order_type='mixed',
        )
        self.session = session_services.end_session(session, now=session.start_time + timedelta(minutes=60))

    def test_reports_are_for_managers(self):
        """Test reports are limited to managers and admins"""
        authenticate(self.client, make_user('Staff'))
        self.assertEqual(self.client.get(reverse('report_dashboard')).status_code, status.HTTP_403_FORBIDDEN)

        authenticate(self.client, make_user('Manager'))
        self.assertEqual(self.client.get(reverse('report_dashboard')).status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(reverse('report_staff_performance')).status_code,
                         status.HTTP_403_FORBIDDEN)

    def test_dashboard(self):
        analytics = self.client.get(reverse('report_dashboard')).data['data']['analytics']

        self.assertEqual(analytics['revenue']['total'], self.session.total)
        self.assertEqual(analytics['revenue']['orders'], self.order.total)
        self.assertEqual(analytics['sessions']['completed'], 1)
        self.assertEqual(analytics['sessions']['avg_duration'], 60)
        self.assertEqual(analytics['orders']['pending'], 1)

    def test_revenue_by_category_skips_cancelled_orders(self):
        """Test cancelled orders are left out of category revenue"""
        cancelled = order_services.create_order(
            table_id=self.table.pk, items=[{'menu_item_id': self.soda.pk, 'quantity': 10}],
            created_by=self.admin, customer_name='Ravi', customer_phone='1', order_type='drinks',
        )
        order_services.cancel_order(cancelled)

        revenue = self.client.get(reverse('report_category_revenue')).data['data']['category_revenue']

        self.assertEqual(revenue, {'Food': Decimal('200.00'), 'Drinks': Decimal('50.00')})

    def test_item_sales_sorted_by_quantity(self):
        """Test item sales come back best sellers first"""
        sales = self.client.get(reverse('report_item_sales')).data['data']['item_sales']

        self.assertEqual([row['name'] for row in sales], ['Fries', 'Soda'])
        self.assertEqual(sales[0]['quantity_sold'], 2)
        self.assertEqual(sales[0]['total_revenue'], Decimal('200.00'))

    def test_table_and_staff_performance(self):
        """Test table and staff performance totals"""
        tables = self.client.get(reverse('report_table_performance')).data['data']['table_performance']
        self.assertEqual(tables[0]['name'], 'Snooker 1')
        self.assertEqual(tables[0]['total_sessions'], 1)

        staff = self.client.get(reverse('report_staff_performance')).data['data']['staff_performance']
        self.assertEqual(staff[0]['orders_handled'], 1)
        self.assertEqual(staff[0]['sessions_handled'], 1)
        self.assertEqual(staff[0]['total_sales'], self.order.total + self.session.total)

    def test_financial_summary(self):
        """Test net amount is revenue minus tax"""
        summary = self.client.get(reverse('report_financial_summary')).data['data']['summary']

        self.assertEqual(summary['session_revenue'], Decimal('300.00'))
        self.assertEqual(summary['total_tax'], self.session.tax)
        self.assertEqual(summary['net_amount'], self.session.total - self.session.tax)

    def test_date_range_excludes_other_days(self):
        """Test the date range excludes other days"""
        tomorrow = (timezone.localdate() + timedelta(days=1)).isoformat()
        summary = self.client.get(reverse('report_financial_summary'),
                                  {'start_date': tomorrow}).data['data']['summary']
        self.assertEqual(summary['total_revenue'], Decimal('0'))

    def test_bad_date_rejected(self):
        """Test malformed report dates give 400"""
        response = self.client.get(reverse('report_item_sales'), {'start_date': '24/12/2026'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export_json_and_csv(self):
        """Test session export as JSON and CSV"""
        url = reverse('report_export', kwargs={'kind': 'sessions'})
        response = self.client.get(url)
        self.assertEqual(len(response.data['data']['sessions']), 1)

        response = self.client.get(url, {'format': 'csv'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'text/csv')
        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(rows[0][0], 'session_id')
        self.assertEqual(rows[1][0], self.session.session_id)

    def test_export_unknown_kind(self):
        """Test unknown export types give 400"""
        response = self.client.get(reverse('report_export', kwargs={'kind': 'payments'}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_table_occupancy_over_window(self):
        """Test occupancy is session time over the report window"""
        today = timezone.localdate().isoformat()
        tables = self.client.get(reverse('report_table_performance'),
                                 {'start_date': today, 'end_date': today}).data['data']['table_performance']

        # 60 session minutes out of a 1440 minute day
        self.assertEqual(tables[0]['occupancy_rate'], 4.17)

    def test_occupancy_capped_at_full_window(self):
        """Test occupancy caps at 100 and is 0 without a window"""
        rows = aggregates.table_performance([self.session], window_minutes=30)
        self.assertEqual(rows[0]['occupancy_rate'], 100.0)

        rows = aggregates.table_performance([self.session])
        self.assertEqual(rows[0]['occupancy_rate'], 0.0)
