import csv
import io
import logging
from datetime import datetime

from django.http import HttpResponse
from django.utils import timezone
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from lounge.responses import success_response
from orders.models import Order, OrderItem
from orders.serializers import OrderSerializer
from orders.views import day_bounds
from table_sessions.models import Session
from table_sessions.serializers import SessionSerializer
from . import aggregates

logger = logging.getLogger(__name__)

RANGE_PARAMETERS = [
    OpenApiParameter(name='start_date', type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY,
                     description='First day included (YYYY-MM-DD)'),
    OpenApiParameter(name='end_date', type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY,
                     description='Last day included (YYYY-MM-DD)'),
]

SESSION_COLUMNS = ['session_id', 'table_number', 'customer_name', 'customer_phone', 'start_time',
                   'end_time', 'duration', 'hourly_rate', 'session_cost', 'total_order_cost',
                   'subtotal', 'tax', 'service_fee', 'discount', 'total', 'payment_status',
                   'payment_method', 'status']
ORDER_COLUMNS = ['order_id', 'table_number', 'customer_name', 'customer_phone', 'service_type',
                 'order_type', 'status', 'subtotal', 'tax', 'discount', 'total', 'payment_status',
                 'payment_method', 'created_at']


def parse_day(value, field):
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError({field: ['Date must be YYYY-MM-DD']})


def date_filter(request, field='created_at'):
    """Lookup kwargs for the inclusive ``start_date``/``end_date`` query range."""
    lookups = {}
    start = request.query_params.get('start_date')
    end = request.query_params.get('end_date')
    if start:
        lookups[f'{field}__gte'] = day_bounds(parse_day(start, 'start_date'))[0]
    if end:
        lookups[f'{field}__lt'] = day_bounds(parse_day(end, 'end_date'))[1]
    return lookups


def window_minutes(request, sessions):
    """Length of the report window; open ends fall back to the first session and now."""
    start = request.query_params.get('start_date')
    end = request.query_params.get('end_date')
    if start:
        opened = day_bounds(parse_day(start, 'start_date'))[0]
    else:
        opened = min((s.start_time for s in sessions), default=None)
    closed = day_bounds(parse_day(end, 'end_date'))[1] if end else timezone.now()
    if opened is None or closed <= opened:
        return 0
    return (closed - opened).total_seconds() / 60


class ReportView(APIView):
    required_roles = {'GET': ('Admin', 'Manager')}


class DashboardView(ReportView):
    @extend_schema(summary="Today's revenue, sessions and orders")
    def get(self, request):
        start, end = day_bounds(timezone.localdate())
        today = {'created_at__gte': start, 'created_at__lt': end}
        analytics = aggregates.dashboard(
            Session.objects.filter(**today),
            Order.objects.filter(**today),
        )
        return success_response({'analytics': analytics})


class CategoryRevenueView(ReportView):
    @extend_schema(summary="Order revenue per menu category", parameters=RANGE_PARAMETERS)
    def get(self, request):
        items = (OrderItem.objects.select_related('menu_item')
                 .filter(**date_filter(request, 'order__created_at'))
                 .exclude(order__status='cancelled'))
        return success_response({'category_revenue': aggregates.revenue_by_category(items)})


class TablePerformanceView(ReportView):
    @extend_schema(summary="Revenue and usage per table", parameters=RANGE_PARAMETERS)
    def get(self, request):
        sessions = list(Session.objects.select_related('table').filter(**date_filter(request)))
        performance = aggregates.table_performance(sessions, window_minutes(request, sessions))
        return success_response({'table_performance': performance})


class ItemSalesView(ReportView):
    @extend_schema(summary="Quantity and revenue per menu item", parameters=RANGE_PARAMETERS)
    def get(self, request):
        items = (OrderItem.objects.select_related('menu_item')
                 .filter(**date_filter(request, 'order__created_at'))
                 .exclude(order__status='cancelled'))
        return success_response({'item_sales': aggregates.item_sales(items)})


class StaffPerformanceView(ReportView):
    required_roles = {'GET': ('Admin',)}

    @extend_schema(summary="Orders, sessions and sales per staff member", parameters=RANGE_PARAMETERS)
    def get(self, request):
        lookups = date_filter(request)
        performance = aggregates.staff_performance(
            Session.objects.select_related('created_by').filter(**lookups),
            Order.objects.select_related('created_by').filter(**lookups),
        )
        return success_response({'staff_performance': performance})


class FinancialSummaryView(ReportView):
    @extend_schema(summary="Revenue, tax, fees and discounts", parameters=RANGE_PARAMETERS)
    def get(self, request):
        lookups = date_filter(request)
        summary = aggregates.financial_summary(
            Session.objects.filter(**lookups),
            Order.objects.filter(**lookups),
        )
        return success_response({'summary': summary})


class ExportView(ReportView):
    EXPORTS = {
        'sessions': (Session, SessionSerializer, SESSION_COLUMNS),
        'orders': (Order, OrderSerializer, ORDER_COLUMNS),
    }

    @extend_schema(
        summary="Export sessions or orders",
        parameters=RANGE_PARAMETERS + [
            OpenApiParameter(name='format', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             enum=['json', 'csv'], description='Defaults to json'),
        ],
    )
    def get(self, request, kind):
        if kind not in self.EXPORTS:
            raise ValidationError({'type': ['Invalid report type']})
        export_format = request.query_params.get('format', 'json')
        if export_format not in ('json', 'csv'):
            raise ValidationError({'format': ['Format must be json or csv']})

        model, serializer_class, columns = self.EXPORTS[kind]
        rows = model.objects.filter(**date_filter(request)).order_by('created_at')
        if kind == 'orders':
            rows = rows.select_related('created_by').prefetch_related('items__menu_item')
        else:
            rows = rows.select_related('created_by')
        logger.info("Exporting %s as %s for %s", kind, export_format, request.user.username)

        if export_format == 'json':
            return success_response({kind: serializer_class(rows, many=True).data})

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(columns)
        for row in rows:
            writer.writerow([getattr(row, column) if getattr(row, column) is not None else '' for column in columns])
        response = HttpResponse(buffer.getvalue(), content_type='text/csv')
        stamp = timezone.localdate().strftime('%Y%m%d')
        response['Content-Disposition'] = f'attachment; filename="{kind}-{stamp}.csv"'
        return response
