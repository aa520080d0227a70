"""Kitchen order ticket queue: printed orders routed to their printers."""
from django.db.models import Prefetch
from django.utils import timezone
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from menu.models import MenuItem
from .models import Order, OrderItem
from .serializers import DEFAULT_PRINTER, OrderItemSerializer, OrderSerializer, printer_for
from .views import day_bounds
from . import services

IN_FLIGHT = ('confirmed', 'preparing')
DONE = ('ready', 'served')


def todays_kots():
    start, end = day_bounds(timezone.localdate())
    return Order.objects.filter(kot_printed=True, created_at__gte=start, created_at__lt=end)


class KOTQueueView(APIView):
    @extend_schema(
        summary="Today's KOT queue",
        description="Printed orders still in the kitchen, with their items grouped by target printer",
        parameters=[
            OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             description='Only items in this status'),
            OpenApiParameter(name='printer', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             description='Only items routed to this printer'),
        ],
    )
    def get(self, request):
        item_status = request.query_params.get('status')
        printer = request.query_params.get('printer')

        items = OrderItem.objects.select_related('menu_item').order_by('id')
        if item_status:
            items = items.filter(status=item_status)
        orders = (todays_kots()
                  .filter(status__in=IN_FLIGHT)
                  .select_related('created_by')
                  .prefetch_related(Prefetch('items', queryset=items))
                  .order_by('kot_printed_at'))

        queue = []
        grouped = {}
        for order in orders:
            lines = [item for item in order.items.all() if not printer or printer_for(item) == printer]
            if not lines:
                continue
            payload = OrderSerializer(order).data
            payload['items'] = OrderItemSerializer(lines, many=True).data
            queue.append(payload)
            for line in payload['items']:
                bucket = grouped.setdefault(line['printer'], {})
                entry = bucket.setdefault(order.pk, {**payload, 'items': []})
                entry['items'].append(line)

        grouped_by_printer = {name: list(bucket.values()) for name, bucket in grouped.items()}
        return success_response({'orders': queue, 'grouped_by_printer': grouped_by_printer})


class KOTItemCompleteView(APIView):
    @extend_schema(summary="Mark one KOT item ready", request=None, responses={200: OrderItemSerializer})
    def patch(self, request, pk):
        item = get_or_404(OrderItem.objects.select_related('menu_item'), pk=pk)
        services.complete_item(item)
        return success_response({'order_item': OrderItemSerializer(item).data},
                                message='Item marked as complete')


class KOTOrderCompleteView(APIView):
    @extend_schema(summary="Mark a whole KOT ready", request=None, responses={200: OrderSerializer})
    def patch(self, request, pk):
        order = get_or_404(Order, pk=pk)
        services.complete_order(order)
        order = Order.objects.prefetch_related('items__menu_item').select_related('created_by').get(pk=order.pk)
        return success_response({'order': OrderSerializer(order).data},
                                message='Order marked as complete')


class KOTStatsView(APIView):
    @extend_schema(summary="Today's KOT statistics")
    def get(self, request):
        orders = list(todays_kots().prefetch_related('items__menu_item'))

        def summarize(subset):
            return {
                'total': len(subset),
                'completed': sum(1 for o in subset if o.status in DONE),
                'pending': sum(1 for o in subset if o.status in IN_FLIGHT),
            }

        timed = [o.actual_time for o in orders if o.actual_time is not None]
        printers = [choice[0] for choice in MenuItem.PRINTER_CHOICES]
        if DEFAULT_PRINTER not in printers:
            printers.append(DEFAULT_PRINTER)

        printer_stats = {}
        for name in printers:
            routed = [o for o in orders if any(printer_for(i) == name for i in o.items.all())]
            printer_stats[name] = summarize(routed)

        overall = summarize(orders)
        stats = {
            'total_kots': overall['total'],
            'completed_kots': overall['completed'],
            'pending_kots': overall['pending'],
            'average_time': round(sum(timed) / len(timed), 1) if timed else 0,
            'printer_stats': printer_stats,
        }
        return success_response({'stats': stats})
