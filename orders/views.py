from datetime import datetime, time, timedelta

from django.utils import timezone
from rest_framework import status
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from .models import Order, OrderItem
from .serializers import (
    CreateOrderSerializer, OrderFilterSerializer, OrderItemSerializer, OrderItemStatusSerializer,
    OrderSerializer, OrderStatusSerializer,
)
from . import services


def order_queryset():
    return Order.objects.select_related('created_by', 'table').prefetch_related('items__menu_item')


def day_bounds(day):
    """Aware [start, end) datetimes covering ``day`` in the current timezone."""
    start = timezone.make_aware(datetime.combine(day, time.min))
    return start, start + timedelta(days=1)


class OrderListView(APIView):
    @extend_schema(
        summary="List orders",
        parameters=[
            OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='table_id', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='date', type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY),
        ],
        responses={200: OrderSerializer(many=True)},
    )
    def get(self, request):
        filters = OrderFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = filters.validated_data

        orders = order_queryset()
        if params.get('status'):
            orders = orders.filter(status=params['status'])
        if 'table_id' in params:
            orders = orders.filter(table_id=params['table_id'])
        if 'date' in params:
            start, end = day_bounds(params['date'])
            orders = orders.filter(created_at__gte=start, created_at__lt=end)
        orders = orders.order_by('-created_at')
        return success_response({'orders': OrderSerializer(orders, many=True).data})

    @extend_schema(
        summary="Create an order",
        description="Prices each line from the menu, adds tax, and stores the order with its items atomically",
        request=CreateOrderSerializer,
        responses={201: OrderSerializer},
        examples=[
            OpenApiExample(
                'Create Order Example',
                value={'table_id': 1, 'customer_name': 'Ravi', 'customer_phone': '9800000001',
                       'order_type': 'food', 'items': [{'menu_item_id': 1, 'quantity': 2}]}
            )
        ]
    )
    def post(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.create_order(created_by=request.user, **serializer.validated_data)
        order = order_queryset().get(pk=order.pk)
        return success_response({'order': OrderSerializer(order).data},
                                message='Order created successfully',
                                status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    @extend_schema(summary="Get an order", responses={200: OrderSerializer})
    def get(self, request, pk):
        order = get_or_404(order_queryset(), pk=pk)
        return success_response({'order': OrderSerializer(order).data})

    @extend_schema(summary="Cancel an order", description="Soft cancel; served orders cannot be cancelled")
    def delete(self, request, pk):
        order = get_or_404(Order, pk=pk)
        services.cancel_order(order)
        return success_response(message='Order cancelled successfully')


class OrderStatusView(APIView):
    @extend_schema(summary="Change order status", request=OrderStatusSerializer, responses={200: OrderSerializer})
    def patch(self, request, pk):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = get_or_404(Order, pk=pk)
        services.set_order_status(order, serializer.validated_data['status'])
        order = order_queryset().get(pk=order.pk)
        return success_response({'order': OrderSerializer(order).data},
                                message='Order status updated successfully')


class OrderItemStatusView(APIView):
    @extend_schema(summary="Change one order item's status", request=OrderItemStatusSerializer,
                   responses={200: OrderItemSerializer})
    def patch(self, request, order_pk, item_pk):
        serializer = OrderItemStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = get_or_404(OrderItem, pk=item_pk, order_id=order_pk)
        services.set_item_status(item, serializer.validated_data['status'])
        return success_response({'order_item': OrderItemSerializer(item).data},
                                message='Order item status updated successfully')


class OrderKOTView(APIView):
    @extend_schema(summary="Print the KOT for an order", request=None, responses={200: OrderSerializer})
    def post(self, request, pk):
        order = get_or_404(Order, pk=pk)
        services.mark_kot_printed(order)
        order = order_queryset().get(pk=order.pk)
        return success_response({'order': OrderSerializer(order).data},
                                message='KOT printed successfully')
