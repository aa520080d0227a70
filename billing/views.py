from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from lounge.money import money
from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from orders.serializers import OrderSerializer
from table_sessions.models import Session
from table_sessions.serializers import SessionSerializer, SessionWithTableSerializer
from .serializers import DiscountSerializer, PaymentSerializer
from . import services


def billed_session(pk):
    return get_or_404(Session.objects.select_related('table', 'created_by'), pk=pk)


class SessionBillView(APIView):
    @extend_schema(summary="Current bill for a session",
                   description="Running sessions report the time charge so far without saving it")
    def get(self, request, pk):
        session = billed_session(pk)
        orders, live_cost, summary = services.build_bill(session)
        session_data = SessionWithTableSerializer(session).data
        session_data['current_session_cost'] = live_cost
        bill = {
            'session': session_data,
            'orders': OrderSerializer(orders, many=True).data,
            'summary': summary,
        }
        return success_response({'bill': bill})


class SessionDiscountView(APIView):
    @extend_schema(
        summary="Apply a discount to a session",
        request=DiscountSerializer,
        examples=[
            OpenApiExample('Percentage Discount', value={'discount_type': 'percentage', 'discount_value': 10,
                                                         'reason': 'Regular customer'})
        ]
    )
    def post(self, request, pk):
        serializer = DiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = billed_session(pk)
        amount = services.apply_discount(
            session, request.user,
            serializer.validated_data['discount_type'],
            serializer.validated_data['discount_value'],
        )
        return success_response({
            'session': SessionSerializer(session).data,
            'discount_applied': amount,
            'new_total': session.total,
        }, message='Discount applied successfully')


class SessionPaymentView(APIView):
    @extend_schema(
        summary="Take payment for a session",
        request=PaymentSerializer,
        examples=[OpenApiExample('Cash Payment', value={'payment_method': 'cash', 'amount_paid': '1200.00'})]
    )
    def post(self, request, pk):
        serializer = PaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = billed_session(pk)
        session = services.process_payment(session, serializer.validated_data['payment_method'])
        amount_paid = serializer.validated_data['amount_paid']
        return success_response({
            'session': SessionSerializer(session).data,
            'amount_paid': amount_paid,
            'change_due': money(max(amount_paid - session.total, 0)),
        }, message='Payment processed successfully')


class SessionReceiptView(APIView):
    @extend_schema(summary="Printable receipt for a session")
    def get(self, request, pk):
        session = billed_session(pk)
        orders = services.orders_in_window(session).prefetch_related('items')
        receipt = {
            'session_id': session.session_id,
            'table': session.table.name,
            'customer': {'name': session.customer_name, 'phone': session.customer_phone},
            'timing': {
                'start_time': session.start_time,
                'end_time': session.end_time,
                'duration': session.duration,
            },
            'session_charges': {
                'hourly_rate': session.hourly_rate,
                'duration_hours': f"{session.duration / 60:.2f}",
                'session_cost': session.session_cost,
            },
            'orders': [
                {
                    'order_id': order.order_id,
                    'items': [
                        {'name': item.name, 'quantity': item.quantity, 'price': item.price,
                         'total': item.line_total}
                        for item in order.items.all()
                    ],
                    'total': order.total,
                }
                for order in orders
            ],
            'billing': {
                'subtotal': session.subtotal,
                'tax': session.tax,
                'service_fee': session.service_fee,
                'discount': session.discount,
                'total': session.total,
            },
            'payment': {
                'method': session.payment_method,
                'status': session.payment_status,
                'paid_at': session.updated_at if session.payment_status == 'paid' else None,
            },
        }
        return success_response({'receipt': receipt})


class BillingHistoryView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Paid sessions for a customer",
        parameters=[OpenApiParameter(name='customer_phone', type=OpenApiTypes.STR,
                                     location=OpenApiParameter.QUERY, required=True)],
    )
    def get(self, request):
        phone = request.query_params.get('customer_phone')
        if not phone:
            raise ValidationError({'customer_phone': ['Customer phone is required']})
        sessions = (Session.objects.select_related('table', 'created_by')
                    .filter(customer_phone=phone, payment_status='paid')
                    .order_by('-created_at')[:20])
        return success_response({'sessions': SessionWithTableSerializer(sessions, many=True).data})
