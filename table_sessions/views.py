from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from orders.serializers import OrderSerializer
from .models import Session
from .serializers import (
    ExtendSessionSerializer, SessionFilterSerializer, SessionSerializer, SessionWithTableSerializer,
    StartSessionSerializer,
)
from . import services


def session_queryset():
    return Session.objects.select_related('table', 'created_by')


class SessionListView(APIView):
    @extend_schema(
        summary="List sessions",
        parameters=[
            OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='table_id', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='customer_phone', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
        ],
        responses={200: SessionWithTableSerializer(many=True)},
    )
    def get(self, request):
        filters = SessionFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        sessions = session_queryset().filter(**filters.validated_data)
        sessions = sessions.order_by('-created_at')
        return success_response({'sessions': SessionWithTableSerializer(sessions, many=True).data})


class SessionDetailView(APIView):
    @extend_schema(summary="Get a session with the orders placed during it")
    def get(self, request, pk):
        session = get_or_404(session_queryset(), pk=pk)
        orders = services.orders_in_window(session).prefetch_related('items__menu_item')
        return success_response({
            'session': SessionWithTableSerializer(session).data,
            'orders': OrderSerializer(orders, many=True).data,
        })


class SessionStartView(APIView):
    @extend_schema(
        summary="Start a session on an available table",
        request=StartSessionSerializer,
        responses={201: SessionWithTableSerializer},
        examples=[
            OpenApiExample(
                'Start Session Example',
                value={'table_id': 1, 'customer_name': 'Ravi', 'customer_phone': '9800000001'}
            )
        ]
    )
    def post(self, request):
        serializer = StartSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = services.start_session(created_by=request.user, **serializer.validated_data)
        session = session_queryset().get(pk=session.pk)
        return success_response({'session': SessionWithTableSerializer(session).data},
                                message='Session started successfully',
                                status=status.HTTP_201_CREATED)


class SessionEndView(APIView):
    @extend_schema(summary="End a session and compute its bill", request=None, responses={200: SessionSerializer})
    def post(self, request, pk):
        session = get_or_404(Session, pk=pk)
        session = services.end_session(session)
        return success_response({'session': SessionSerializer(session).data},
                                message='Session ended successfully')


class SessionExtendView(APIView):
    @extend_schema(summary="Log a session extension", request=ExtendSessionSerializer,
                   responses={200: SessionSerializer})
    def post(self, request, pk):
        serializer = ExtendSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = get_or_404(Session, pk=pk)
        minutes = serializer.validated_data['minutes']
        services.extend_session(session, minutes, serializer.validated_data.get('reason'))
        return success_response({'session': SessionSerializer(session).data},
                                message=f'Session extended by {minutes} minutes')


class SessionPauseView(APIView):
    @extend_schema(summary="Pause a session", request=None, responses={200: SessionSerializer})
    def post(self, request, pk):
        session = get_or_404(Session, pk=pk)
        services.pause_session(session)
        return success_response({'session': SessionSerializer(session).data},
                                message='Session paused successfully')


class SessionResumeView(APIView):
    @extend_schema(summary="Resume a paused session", request=None, responses={200: SessionSerializer})
    def post(self, request, pk):
        session = get_or_404(Session, pk=pk)
        services.resume_session(session)
        return success_response({'session': SessionSerializer(session).data},
                                message='Session resumed successfully')


class SessionHistoryView(APIView):
    @extend_schema(
        summary="Completed sessions, newest first",
        parameters=[OpenApiParameter(name='customer_phone', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY)],
    )
    def get(self, request):
        phone = request.query_params.get('customer_phone')
        if not phone and request.user.role == 'User':
            raise ValidationError({'customer_phone': ['Customer phone is required']})
        sessions = session_queryset().filter(status='completed')
        if phone:
            sessions = sessions.filter(customer_phone=phone)
        sessions = sessions.order_by('-created_at')[:50]
        return success_response({'sessions': SessionWithTableSerializer(sessions, many=True).data})
