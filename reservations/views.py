from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from .models import Reservation
from .serializers import (
    CreateReservationSerializer, ReservationFilterSerializer, ReservationSerializer,
    ReservationStatusSerializer, UpdateReservationSerializer,
)
from . import services


def reservation_queryset():
    return Reservation.objects.select_related('table', 'created_by')


class ReservationListView(APIView):
    def get_permissions(self):
        # Walk-in customers may book without an account
        if self.request.method == 'POST':
            return [AllowAny()]
        return super().get_permissions()

    @extend_schema(
        summary="List reservations",
        parameters=[
            OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='date', type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='table_type', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
        ],
        responses={200: ReservationSerializer(many=True)},
    )
    def get(self, request):
        filters = ReservationFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = filters.validated_data

        reservations = reservation_queryset()
        if 'status' in params:
            reservations = reservations.filter(status=params['status'])
        if 'table_type' in params:
            reservations = reservations.filter(table_type=params['table_type'])
        if 'date' in params:
            reservations = reservations.filter(reservation_date=params['date'])
        reservations = reservations.order_by('reservation_date', 'reservation_time')
        return success_response({'reservations': ReservationSerializer(reservations, many=True).data})

    @extend_schema(
        summary="Book a table",
        description="Assigns the first free table of the requested type for the slot",
        request=CreateReservationSerializer,
        responses={201: ReservationSerializer},
        examples=[
            OpenApiExample(
                'Create Reservation Example',
                value={'customer_name': 'Asha', 'customer_phone': '9800000002',
                       'table_type': 'Snooker Table', 'reservation_date': '2026-10-20',
                       'reservation_time': '18:30', 'party_size': 2}
            )
        ]
    )
    def post(self, request):
        serializer = CreateReservationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        creator = request.user if getattr(request.user, 'is_authenticated', False) else None
        reservation = services.create_reservation(created_by=creator, **serializer.validated_data)
        reservation = reservation_queryset().get(pk=reservation.pk)
        return success_response({'reservation': ReservationSerializer(reservation).data},
                                message='Reservation created successfully',
                                status=status.HTTP_201_CREATED)


class ReservationDetailView(APIView):
    def get_permissions(self):
        if self.request.method == 'DELETE':
            return [AllowAny()]
        return super().get_permissions()

    @extend_schema(summary="Get a reservation", responses={200: ReservationSerializer})
    def get(self, request, pk):
        reservation = get_or_404(reservation_queryset(), pk=pk)
        return success_response({'reservation': ReservationSerializer(reservation).data})

    @extend_schema(summary="Update reservation details", request=UpdateReservationSerializer,
                   responses={200: ReservationSerializer})
    def put(self, request, pk):
        reservation = get_or_404(reservation_queryset(), pk=pk)
        serializer = UpdateReservationSerializer(reservation, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        reservation = serializer.save()
        return success_response({'reservation': ReservationSerializer(reservation).data},
                                message='Reservation updated successfully')

    @extend_schema(summary="Cancel a reservation")
    def delete(self, request, pk):
        reservation = get_or_404(Reservation, pk=pk)
        services.cancel_reservation(reservation)
        return success_response(message='Reservation cancelled successfully')


class ReservationStatusView(APIView):
    @extend_schema(summary="Change reservation status", request=ReservationStatusSerializer,
                   responses={200: ReservationSerializer})
    def patch(self, request, pk):
        serializer = ReservationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = get_or_404(reservation_queryset(), pk=pk)
        services.set_reservation_status(reservation, serializer.validated_data['status'])
        reservation = reservation_queryset().get(pk=reservation.pk)
        return success_response({'reservation': ReservationSerializer(reservation).data},
                                message='Reservation status updated successfully')


class MyReservationsView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Reservations for a customer phone",
        parameters=[OpenApiParameter(name='customer_phone', type=OpenApiTypes.STR,
                                     location=OpenApiParameter.QUERY, required=True)],
    )
    def get(self, request):
        phone = request.query_params.get('customer_phone')
        if not phone:
            raise ValidationError({'customer_phone': ['Customer phone is required']})
        reservations = (reservation_queryset().filter(customer_phone=phone)
                        .order_by('-reservation_date', '-reservation_time'))
        return success_response({'reservations': ReservationSerializer(reservations, many=True).data})


class TodayReservationsView(APIView):
    @extend_schema(summary="Today's reservations grouped by status")
    def get(self, request):
        reservations = (reservation_queryset()
                        .filter(reservation_date=timezone.localdate())
                        .order_by('reservation_time'))
        data = ReservationSerializer(reservations, many=True).data
        grouped = {code: [r for r in data if r['status'] == code] for code, _ in Reservation.STATUS_CHOICES}
        stats = {'total': len(data)}
        stats.update({code: len(rows) for code, rows in grouped.items()})
        return success_response({'reservations': data, 'grouped': grouped, 'stats': stats})
