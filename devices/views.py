import logging
from collections import Counter

from django.utils import timezone
from rest_framework import status
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from lounge.exceptions import StateConflict
from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from tables.serializers import PowerActionSerializer
from .models import Device, Printer
from .serializers import (
    DeviceFilterSerializer, DeviceSerializer, DeviceStatusSerializer, PrinterSerializer, PrinterStatusSerializer,
)

logger = logging.getLogger(__name__)


def status_breakdown(rows, statuses):
    """Totals per status, overall and per type, for the stats endpoints."""
    by_type = {}
    for row in rows:
        bucket = by_type.setdefault(row.type, {'total': 0, **{s: 0 for s in statuses}})
        bucket['total'] += 1
        bucket[row.status] = bucket.get(row.status, 0) + 1
    counts = Counter(row.status for row in rows)
    stats = {'total': len(rows)}
    stats.update({s: counts.get(s, 0) for s in statuses})
    stats['by_type'] = by_type
    return stats


class DeviceListView(APIView):
    required_roles = {'POST': ('Admin', 'Manager')}

    @extend_schema(
        summary="List devices",
        parameters=[
            OpenApiParameter(name='type', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='table_id', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY),
        ],
        responses={200: DeviceSerializer(many=True)},
    )
    def get(self, request):
        filters = DeviceFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        devices = Device.objects.filter(is_active=True, **filters.validated_data).select_related('table')
        devices = devices.order_by('name')
        return success_response({'devices': DeviceSerializer(devices, many=True).data})

    @extend_schema(
        summary="Register a device",
        request=DeviceSerializer,
        responses={201: DeviceSerializer},
        examples=[
            OpenApiExample(
                'Create Device Example',
                value={'device_id': 'PLUG-01', 'name': 'Snooker 1 plug', 'type': 'smart_plug',
                       'location': 'Hall A', 'table': 1}
            )
        ]
    )
    def post(self, request):
        serializer = DeviceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        device = serializer.save()
        logger.info("Registered device %s", device.device_id)
        return success_response({'device': DeviceSerializer(device).data},
                                message='Device created successfully',
                                status=status.HTTP_201_CREATED)


class DeviceDetailView(APIView):
    required_roles = {'PUT': ('Admin', 'Manager'), 'DELETE': ('Admin',)}

    @extend_schema(summary="Get a device", responses={200: DeviceSerializer})
    def get(self, request, pk):
        device = get_or_404(Device.objects.select_related('table'), pk=pk)
        return success_response({'device': DeviceSerializer(device).data})

    @extend_schema(summary="Update a device", request=DeviceSerializer, responses={200: DeviceSerializer})
    def put(self, request, pk):
        device = get_or_404(Device, pk=pk)
        serializer = DeviceSerializer(device, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        device = serializer.save()
        return success_response({'device': DeviceSerializer(device).data},
                                message='Device updated successfully')

    @extend_schema(summary="Deactivate a device")
    def delete(self, request, pk):
        device = get_or_404(Device, pk=pk)
        device.is_active = False
        device.save(update_fields=['is_active', 'last_updated'])
        return success_response(message='Device deleted successfully')


class DeviceControlView(APIView):
    @extend_schema(
        summary="Switch a device on or off",
        description="Only the stored power state changes; no hardware is contacted",
        request=PowerActionSerializer,
        responses={200: DeviceSerializer},
    )
    def post(self, request, pk):
        serializer = PowerActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        action = serializer.validated_data['action']
        device = get_or_404(Device, pk=pk)
        if device.status == 'offline':
            raise StateConflict('Device is offline')

        device.power_state = action
        device.save(update_fields=['power_state', 'last_updated'])
        logger.info("Device %s turned %s", device.device_id, action)
        return success_response({'device': DeviceSerializer(device).data},
                                message=f'Device turned {action}')


class DeviceStatusView(APIView):
    @extend_schema(summary="Set device status", request=DeviceStatusSerializer, responses={200: DeviceSerializer})
    def patch(self, request, pk):
        serializer = DeviceStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        device = get_or_404(Device, pk=pk)
        device.status = serializer.validated_data['status']
        device.save(update_fields=['status', 'last_updated'])
        return success_response({'device': DeviceSerializer(device).data},
                                message='Device status updated successfully')


class DeviceStatsView(APIView):
    @extend_schema(summary="Device counts by status and type")
    def get(self, request):
        devices = list(Device.objects.filter(is_active=True))
        stats = status_breakdown(devices, [c[0] for c in Device.STATUS_CHOICES])
        return success_response({'stats': stats})


class PrinterListView(APIView):
    required_roles = {'POST': ('Admin', 'Manager')}

    @extend_schema(
        summary="List active printers",
        parameters=[
            OpenApiParameter(name='type', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
        ],
        responses={200: PrinterSerializer(many=True)},
    )
    def get(self, request):
        printers = Printer.objects.filter(is_active=True)
        if request.query_params.get('type'):
            printers = printers.filter(type=request.query_params['type'])
        if request.query_params.get('status'):
            printers = printers.filter(status=request.query_params['status'])
        printers = printers.order_by('name')
        return success_response({'printers': PrinterSerializer(printers, many=True).data})

    @extend_schema(summary="Add a printer", request=PrinterSerializer, responses={201: PrinterSerializer})
    def post(self, request):
        serializer = PrinterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        printer = serializer.save()
        logger.info("Added printer %s (%s)", printer.name, printer.type)
        return success_response({'printer': PrinterSerializer(printer).data},
                                message='Printer created successfully',
                                status=status.HTTP_201_CREATED)


class PrinterDetailView(APIView):
    required_roles = {'PUT': ('Admin', 'Manager'), 'DELETE': ('Admin',)}

    @extend_schema(summary="Get a printer", responses={200: PrinterSerializer})
    def get(self, request, pk):
        printer = get_or_404(Printer, pk=pk)
        return success_response({'printer': PrinterSerializer(printer).data})

    @extend_schema(summary="Update a printer", request=PrinterSerializer, responses={200: PrinterSerializer})
    def put(self, request, pk):
        printer = get_or_404(Printer, pk=pk)
        serializer = PrinterSerializer(printer, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        printer = serializer.save()
        return success_response({'printer': PrinterSerializer(printer).data},
                                message='Printer updated successfully')

    @extend_schema(summary="Deactivate a printer")
    def delete(self, request, pk):
        printer = get_or_404(Printer, pk=pk)
        printer.is_active = False
        printer.save(update_fields=['is_active', 'updated_at'])
        return success_response(message='Printer deleted successfully')


class PrinterTestView(APIView):
    @extend_schema(summary="Send a test print", request=None, responses={200: PrinterSerializer})
    def post(self, request, pk):
        printer = get_or_404(Printer, pk=pk)
        if not printer.is_active:
            raise StateConflict('Printer is not active')

        printer.last_test = timezone.now()
        printer.status = 'online'
        printer.save(update_fields=['last_test', 'status', 'updated_at'])
        return success_response({'printer': PrinterSerializer(printer).data},
                                message='Test print sent successfully')


class PrinterToggleView(APIView):
    required_roles = {'PATCH': ('Admin', 'Manager')}

    @extend_schema(summary="Enable or disable a printer", request=None, responses={200: PrinterSerializer})
    def patch(self, request, pk):
        printer = get_or_404(Printer, pk=pk)
        printer.is_active = not printer.is_active
        printer.save(update_fields=['is_active', 'updated_at'])
        state = 'enabled' if printer.is_active else 'disabled'
        return success_response({'printer': PrinterSerializer(printer).data},
                                message=f'Printer {state} successfully')


class PrinterStatusView(APIView):
    @extend_schema(summary="Set printer status", request=PrinterStatusSerializer, responses={200: PrinterSerializer})
    def patch(self, request, pk):
        serializer = PrinterStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        printer = get_or_404(Printer, pk=pk)
        printer.status = serializer.validated_data['status']
        printer.save(update_fields=['status', 'updated_at'])
        return success_response({'printer': PrinterSerializer(printer).data},
                                message='Printer status updated successfully')


class PrinterStatsView(APIView):
    @extend_schema(summary="Printer counts by status and type")
    def get(self, request):
        printers = list(Printer.objects.filter(is_active=True))
        stats = status_breakdown(printers, [c[0] for c in Printer.STATUS_CHOICES])
        return success_response({'stats': stats})
