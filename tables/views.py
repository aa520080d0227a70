import logging

from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from lounge.exceptions import StateConflict
from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from .models import Table
from .serializers import (
    CreateTableSerializer, MapPlugSerializer, PowerActionSerializer, TableDetailSerializer,
    TableSerializer, TableStatusSerializer, UpdateTableSerializer,
)

logger = logging.getLogger(__name__)


class TableListView(APIView):
    required_roles = {'POST': ('Admin', 'Manager')}

    @extend_schema(
        summary="List tables",
        parameters=[
            OpenApiParameter(name='type', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
        ],
        responses={200: TableDetailSerializer(many=True)},
    )
    def get(self, request):
        tables = Table.objects.filter(is_active=True).prefetch_related('devices')
        if request.query_params.get('type'):
            tables = tables.filter(type=request.query_params['type'])
        if request.query_params.get('status'):
            tables = tables.filter(status=request.query_params['status'])
        tables = tables.order_by('table_number')
        return success_response({'tables': TableDetailSerializer(tables, many=True).data})

    @extend_schema(
        summary="Create a table",
        request=CreateTableSerializer,
        responses={201: TableSerializer},
        examples=[
            OpenApiExample(
                'Create Table Example',
                value={'table_number': 'S1', 'name': 'Snooker 1', 'type': 'Snooker',
                       'location': 'Hall A', 'capacity': 4, 'hourly_rate': '300.00'}
            )
        ]
    )
    def post(self, request):
        serializer = CreateTableSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = serializer.save()
        logger.info("Created table %s", table.table_number)
        return success_response({'table': TableSerializer(table).data},
                                message='Table created successfully',
                                status=status.HTTP_201_CREATED)


class TableDetailView(APIView):
    required_roles = {'PUT': ('Admin', 'Manager'), 'DELETE': ('Admin',)}

    @extend_schema(summary="Get a table", responses={200: TableDetailSerializer})
    def get(self, request, pk):
        table = get_or_404(Table, pk=pk)
        return success_response({'table': TableDetailSerializer(table).data})

    @extend_schema(summary="Update a table", request=UpdateTableSerializer, responses={200: TableSerializer})
    def put(self, request, pk):
        table = get_or_404(Table, pk=pk)
        serializer = UpdateTableSerializer(table, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        table = serializer.save()
        return success_response({'table': TableSerializer(table).data},
                                message='Table updated successfully')

    @extend_schema(summary="Deactivate a table")
    def delete(self, request, pk):
        table = get_or_404(Table, pk=pk)
        if table.status == 'occupied':
            raise StateConflict('Cannot delete table with active session')

        table.is_active = False
        table.save(update_fields=['is_active', 'updated_at'])
        logger.info("Deactivated table %s", table.table_number)
        return success_response(message='Table deleted successfully')


class TableStatusView(APIView):
    @extend_schema(summary="Set table status", request=TableStatusSerializer, responses={200: TableSerializer})
    def patch(self, request, pk):
        serializer = TableStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = get_or_404(Table, pk=pk)

        table.status = serializer.validated_data['status']
        table.save(update_fields=['status', 'updated_at'])
        return success_response({'table': TableSerializer(table).data},
                                message='Table status updated successfully')


class TablePlugView(APIView):
    required_roles = {'POST': ('Admin', 'Manager')}

    @extend_schema(summary="Map a smart plug to a table", request=MapPlugSerializer, responses={200: TableSerializer})
    def post(self, request, pk):
        serializer = MapPlugSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = get_or_404(Table, pk=pk)

        table.plug_id = serializer.validated_data['plug_id']
        table.plug_status = 'offline'
        table.save(update_fields=['plug_id', 'plug_status', 'updated_at'])
        return success_response({'table': TableSerializer(table).data},
                                message='Smart plug mapped successfully')


class TablePlugControlView(APIView):
    @extend_schema(
        summary="Switch a table's smart plug",
        description="Only the stored plug status changes; no hardware is contacted",
        request=PowerActionSerializer,
        responses={200: TableSerializer},
    )
    def post(self, request, pk):
        serializer = PowerActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        action = serializer.validated_data['action']

        table = Table.objects.filter(pk=pk).first()
        if table is None or not table.plug_id:
            raise NotFound('Table or smart plug not found')

        table.plug_status = 'online' if action == 'on' else 'offline'
        table.save(update_fields=['plug_status', 'updated_at'])
        logger.info("Smart plug %s on table %s turned %s", table.plug_id, table.table_number, action)
        return success_response({'table': TableSerializer(table).data},
                                message=f"Smart plug turned {action}")
