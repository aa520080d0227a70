import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from lounge.permissions import RolePermission
from lounge.responses import success_response
from lounge.shortcuts import get_or_404
from .models import MenuItem
from .serializers import MenuItemSerializer, group_menu

logger = logging.getLogger(__name__)


class PublicReadMixin:
    """Reads are open to anonymous callers; writes need an authenticated, role-gated user."""

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated(), RolePermission()]


class MenuListView(PublicReadMixin, APIView):
    required_roles = {'POST': ('Admin', 'Manager')}

    @extend_schema(
        summary="List menu items",
        description="Flat list plus a category → subcategory grouping",
        parameters=[
            OpenApiParameter(name='category', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='subcategory', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='available', type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY),
        ],
    )
    def get(self, request):
        items = MenuItem.objects.all()
        params = request.query_params
        if params.get('category'):
            items = items.filter(category=params['category'])
        if params.get('subcategory'):
            items = items.filter(subcategory=params['subcategory'])
        if params.get('available') is not None:
            items = items.filter(is_available=params['available'] == 'true')
        items = items.order_by('category', 'subcategory', 'name')

        data = MenuItemSerializer(items, many=True).data
        return success_response({'menu_items': data, 'grouped_menu': group_menu(data)})

    @extend_schema(
        summary="Create a menu item",
        request=MenuItemSerializer,
        responses={201: MenuItemSerializer},
        examples=[
            OpenApiExample(
                'Create Menu Item Example',
                value={'name': 'Masala Fries', 'category': 'Food', 'subcategory': 'Snacks',
                       'price': '120.00', 'printer': 'Kitchen Printer'}
            )
        ]
    )
    def post(self, request):
        serializer = MenuItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = serializer.save()
        logger.info("Created menu item %s", item.name)
        return success_response({'menu_item': MenuItemSerializer(item).data},
                                message='Menu item created successfully',
                                status=status.HTTP_201_CREATED)


class MenuDetailView(PublicReadMixin, APIView):
    required_roles = {'PUT': ('Admin', 'Manager'), 'DELETE': ('Admin',)}

    @extend_schema(summary="Get a menu item", responses={200: MenuItemSerializer})
    def get(self, request, pk):
        item = get_or_404(MenuItem, pk=pk)
        return success_response({'menu_item': MenuItemSerializer(item).data})

    @extend_schema(summary="Update a menu item", request=MenuItemSerializer, responses={200: MenuItemSerializer})
    def put(self, request, pk):
        item = get_or_404(MenuItem, pk=pk)
        serializer = MenuItemSerializer(item, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        item = serializer.save()
        return success_response({'menu_item': MenuItemSerializer(item).data},
                                message='Menu item updated successfully')

    @extend_schema(summary="Delete a menu item", description="Hard delete")
    def delete(self, request, pk):
        item = get_or_404(MenuItem, pk=pk)
        item.delete()
        logger.info("Deleted menu item %s", pk)
        return success_response(message='Menu item deleted successfully')


class MenuAvailabilityView(APIView):
    required_roles = {'PATCH': ('Admin', 'Manager')}

    @extend_schema(summary="Toggle menu item availability", request=None, responses={200: MenuItemSerializer})
    def patch(self, request, pk):
        item = get_or_404(MenuItem, pk=pk)
        item.is_available = not item.is_available
        item.save(update_fields=['is_available', 'updated_at'])
        state = 'enabled' if item.is_available else 'disabled'
        return success_response({'menu_item': MenuItemSerializer(item).data},
                                message=f"Menu item {state} successfully")


class MenuStructureView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(summary="Categories and their subcategories")
    def get(self, request):
        pairs = (MenuItem.objects.values_list('category', 'subcategory')
                 .distinct().order_by('category', 'subcategory'))
        structure = {}
        for category, subcategory in pairs:
            structure.setdefault(category, []).append(subcategory)
        return success_response({'structure': structure})
