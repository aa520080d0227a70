from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    printer = serializers.SerializerMethodField()
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'menu_item', 'name', 'price', 'quantity', 'status', 'printer',
                  'special_instructions', 'line_total']
        read_only_fields = fields

    def get_printer(self, item):
        return printer_for(item)


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    creator = UserSummarySerializer(source='created_by', read_only=True)

    class Meta:
        model = Order
        fields = ['id', 'order_id', 'table', 'table_number', 'customer_name', 'customer_phone',
                  'service_type', 'order_type', 'status', 'subtotal', 'tax', 'discount',
                  'discount_type', 'total', 'payment_status', 'payment_method', 'kot_printed',
                  'kot_printed_at', 'special_instructions', 'estimated_time', 'actual_time',
                  'creator', 'items', 'created_at', 'updated_at']
        read_only_fields = fields
        extra_kwargs = {
            'order_id': {'help_text': 'Human-readable reference, ORD-YYYYMMDD-NNNN'},
            'total': {'help_text': 'subtotal + tax - discount at creation time'},
        }


class OrderLineSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField(error_messages={'invalid': 'Valid menu item ID is required'})
    quantity = serializers.IntegerField(min_value=1, error_messages={'min_value': 'Quantity must be at least 1'})
    special_instructions = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class CreateOrderSerializer(serializers.Serializer):
    table_id = serializers.IntegerField(error_messages={'invalid': 'Valid table ID is required'})
    customer_name = serializers.CharField(max_length=100, error_messages={'blank': 'Customer name is required'})
    customer_phone = serializers.CharField(max_length=20, error_messages={'blank': 'Customer phone is required'})
    service_type = serializers.ChoiceField(choices=[c[0] for c in Order.SERVICE_TYPE_CHOICES], default='dine-in')
    order_type = serializers.ChoiceField(choices=[c[0] for c in Order.ORDER_TYPE_CHOICES],
                                         error_messages={'invalid_choice': 'Invalid order type'})
    items = OrderLineSerializer(many=True, allow_empty=False,
                                error_messages={'empty': 'At least one item is required'})
    special_instructions = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Order.STATUS_CHOICES],
                                     error_messages={'invalid_choice': 'Invalid status'})


class OrderItemStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in OrderItem.STATUS_CHOICES],
                                     error_messages={'invalid_choice': 'Invalid status'})


DEFAULT_PRINTER = 'Main Printer'


def printer_for(item):
    # Lines whose menu item was deleted fall back to the main printer
    return item.menu_item.printer if item.menu_item_id and item.menu_item else DEFAULT_PRINTER


class OrderFilterSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    table_id = serializers.IntegerField(required=False)
    date = serializers.DateField(required=False, input_formats=['%Y-%m-%d'],
                                 error_messages={'invalid': 'Date must be YYYY-MM-DD'})
