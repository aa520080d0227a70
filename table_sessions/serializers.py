from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from .models import Session


class SessionSerializer(serializers.ModelSerializer):
    creator = UserSummarySerializer(source='created_by', read_only=True)

    class Meta:
        model = Session
        fields = ['id', 'session_id', 'table', 'table_number', 'customer_name', 'customer_phone',
                  'start_time', 'end_time', 'duration', 'hourly_rate', 'session_cost',
                  'total_order_cost', 'subtotal', 'tax', 'service_fee', 'discount', 'total',
                  'payment_status', 'payment_method', 'status', 'extensions', 'plug_controlled',
                  'creator', 'created_at', 'updated_at']
        read_only_fields = fields


class SessionWithTableSerializer(SessionSerializer):
    table_detail = serializers.SerializerMethodField()

    class Meta(SessionSerializer.Meta):
        fields = SessionSerializer.Meta.fields + ['table_detail']

    def get_table_detail(self, session):
        from tables.serializers import TableSerializer

        return TableSerializer(session.table).data


class StartSessionSerializer(serializers.Serializer):
    table_id = serializers.IntegerField(error_messages={'invalid': 'Valid table ID is required'})
    customer_name = serializers.CharField(max_length=100, error_messages={'blank': 'Customer name is required'})
    customer_phone = serializers.CharField(max_length=20, error_messages={'blank': 'Customer phone is required'})


class ExtendSessionSerializer(serializers.Serializer):
    minutes = serializers.IntegerField(min_value=1, error_messages={
        'min_value': 'Extension time must be at least 1 minute',
    })
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class SessionFilterSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    table_id = serializers.IntegerField(required=False)
    customer_phone = serializers.CharField(required=False)
