from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from tables.models import Table
from .models import Reservation, TABLE_TYPE_MAP


class ReservedTableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['id', 'table_number', 'name', 'type', 'location', 'status']


class ReservationSerializer(serializers.ModelSerializer):
    table = ReservedTableSerializer(read_only=True)
    creator = UserSummarySerializer(source='created_by', read_only=True)

    class Meta:
        model = Reservation
        fields = ['id', 'reservation_id', 'customer_name', 'customer_phone', 'customer_email',
                  'table', 'table_type', 'reservation_date', 'reservation_time', 'duration',
                  'party_size', 'special_requests', 'status', 'sms_notification',
                  'email_notification', 'advance_payment', 'total_amount', 'creator',
                  'created_at', 'updated_at']
        read_only_fields = fields


class CreateReservationSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=100, error_messages={'blank': 'Customer name is required'})
    customer_phone = serializers.CharField(max_length=20, error_messages={'blank': 'Customer phone is required'})
    customer_email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    table_type = serializers.ChoiceField(choices=list(TABLE_TYPE_MAP),
                                         error_messages={'invalid_choice': 'Invalid table type'})
    reservation_date = serializers.DateField(error_messages={'invalid': 'Valid reservation date is required'})
    reservation_time = serializers.TimeField(input_formats=['%H:%M', '%H:%M:%S'], error_messages={
        'invalid': 'Valid reservation time is required (HH:MM format)',
    })
    duration = serializers.IntegerField(min_value=1, default=2)
    party_size = serializers.IntegerField(min_value=1, error_messages={'min_value': 'Party size must be at least 1'})
    special_requests = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    sms_notification = serializers.BooleanField(default=True)
    email_notification = serializers.BooleanField(default=True)
    advance_payment = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    total_amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)


class UpdateReservationSerializer(serializers.ModelSerializer):
    reservation_time = serializers.TimeField(input_formats=['%H:%M', '%H:%M:%S'], required=False)

    class Meta:
        model = Reservation
        fields = ['customer_name', 'customer_phone', 'customer_email', 'table_type',
                  'reservation_date', 'reservation_time', 'duration', 'party_size',
                  'special_requests', 'advance_payment', 'total_amount']
        extra_kwargs = {
            'party_size': {'min_value': 1},
            'duration': {'min_value': 1},
        }


class ReservationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Reservation.STATUS_CHOICES],
                                     error_messages={'invalid_choice': 'Invalid status'})


class ReservationFilterSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    table_type = serializers.CharField(required=False)
    date = serializers.DateField(required=False, input_formats=['%Y-%m-%d'],
                                 error_messages={'invalid': 'Date must be YYYY-MM-DD'})
