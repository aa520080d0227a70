from rest_framework import serializers

from tables.models import Table
from .models import Device, Printer


class DeviceTableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['id', 'table_number', 'name', 'type']


class DeviceSerializer(serializers.ModelSerializer):
    table_detail = DeviceTableSerializer(source='table', read_only=True)

    class Meta:
        model = Device
        fields = ['id', 'device_id', 'name', 'type', 'location', 'table', 'table_detail', 'status',
                  'power_state', 'power_consumption', 'last_updated', 'is_active', 'created_at']
        read_only_fields = ['id', 'power_state', 'last_updated', 'is_active', 'created_at']
        extra_kwargs = {
            'device_id': {'validators': [], 'error_messages': {'blank': 'Device ID is required'}},
            'name': {'error_messages': {'blank': 'Device name is required'}},
            'type': {'error_messages': {'invalid_choice': 'Invalid device type'}},
            'location': {'error_messages': {'blank': 'Location is required'}},
            'table': {'queryset': Table.objects.filter(is_active=True), 'required': False, 'allow_null': True},
        }

    def validate_device_id(self, value):
        clash = Device.objects.filter(device_id=value)
        if self.instance is not None:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError("Device ID already exists")
        return value


class DeviceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Device.STATUS_CHOICES],
                                     error_messages={'invalid_choice': 'Invalid status'})


class PrinterSerializer(serializers.ModelSerializer):
    class Meta:
        model = Printer
        fields = ['id', 'name', 'type', 'ip_address', 'port', 'status', 'is_active', 'last_test',
                  'created_at', 'updated_at']
        read_only_fields = ['id', 'is_active', 'last_test', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'error_messages': {'blank': 'Printer name is required'}},
            'type': {'error_messages': {'invalid_choice': 'Invalid printer type'}},
            'port': {'min_value': 1, 'max_value': 65535},
        }


class PrinterStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Printer.STATUS_CHOICES],
                                     error_messages={'invalid_choice': 'Invalid status'})


class DeviceFilterSerializer(serializers.Serializer):
    type = serializers.CharField(required=False)
    status = serializers.CharField(required=False)
    table_id = serializers.IntegerField(required=False)
