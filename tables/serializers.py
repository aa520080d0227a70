from rest_framework import serializers

from .models import Table


class TableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['id', 'table_number', 'name', 'type', 'location', 'capacity', 'status',
                  'hourly_rate', 'plug_id', 'plug_status', 'session_start_time',
                  'session_end_time', 'customer_name', 'customer_phone', 'features',
                  'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'plug_status', 'session_start_time', 'session_end_time',
                            'customer_name', 'customer_phone', 'is_active', 'created_at',
                            'updated_at']


class TableDetailSerializer(TableSerializer):
    current_session = serializers.SerializerMethodField()
    devices = serializers.SerializerMethodField()

    class Meta(TableSerializer.Meta):
        fields = TableSerializer.Meta.fields + ['current_session', 'devices']

    def get_current_session(self, table):
        from table_sessions.serializers import SessionSerializer

        session = table.current_session
        return SessionSerializer(session).data if session else None

    def get_devices(self, table):
        from devices.serializers import DeviceSerializer

        return DeviceSerializer(table.devices.filter(is_active=True), many=True).data


class CreateTableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['table_number', 'name', 'type', 'location', 'capacity', 'hourly_rate',
                  'plug_id', 'features']
        extra_kwargs = {
            'capacity': {'min_value': 1, 'required': True},
            'hourly_rate': {'min_value': 0, 'required': True},
            'type': {'error_messages': {'invalid_choice': 'Invalid table type'}},
            'table_number': {'validators': []},
        }

    def validate_table_number(self, value):
        if Table.objects.filter(table_number=value).exists():
            raise serializers.ValidationError("Table number already exists")
        return value


class UpdateTableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['table_number', 'name', 'type', 'location', 'capacity', 'hourly_rate',
                  'plug_id', 'features', 'status']
        extra_kwargs = {
            'capacity': {'min_value': 1},
            'hourly_rate': {'min_value': 0},
            'table_number': {'validators': []},
        }

    def validate_table_number(self, value):
        clash = Table.objects.filter(table_number=value).exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError("Table number already exists")
        return value


class TableStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Table.STATUS_CHOICES],
                                     error_messages={'invalid_choice': 'Invalid status'})


class MapPlugSerializer(serializers.Serializer):
    plug_id = serializers.CharField(max_length=50, error_messages={'blank': 'Plug ID is required'})


class PowerActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['on', 'off'],
                                     error_messages={'invalid_choice': 'Action must be on or off'})
