from rest_framework import serializers

from .models import User
from .roles import ROLES, STAFF_ROLES


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'username', 'email', 'phone', 'role', 'permissions',
                  'is_active', 'last_login', 'created_at']
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'username', 'role']


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100, trim_whitespace=True,
                                 error_messages={'min_length': 'Name must be at least 2 characters'})
    username = serializers.CharField(min_length=3, max_length=150, trim_whitespace=True,
                                     error_messages={'min_length': 'Username must be at least 3 characters'})
    email = serializers.EmailField(error_messages={'invalid': 'Please provide a valid email'})
    password = serializers.CharField(min_length=3, write_only=True, trim_whitespace=False,
                                     error_messages={'min_length': 'Password must be at least 3 characters'})
    phone = serializers.CharField(max_length=20, error_messages={'blank': 'Phone number is required'})
    role = serializers.ChoiceField(choices=ROLES, default='User',
                                   error_messages={'invalid_choice': 'Invalid role'})

    def validate_email(self, value):
        return value.strip().lower()


class StaffCreateSerializer(RegisterSerializer):
    role = serializers.ChoiceField(choices=STAFF_ROLES, error_messages={'invalid_choice': 'Invalid role'})


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Please provide a valid email'})
    password = serializers.CharField(trim_whitespace=False, error_messages={'blank': 'Password is required'})
    role = serializers.CharField(error_messages={'blank': 'Role is required'})

    def validate_email(self, value):
        return value.strip().lower()


class DiscountRightsSerializer(serializers.Serializer):
    item = serializers.BooleanField(default=False)
    bill = serializers.BooleanField(default=False)
    offers = serializers.BooleanField(default=False)
    max_discount = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100,
                                            default=0)

    def validate_max_discount(self, value):
        # stored in a JSON column
        if value == int(value):
            return int(value)
        return float(value)


class VoidRightsSerializer(serializers.Serializer):
    items = serializers.BooleanField(default=False)
    full_order = serializers.BooleanField(default=False)
    after_payment = serializers.BooleanField(default=False)


class SpecialPermissionsSerializer(serializers.Serializer):
    void_orders = VoidRightsSerializer(required=False)
    discounts = DiscountRightsSerializer(required=False)


def flag_group():
    return serializers.DictField(child=serializers.BooleanField(), required=False)


class PermissionBundleSerializer(serializers.Serializer):
    tables_management = flag_group()
    order_processing = flag_group()
    billing_access = flag_group()
    kot_management = flag_group()
    special_permissions = SpecialPermissionsSerializer(required=False)
    report_access = flag_group()
    can_add_items = serializers.BooleanField(required=False)
    can_change_prices = serializers.BooleanField(required=False)
    can_manage_staff = serializers.BooleanField(required=False)


class PermissionsUpdateSerializer(serializers.Serializer):
    permissions = PermissionBundleSerializer()
