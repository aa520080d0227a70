from rest_framework import serializers

from table_sessions.models import Session


class DiscountSerializer(serializers.Serializer):
    discount_type = serializers.ChoiceField(choices=['percentage', 'fixed'],
                                            error_messages={'invalid_choice': 'Invalid discount type'})
    discount_value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0,
                                              error_messages={'min_value': 'Discount value must be positive'})
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class PaymentSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=[c[0] for c in Session.PAYMENT_METHOD_CHOICES],
                                             error_messages={'invalid_choice': 'Invalid payment method'})
    amount_paid = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0,
                                           error_messages={'min_value': 'Amount paid must be positive'})
