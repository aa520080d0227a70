from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

CENT = Decimal('0.01')


def money(value):
    """Round to cents, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def tax_rate():
    return Decimal(str(settings.POS_TAX_RATE))


def service_fee_rate():
    return Decimal(str(settings.POS_SERVICE_FEE_RATE))
