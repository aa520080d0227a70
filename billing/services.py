import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from accounts.roles import discount_permissions
from lounge.exceptions import StateConflict
from lounge.money import money
from table_sessions.models import Session
from table_sessions.services import close_session, current_cost, orders_in_window

logger = logging.getLogger(__name__)


def build_bill(session, now=None):
    """Bill projection; the live time charge of a running session is not saved."""
    orders = list(orders_in_window(session, now).prefetch_related('items__menu_item'))
    live_cost = current_cost(session, now)
    summary = {
        'session_cost': live_cost,
        'orders_cost': money(sum((o.total for o in orders), Decimal('0'))),
        'subtotal': session.subtotal,
        'tax': session.tax,
        'service_fee': session.service_fee,
        'discount': session.discount,
        'total': session.total,
    }
    return orders, live_cost, summary


def apply_discount(session, user, discount_type, value):
    """
    Take a percentage of the subtotal, or a fixed amount, off the session total.

    The caller needs item or bill discount rights; percentages above the
    caller's ``max_discount`` are refused. The total never goes below zero.
    """
    rights = discount_permissions(user.permissions)
    if not (rights.get('item') or rights.get('bill')):
        logger.warning("User %s tried to discount session %s without rights", user.username, session.session_id)
        raise PermissionDenied('Insufficient permissions to apply discount')

    max_discount = Decimal(str(rights.get('max_discount') or 0))
    if discount_type == 'percentage' and value > max_discount:
        raise ValidationError({'discount_value': [f'Maximum discount allowed is {max_discount:g}%']})

    if session.payment_status == 'paid':
        raise StateConflict('Session already paid')

    if discount_type == 'percentage':
        amount = money(session.subtotal * value / 100)
    else:
        amount = money(value)

    session.discount = amount
    session.total = max(Decimal('0'), session.subtotal + session.tax + session.service_fee - amount)
    session.save(update_fields=['discount', 'total', 'updated_at'])
    logger.info("Applied %s discount of %s to session %s", discount_type, amount, session.session_id)
    return amount


def process_payment(session, payment_method, now=None):
    """
    Settle a session. A running session is ended first, with the same
    computation as an explicit end; every order in its window is marked paid.
    """
    with transaction.atomic():
        session = Session.objects.select_for_update().select_related('table').get(pk=session.pk)
        if session.payment_status == 'paid':
            raise StateConflict('Session already paid')
        if session.status == 'paused':
            raise StateConflict('Resume or end the session before taking payment')
        if session.status == 'active':
            close_session(session, now)

        session.payment_status = 'paid'
        session.payment_method = payment_method
        session.save(update_fields=['payment_status', 'payment_method', 'updated_at'])

        orders_in_window(session).update(
            payment_status='paid',
            payment_method=payment_method,
            updated_at=timezone.now(),
        )

    logger.info("Session %s paid by %s, total %s", session.session_id, payment_method, session.total)
    return session
