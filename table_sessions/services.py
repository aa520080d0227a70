"""
Session lifecycle and the billing maths shared with the billing app.

A session bills ``ceil(elapsed minutes) / 60 * hourly_rate`` plus the totals
of every order placed on the same table inside the session window. Tax and
the service fee are both charged on that subtotal.
"""
import logging
import math
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from lounge.exceptions import StateConflict
from lounge.money import money, service_fee_rate, tax_rate
from lounge.shortcuts import get_or_404
from orders.models import Order
from tables.models import Table
from .models import SESSION_TRANSITIONS, Session

logger = logging.getLogger(__name__)


def elapsed_minutes(start, end):
    return max(0, math.ceil((end - start).total_seconds() / 60))


def time_charge(minutes, hourly_rate):
    return money(Decimal(minutes) * Decimal(hourly_rate) / 60)


def orders_in_window(session, end=None):
    """Orders placed on the session's table between its start and ``end`` (or its end time, or now)."""
    end = end or session.end_time or timezone.now()
    return Order.objects.filter(
        table_id=session.table_id,
        created_at__gte=session.start_time,
        created_at__lte=end,
    ).order_by('created_at')


def current_cost(session, now=None):
    """Time charge so far; only differs from the stored cost while the session runs."""
    if session.status != 'active':
        return session.session_cost
    return time_charge(elapsed_minutes(session.start_time, now or timezone.now()), session.hourly_rate)


def start_session(*, table_id, customer_name, customer_phone, created_by):
    with transaction.atomic():
        table = get_or_404(Table.objects.filter(is_active=True).select_for_update(), pk=table_id)
        if table.status != 'available':
            logger.warning("Refused session start on table %s (status %s)", table.table_number, table.status)
            raise StateConflict('Table is not available')

        session = Session.objects.create(
            table=table,
            table_number=table.table_number,
            customer_name=customer_name,
            customer_phone=customer_phone,
            hourly_rate=table.hourly_rate,
            plug_controlled=bool(table.plug_id),
            created_by=created_by,
        )

        table.status = 'occupied'
        table.session_start_time = session.start_time
        table.session_end_time = None
        table.customer_name = customer_name
        table.customer_phone = customer_phone
        if table.plug_id:
            table.plug_status = 'online'
        table.save()

    logger.info("Started session %s on table %s", session.session_id, table.table_number)
    return session


def release_table(table, end_time):
    table.status = 'available'
    table.session_start_time = None
    table.session_end_time = end_time
    table.customer_name = None
    table.customer_phone = None
    table.plug_status = 'offline'
    table.save()


def close_session(session, now=None):
    """
    Compute the final bill for an active session and free its table.

    Paused intervals are billed like running time. A discount that is
    already on the session is kept and taken off the new total.
    """
    SESSION_TRANSITIONS.check(session.status, 'completed')
    end_time = now or timezone.now()

    duration = elapsed_minutes(session.start_time, end_time)
    session_cost = time_charge(duration, session.hourly_rate)
    order_cost = money(sum((o.total for o in orders_in_window(session, end_time)), Decimal('0')))
    subtotal = session_cost + order_cost
    tax = money(subtotal * tax_rate())
    service_fee = money(subtotal * service_fee_rate())

    session.end_time = end_time
    session.duration = duration
    session.session_cost = session_cost
    session.total_order_cost = order_cost
    session.subtotal = subtotal
    session.tax = tax
    session.service_fee = service_fee
    session.total = max(Decimal('0'), subtotal + tax + service_fee - session.discount)
    SESSION_TRANSITIONS.transition(session, 'completed')
    session.save()

    release_table(session.table, end_time)
    logger.info("Ended session %s after %d min, total %s", session.session_id, duration, session.total)
    return session


def end_session(session, now=None):
    with transaction.atomic():
        session = Session.objects.select_for_update().select_related('table').get(pk=session.pk)
        return close_session(session, now)


def extend_session(session, minutes, reason=None):
    """Log an extension; billing is driven by actual elapsed time, not by this log."""
    if session.status != 'active':
        raise StateConflict('Session is not active')
    session.extensions = list(session.extensions or []) + [{
        'extended_by': minutes,
        'extended_at': timezone.now().isoformat(),
        'reason': reason or 'Manual extension',
    }]
    session.save(update_fields=['extensions', 'updated_at'])
    return session


def pause_session(session):
    SESSION_TRANSITIONS.transition(session, 'paused')
    session.save(update_fields=['status', 'updated_at'])
    logger.info("Paused session %s", session.session_id)
    return session


def resume_session(session):
    SESSION_TRANSITIONS.transition(session, 'active')
    session.save(update_fields=['status', 'updated_at'])
    logger.info("Resumed session %s", session.session_id)
    return session
