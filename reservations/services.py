import logging

from django.db import transaction

from lounge.exceptions import StateConflict
from tables.models import Table
from .models import RESERVATION_TRANSITIONS, TABLE_TYPE_MAP, Reservation

logger = logging.getLogger(__name__)

RELEASING = ('cancelled', 'completed', 'no-show')


def create_reservation(*, table_type, reservation_date, reservation_time, created_by=None, **fields):
    """
    Book a slot and assign a table in one transaction.

    Candidate tables are locked for the duration of the check, so two
    bookings for the same type and slot cannot both take the last table.
    The assigned table is the first candidate not already held by a live
    reservation in the same slot.
    """
    with transaction.atomic():
        candidates = list(
            Table.objects.select_for_update()
            .filter(type=TABLE_TYPE_MAP[table_type], status='available', is_active=True)
            .order_by('table_number')
        )
        if not candidates:
            raise StateConflict('No tables available for the selected type')

        clashing = Reservation.objects.select_for_update().filter(
            table_type=table_type,
            reservation_date=reservation_date,
            reservation_time=reservation_time,
            status__in=Reservation.LIVE_STATUSES,
        )
        held = list(clashing.values_list('table_id', flat=True))
        free = [table for table in candidates if table.pk not in held]
        if len(held) >= len(candidates) or not free:
            logger.warning("No %s free on %s at %s", table_type, reservation_date, reservation_time)
            raise StateConflict('No tables available at the requested time')

        reservation = Reservation.objects.create(
            table=free[0],
            table_type=table_type,
            reservation_date=reservation_date,
            reservation_time=reservation_time,
            created_by=created_by,
            **fields,
        )

    logger.info("Reservation %s assigned table %s", reservation.reservation_id, free[0].table_number)
    return reservation


def set_reservation_status(reservation, target):
    """
    Move a reservation through its lifecycle and keep its table in step.

    Arrival holds the table as reserved. Leaving the live states frees the
    table only while it is still held for this reservation.
    """
    with transaction.atomic():
        RESERVATION_TRANSITIONS.check(reservation.status, target)
        table = None
        if reservation.table_id:
            table = Table.objects.select_for_update().get(pk=reservation.table_id)

        if target == 'arrived' and table is not None:
            if table.status == 'occupied':
                raise StateConflict('Assigned table is occupied')
            table.status = 'reserved'
            table.save(update_fields=['status', 'updated_at'])
        elif target in RELEASING and table is not None and table.status == 'reserved':
            table.status = 'available'
            table.save(update_fields=['status', 'updated_at'])

        reservation.status = target
        reservation.save(update_fields=['status', 'updated_at'])

    logger.info("Reservation %s is now %s", reservation.reservation_id, target)
    return reservation


def cancel_reservation(reservation):
    if reservation.status == 'completed':
        raise StateConflict('Cannot cancel completed reservation')
    return set_reservation_status(reservation, 'cancelled')
