import logging
import math
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from lounge.exceptions import StateConflict
from lounge.money import money, tax_rate
from lounge.shortcuts import get_or_404
from menu.models import MenuItem
from tables.models import Table
from .models import ORDER_ITEM_TRANSITIONS, ORDER_TRANSITIONS, Order, OrderItem

logger = logging.getLogger(__name__)


def create_order(*, table_id, items, created_by, **fields):
    """
    Price every line from the live menu and persist the order with its items.

    All lines are checked before anything is written, and the order row and
    its item rows are written in one transaction.
    """
    table = get_or_404(Table.objects.filter(is_active=True), pk=table_id)

    subtotal = Decimal('0')
    lines = []
    for line in items:
        menu_item = MenuItem.objects.filter(pk=line['menu_item_id']).first()
        if menu_item is None or not menu_item.is_available:
            label = menu_item.name if menu_item else f"with ID {line['menu_item_id']}"
            raise StateConflict(f"Menu item {label} is not available")
        subtotal += menu_item.price * line['quantity']
        lines.append((menu_item, line))

    subtotal = money(subtotal)
    tax = money(subtotal * tax_rate())

    with transaction.atomic():
        order = Order.objects.create(
            table=table,
            table_number=table.table_number,
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            created_by=created_by,
            **fields,
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                menu_item=menu_item,
                name=menu_item.name,
                price=menu_item.price,
                quantity=line['quantity'],
                special_instructions=line.get('special_instructions'),
            )
            for menu_item, line in lines
        ])

    logger.info("Created order %s for table %s (%d lines, total %s)",
                order.order_id, table.table_number, len(lines), order.total)
    return order


def set_order_status(order, target, now=None):
    ORDER_TRANSITIONS.transition(order, target)
    update_fields = ['status', 'updated_at']
    if target == 'ready' and order.actual_time is None:
        elapsed = ((now or timezone.now()) - order.created_at).total_seconds() / 60
        order.actual_time = max(0, math.ceil(elapsed))
        update_fields.append('actual_time')
    order.save(update_fields=update_fields)
    return order


def mark_kot_printed(order):
    """Record the KOT print; a pending order moves to confirmed so it enters the kitchen queue."""
    order.kot_printed = True
    order.kot_printed_at = timezone.now()
    update_fields = ['kot_printed', 'kot_printed_at', 'updated_at']
    if order.status == 'pending':
        ORDER_TRANSITIONS.transition(order, 'confirmed')
        update_fields.append('status')
    order.save(update_fields=update_fields)
    logger.info("KOT printed for order %s", order.order_id)
    return order


def cancel_order(order):
    if order.status == 'served':
        raise StateConflict('Cannot cancel served order')
    ORDER_TRANSITIONS.transition(order, 'cancelled')
    order.save(update_fields=['status', 'updated_at'])
    logger.info("Cancelled order %s", order.order_id)
    return order


def set_item_status(item, target):
    ORDER_ITEM_TRANSITIONS.transition(item, target)
    item.save(update_fields=['status', 'updated_at'])
    return item


def complete_item(item):
    """
    Mark one item ready, then move the order to ready once every item is ready.

    The sibling scan runs under a lock on the order row so two kitchen
    stations finishing the last items at once cannot both miss the cascade.
    Completing an item that is already ready only re-runs the cascade.
    """
    with transaction.atomic():
        order = Order.objects.select_for_update().get(pk=item.order_id)
        if item.status != 'ready':
            set_item_status(item, 'ready')
        statuses = list(order.items.values_list('status', flat=True))
        if statuses and all(s == 'ready' for s in statuses) \
                and ORDER_TRANSITIONS.can_transition(order.status, 'ready'):
            set_order_status(order, 'ready')
            logger.info("All items ready; order %s is ready", order.order_id)
    return item


def complete_order(order):
    """Mark every outstanding item ready and the order itself ready."""
    with transaction.atomic():
        ORDER_TRANSITIONS.check(order.status, 'ready')
        order.items.exclude(status__in=['ready', 'served']).update(status='ready', updated_at=timezone.now())
        set_order_status(order, 'ready')
    return order
