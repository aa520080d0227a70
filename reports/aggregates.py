"""
In-memory roll-ups behind the reports endpoints.

Each function takes already-filtered querysets and returns plain dicts, so
the views only deal with date ranges and the response envelope.
"""
from collections import Counter
from decimal import Decimal

from django.utils import timezone

from lounge.money import money
from orders.serializers import printer_for

ZERO = Decimal('0')


def total(rows, field):
    return money(sum((getattr(row, field) or ZERO for row in rows), ZERO))


def billable(orders):
    return [order for order in orders if order.status != 'cancelled']


def dashboard(sessions, orders):
    sessions = list(sessions)
    orders = list(orders)
    timed = [s.duration for s in sessions if s.duration > 0]
    hours = Counter(timezone.localtime(s.start_time).hour for s in sessions)
    peak_hour = f"{hours.most_common(1)[0][0]}:00" if hours else None
    return {
        'revenue': {
            'total': total(sessions, 'total'),
            'table': total(sessions, 'session_cost'),
            'orders': total(billable(orders), 'total'),
            'discounts': total(sessions, 'discount'),
        },
        'sessions': {
            'total': len(sessions),
            'active': sum(1 for s in sessions if s.status == 'active'),
            'completed': sum(1 for s in sessions if s.status == 'completed'),
            'avg_duration': round(sum(timed) / len(timed)) if timed else 0,
            'peak_hour': peak_hour,
        },
        'orders': {
            'total': len(orders),
            'pending': sum(1 for o in orders if o.status == 'pending'),
            'completed': sum(1 for o in orders if o.status == 'served'),
        },
    }


def revenue_by_category(items):
    revenue = {}
    for item in items:
        category = item.menu_item.category if item.menu_item else 'Uncategorized'
        revenue[category] = revenue.get(category, ZERO) + item.line_total
    return {category: money(amount) for category, amount in revenue.items()}


def table_performance(sessions, window_minutes=0):
    """
    Revenue and usage per table, best earners first.

    ``occupancy_rate`` is the share of the report window, in percent, that
    the table spent in sessions; it is 0 when the window is empty.
    """
    tables = {}
    for session in sessions:
        row = tables.setdefault(session.table_id, {
            'table_id': session.table_id,
            'name': session.table.name,
            'type': session.table.type,
            'total_revenue': ZERO,
            'total_sessions': 0,
            'total_duration': 0,
        })
        row['total_revenue'] += session.total or ZERO
        row['total_sessions'] += 1
        row['total_duration'] += session.duration or 0

    for row in tables.values():
        row['total_revenue'] = money(row['total_revenue'])
        row['avg_duration'] = round(row['total_duration'] / row['total_sessions'])
        if window_minutes > 0:
            row['occupancy_rate'] = min(100.0, round(row['total_duration'] * 100 / window_minutes, 2))
        else:
            row['occupancy_rate'] = 0.0
    return sorted(tables.values(), key=lambda row: row['total_revenue'], reverse=True)


def item_sales(items):
    sales = {}
    for item in items:
        key = item.menu_item_id or f"deleted:{item.name}"
        row = sales.setdefault(key, {
            'menu_item_id': item.menu_item_id,
            'name': item.name,
            'category': item.menu_item.category if item.menu_item else None,
            'subcategory': item.menu_item.subcategory if item.menu_item else None,
            'printer': printer_for(item),
            'quantity_sold': 0,
            'total_revenue': ZERO,
        })
        row['quantity_sold'] += item.quantity
        row['total_revenue'] += item.line_total

    for row in sales.values():
        row['total_revenue'] = money(row['total_revenue'])
        row['avg_price'] = money(row['total_revenue'] / row['quantity_sold']) if row['quantity_sold'] else ZERO
    return sorted(sales.values(), key=lambda row: row['quantity_sold'], reverse=True)


def staff_performance(sessions, orders):
    staff = {}

    def row_for(user):
        return staff.setdefault(user.pk, {
            'user_id': user.pk,
            'name': user.name,
            'username': user.username,
            'role': user.role,
            'orders_handled': 0,
            'sessions_handled': 0,
            'total_sales': ZERO,
        })

    for order in billable(orders):
        row = row_for(order.created_by)
        row['orders_handled'] += 1
        row['total_sales'] += order.total
    for session in sessions:
        row = row_for(session.created_by)
        row['sessions_handled'] += 1
        row['total_sales'] += session.total

    for row in staff.values():
        row['total_sales'] = money(row['total_sales'])
    return sorted(staff.values(), key=lambda row: row['total_sales'], reverse=True)


def financial_summary(sessions, orders):
    sessions = list(sessions)
    summary = {
        'total_revenue': total(sessions, 'total'),
        'session_revenue': total(sessions, 'session_cost'),
        'order_revenue': total(billable(orders), 'total'),
        'total_tax': total(sessions, 'tax'),
        'total_service_fee': total(sessions, 'service_fee'),
        'total_discounts': total(sessions, 'discount'),
    }
    # Session totals already have discounts taken off; tax is collected for the state
    summary['net_amount'] = summary['total_revenue'] - summary['total_tax']
    return summary
