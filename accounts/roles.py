"""
Role → permission bundle mapping.

A bundle is assigned once, when the user is created; later role changes do
not re-derive it. Staff management can overwrite it explicitly.
"""
import copy

ROLES = ('Admin', 'Manager', 'Staff', 'User')
STAFF_ROLES = ('Staff', 'Manager')


def _bundle(*, manage, modify, cancel, billing, kot_modify, void_items, void_full,
            void_after_payment, discounts, max_discount, reports, catalog, manage_staff,
            view=True, create=True, kot=True):
    return {
        'tables_management': {'view': view, 'manage': manage, 'status': view},
        'order_processing': {'create': create, 'modify': modify, 'cancel': cancel},
        'billing_access': {'generate': billing, 'payments': billing, 'reports': billing},
        'kot_management': {'print': kot, 'modify': kot_modify, 'status': kot},
        'special_permissions': {
            'void_orders': {
                'items': void_items,
                'full_order': void_full,
                'after_payment': void_after_payment,
            },
            'discounts': {
                'item': discounts,
                'bill': discounts,
                'offers': discounts,
                'max_discount': max_discount,
            },
        },
        'report_access': {'daily': reports, 'table': reports, 'item': reports},
        'can_add_items': catalog,
        'can_change_prices': catalog,
        'can_manage_staff': manage_staff,
    }


ROLE_PERMISSIONS = {
    'Admin': _bundle(
        manage=True, modify=True, cancel=True, billing=True, kot_modify=True,
        void_items=True, void_full=True, void_after_payment=True,
        discounts=True, max_discount=25, reports=True, catalog=True, manage_staff=True,
    ),
    'Manager': _bundle(
        manage=True, modify=True, cancel=True, billing=True, kot_modify=True,
        void_items=True, void_full=False, void_after_payment=False,
        discounts=True, max_discount=15, reports=True, catalog=True, manage_staff=False,
    ),
    'Staff': _bundle(
        manage=False, modify=False, cancel=False, billing=False, kot_modify=False,
        void_items=False, void_full=False, void_after_payment=False,
        discounts=False, max_discount=0, reports=False, catalog=False, manage_staff=False,
    ),
    'User': _bundle(
        manage=False, modify=False, cancel=False, billing=False, kot_modify=False,
        void_items=False, void_full=False, void_after_payment=False,
        discounts=False, max_discount=0, reports=False, catalog=False, manage_staff=False,
        view=False, create=False, kot=False,
    ),
}


def permissions_for_role(role):
    """Return a fresh copy of the default permission bundle for ``role``."""
    return copy.deepcopy(ROLE_PERMISSIONS.get(role, ROLE_PERMISSIONS['User']))


def discount_permissions(bundle):
    return (bundle or {}).get('special_permissions', {}).get('discounts', {})
