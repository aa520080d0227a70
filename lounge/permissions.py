from rest_framework.permissions import BasePermission


class RolePermission(BasePermission):
    """
    Role gate driven by the view's ``required_roles`` mapping.

    ``required_roles`` maps an HTTP method to the roles allowed to call it,
    e.g. ``{'POST': ('Admin', 'Manager')}``. Methods that are not listed are
    open to any caller that got past authentication.
    """

    message = 'Access denied. Insufficient permissions.'

    def has_permission(self, request, view):
        roles = getattr(view, 'required_roles', {}).get(request.method)
        if not roles:
            return True
        return getattr(request.user, 'role', None) in roles
