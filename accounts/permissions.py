"""
DRF permission classes backed by the role permission table.
"""

from rest_framework import permissions

from .services import has_server_permission


class HasAppPermission(permissions.BasePermission):
    """
    Checks the permission named by the view's ``required_permission``.

    ``required_permission`` is either a codename or a mapping of HTTP method
    to codename; methods missing from the mapping fall back to the ``'*'``
    key, or to plain authentication when that is absent too.
    """
    message = 'You do not have permission to perform this action'

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False

        required = getattr(view, 'required_permission', None)
        if isinstance(required, dict):
            required = required.get(request.method, required.get('*'))
        if not required:
            return True

        return has_server_permission(request.user, required)


class IsAdminRole(permissions.BasePermission):
    """Only users holding the ``admin`` role."""
    message = 'Admin access required'

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == 'admin'
        )
