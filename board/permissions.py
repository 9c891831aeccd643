"""
Permission classes for the PIN based admin session.

There are no user accounts: a successful PIN login stores ``isAdmin``
in the signed session cookie and these classes only look at that flag.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

SESSION_FLAG = 'isAdmin'


def is_admin_session(request) -> bool:
    session = getattr(request, 'session', None)
    return bool(session is not None and session.get(SESSION_FLAG))


class IsKioskAdmin(BasePermission):
    """Allow access only to holders of an admin session."""
    message = 'Sesión de administrador requerida'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return is_admin_session(request)


class IsKioskAdminOrReadOnly(BasePermission):
    """Reads are public, writes need the admin session."""
    message = 'Sesión de administrador requerida'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method in SAFE_METHODS or is_admin_session(request)
