"""
DRF permission classes wrapping the Authorization Gate.

Every gated view declares exactly one of these::

    class CitizenDashboardView(APIView):
        permission_classes = [IsCitizen]

The classes translate the gate's domain exceptions into DRF's own
``NotAuthenticated`` (401, "session missing/expired") and
``PermissionDenied`` (403, "access denied") so the downstream handler is
never invoked.
"""

from __future__ import annotations

from rest_framework import exceptions
from rest_framework.permissions import BasePermission

from core.domain import access
from core.domain.exceptions import AuthenticationRequired, PermissionDenied

from .models import UserRole


def _identity(request):
    return getattr(request, "auth", None)


class HasPortalRole(BasePermission):
    """Admit only sessions whose role equals ``required_role``."""

    required_role: UserRole | None = None

    def has_permission(self, request, view) -> bool:
        try:
            if self.required_role is None:
                access.require_session(_identity(request))
            else:
                access.require_role(_identity(request), self.required_role)
        except AuthenticationRequired as exc:
            raise exceptions.NotAuthenticated(exc.message)
        except PermissionDenied as exc:
            raise exceptions.PermissionDenied(exc.message)
        return True


class IsPortalUser(HasPortalRole):
    """Any live session, whatever the role."""


class IsCitizen(HasPortalRole):
    required_role = UserRole.CITIZEN


class IsOfficer(HasPortalRole):
    required_role = UserRole.OFFICER


class IsAdmin(HasPortalRole):
    required_role = UserRole.ADMIN
