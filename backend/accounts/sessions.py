"""
Session Store abstraction.

The portal keeps exactly two values per session: the user id and the
role.  ``PortalSession`` wraps any Django ``SessionBase`` (database-backed
by default, see ``SESSION_ENGINE``) behind a small get / set / destroy
interface, and ``PortalSessionAuthentication`` hands the resulting
``SessionIdentity`` to DRF so that views and the Authorization Gate
receive it explicitly through ``request.auth``.

Expiry is fixed from issuance: ``establish`` sets the max-age once and
nothing refreshes it afterwards (``SESSION_SAVE_EVERY_REQUEST = False``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.contrib.sessions.backends.base import SessionBase
from rest_framework.authentication import SessionAuthentication

from core.constants import session_age

from .models import UserRole

logger = logging.getLogger(__name__)

User = get_user_model()

SESSION_USER_KEY = "user_id"
SESSION_ROLE_KEY = "role"


@dataclass(frozen=True)
class SessionIdentity:
    """What the Authorization Gate knows about the caller."""

    user_id: int
    role: UserRole


class PortalSession:
    """
    Explicit session-store handle.

    Usage::

        session = PortalSession(request.session)
        session.establish(user)
        identity = session.identity()   # SessionIdentity | None
        session.destroy()
    """

    def __init__(self, store: SessionBase) -> None:
        self.store = store

    def establish(self, user) -> SessionIdentity:
        """
        Start a fresh session for ``user``.

        The session key is rotated first so a pre-login session id can
        never be promoted to an authenticated one.
        """
        self.store.cycle_key()
        self.store[SESSION_USER_KEY] = user.pk
        self.store[SESSION_ROLE_KEY] = str(user.role)
        self.store.set_expiry(session_age())
        return SessionIdentity(user_id=user.pk, role=UserRole(user.role))

    def identity(self) -> SessionIdentity | None:
        """Return the stored identity, or ``None`` for anonymous sessions."""
        user_id = self.store.get(SESSION_USER_KEY)
        role = self.store.get(SESSION_ROLE_KEY)
        if not user_id or role not in UserRole.values:
            return None
        return SessionIdentity(user_id=int(user_id), role=UserRole(role))

    def destroy(self) -> None:
        """Delete the session data and its key."""
        self.store.flush()


class PortalSessionAuthentication(SessionAuthentication):
    """
    DRF authentication backed by ``PortalSession``.

    ``request.user`` becomes the (active) user and ``request.auth`` the
    ``SessionIdentity``.  CSRF is enforced exactly like DRF's own
    ``SessionAuthentication``.
    """

    def authenticate(self, request):
        identity = PortalSession(request._request.session).identity()
        if identity is None:
            return None

        user = (
            User.objects.select_related("department", "service")
            .filter(pk=identity.user_id, is_active=True)
            .first()
        )
        if user is None:
            logger.info("Session for missing/inactive user %s ignored", identity.user_id)
            return None
        if user.role != identity.role:
            # Role changed since login; the session no longer describes the user.
            logger.info("Session for user %s carries stale role %s", user.pk, identity.role)
            return None

        self.enforce_csrf(request)
        return (user, identity)

    def authenticate_header(self, request):
        # A non-empty header keeps DRF from downgrading 401 to 403.
        return 'Session realm="portal"'
