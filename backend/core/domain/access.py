"""
core.domain.access — Authorization Gate and role-scoped queryset selectors.

╔══════════════════════════════════════════════════════════════════╗
║  IMPORTANT — Per-app scoping logic does NOT live here.           ║
║  Each app's ``services.py`` owns its own scope-rules mapping.    ║
║  This module provides:                                           ║
║    1) ``require_role``      — the Authorization Gate predicate.  ║
║    2) ``apply_role_scope``  — role-keyed queryset dispatch.      ║
╚══════════════════════════════════════════════════════════════════╝

Architecture overview
---------------------

    ┌──────────────┐    ┌─────────────────────┐    ┌──────────────────┐
    │ DRF view     │───▶│ accounts.permissions│───▶│ core.domain      │
    │ (thin)       │    │ IsCitizen/IsOfficer │    │   .access        │
    └──────┬───────┘    └─────────────────────┘    │ require_role     │
           │                                       └──────────────────┘
           ▼
    ┌──────────────┐    ┌──────────────────┐
    │ App service  │───▶│ apply_role_scope │
    └──────────────┘    └──────────────────┘

The gate works on a *session identity* (``accounts.sessions.SessionIdentity``)
rather than on ambient request state, so it can be exercised without a
request object.  Roles are the closed ``UserRole`` variant; an identity
can only be built from a valid member, so comparing by equality is
exhaustive.

Usage in an app's service layer::

    from core.domain.access import apply_role_scope

    REQUEST_SCOPE_RULES = {
        UserRole.CITIZEN: lambda qs, u: qs.filter(citizen=u),
        UserRole.OFFICER: lambda qs, u: qs.filter(service_id=u.service_id),
        UserRole.ADMIN:   lambda qs, u: qs,
    }

    qs = apply_role_scope(ServiceRequest.objects.all(), user,
                          scope_rules=REQUEST_SCOPE_RULES)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Mapping, Protocol

from django.db.models import QuerySet

from core.domain.exceptions import AuthenticationRequired, PermissionDenied

if TYPE_CHECKING:
    from accounts.models import User, UserRole

# Type alias for a scope filter function.
# Takes (queryset, user) and returns a filtered queryset.
ScopeFilter = Callable[[QuerySet, "User"], QuerySet]

# Role value → filter function.
ScopeRules = Mapping[str, ScopeFilter]


class Identity(Protocol):
    user_id: int
    role: UserRole


def require_role(identity: Identity | None, required_role: UserRole) -> Identity:
    """
    The Authorization Gate.

    Admit the caller only if the session carries a user id AND its role
    equals ``required_role``.  Read-only: session state is never touched.

    Args:
        identity:      Session identity, or ``None`` for anonymous callers.
        required_role: The role the route is reserved for.

    Returns:
        The admitted identity.

    Raises:
        AuthenticationRequired: No session, or the session has expired.
        PermissionDenied:       The session belongs to another role.
    """
    if identity is None or not getattr(identity, "user_id", None):
        raise AuthenticationRequired()
    if identity.role != required_role:
        raise PermissionDenied(
            f"Access denied: this page is reserved for the {required_role.label} role."
        )
    return identity


def require_session(identity: Identity | None) -> Identity:
    """Admit any live session regardless of role."""
    if identity is None or not getattr(identity, "user_id", None):
        raise AuthenticationRequired()
    return identity


def apply_role_scope(
    queryset: QuerySet,
    user: User,
    *,
    scope_rules: ScopeRules,
    default: str = "none",
) -> QuerySet:
    """
    Apply the scope rule registered for the user's role.

    Args:
        queryset:     Base (unfiltered) queryset.
        user:         The authenticated user.
        scope_rules:  Mapping of ``UserRole`` value → filter function.
        default:      What to do when the role has no rule.
                      ``"none"`` (default) → empty queryset.
                      ``"all"`` → return unfiltered.

    Returns:
        The (possibly filtered) queryset.
    """
    role = getattr(user, "role", None)
    filter_fn = scope_rules.get(role) if role else None
    if filter_fn is not None:
        return filter_fn(queryset, user)

    if default == "none":
        return queryset.none()
    return queryset
