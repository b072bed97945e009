"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside the portal's
service layers.  They are deliberately **not** DRF exceptions so that the
domain layer stays framework-agnostic.  The global DRF exception handler
(``core.domain.exception_handler``) maps them to HTTP responses.

Mapping cheatsheet
------------------
┌─────────────────────────┬──────────────────────────────────┬──────┐
│ Domain Exception        │ Meaning                          │ Code │
├─────────────────────────┼──────────────────────────────────┼──────┤
│ DomainError             │ Validation / business rule       │ 400  │
│ AuthenticationRequired  │ No session, expired, bad login   │ 401  │
│ PermissionDenied        │ Wrong role for the route         │ 403  │
│ NotFound                │ Absent OR outside caller's scope │ 404  │
│ Conflict                │ Duplicate / state conflict       │ 409  │
│ InvalidTransition       │ Illegal lifecycle transition     │ 409  │
│ StorageError            │ Database / filesystem failure    │ 500  │
└─────────────────────────┴──────────────────────────────────┴──────┘

``NotFound`` is raised for requests that exist but sit outside an
officer's (department, service) scope, so the response never reveals
whether a request belongs to another department.

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransition(current=current, target=target)
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Caught at the view boundary and converted to a 400 Bad Request.
    """

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class AuthenticationRequired(DomainError):
    """
    The caller has no live session, or presented invalid credentials.

    Maps to HTTP 401.
    """

    def __init__(self, message: str = "Session missing or expired. Please log in.") -> None:
        super().__init__(message)


class PermissionDenied(DomainError):
    """
    The session's role is not the one required by the route.

    Maps to HTTP 403.
    """

    def __init__(self, message: str = "Access denied.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist (or is not visible to the
    requesting user given their role scope).

    Maps to HTTP 404.
    """

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: duplicate e-mail on registration, deleting a
    department that still owns services.  Maps to HTTP 409.
    """

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A lifecycle transition that is not allowed from the current status.

    Inherits from ``Conflict`` because an invalid transition IS a conflict
    with the resource's current state.  Maps to HTTP 409.

    Example::

        raise InvalidTransition(
            current="approved",
            target="rejected",
            reason="Request has already been decided.",
        )
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            if reason:
                parts.append(f"({reason})")
            message = " ".join(parts) + "."
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class StorageError(DomainError):
    """
    The relational store or the upload storage failed.

    The message shown to clients is generic; details go to the log.
    Maps to HTTP 500.
    """

    def __init__(self, message: str = "A storage error occurred. Please try again later.") -> None:
        super().__init__(message)
