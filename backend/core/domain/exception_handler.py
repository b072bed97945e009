"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps domain exceptions from ``core.domain.exceptions`` to proper
DRF ``Response`` objects so that views don't need per-endpoint
try/except boilerplate.

Registered in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }

Database and filesystem failures that escape a view are logged with their
traceback and answered with a generic 500 so that store internals never
reach the client.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import (
    AuthenticationRequired,
    Conflict,
    DomainError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    StorageError,
)

logger = logging.getLogger(__name__)

# Domain exception → HTTP status code
_STATUS_MAP: dict[type, int] = {
    AuthenticationRequired: 401,
    PermissionDenied:       403,
    NotFound:               404,
    InvalidTransition:      409,
    Conflict:               409,
    StorageError:           500,
    DomainError:            400,  # catch-all base class last
}


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it returns ``None``
    (meaning DRF doesn't recognise the exception), we check whether
    it's one of our domain exceptions and return an appropriate response.
    """
    # Let DRF handle its own exceptions (ValidationError, AuthN, etc.)
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view", "unknown")

    if isinstance(exc, (DatabaseError, OSError)):
        logger.exception("Storage failure in %s", view)
        exc = StorageError()

    # Most specific first
    for exc_class, status_code in _STATUS_MAP.items():
        if isinstance(exc, exc_class):
            if status_code >= 500:
                logger.error("Domain exception [%s] in %s: %s", exc_class.__name__, view, exc)
            else:
                logger.warning(
                    "Domain exception [%s] in %s: %s",
                    exc_class.__name__,
                    view,
                    exc,
                )
            return Response(
                {"detail": str(exc)},
                status=status_code,
            )

    # Not a domain exception; let it propagate
    return None
