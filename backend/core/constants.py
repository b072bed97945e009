"""
Core constants — **Single Source of Truth** for portal-wide settings.

Business values that used to be hard-coded (the payment amount, the
session lifetime, upload limits) live in ``settings.PORTAL`` and are read
through the accessors below.  Services never read ``settings.PORTAL``
directly, which keeps the defaults in one place and lets tests override
them with ``override_settings(PORTAL={...})``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.conf import settings

PORTAL_DEFAULTS: dict[str, Any] = {
    "PAYMENT_AMOUNT": "100.00",
    "SESSION_AGE": 3600,
    "ALLOW_DECISION_BEFORE_PAYMENT": False,
    "MAX_UPLOAD_BYTES": 10 * 1024 * 1024,
}


def portal_setting(name: str) -> Any:
    """Return ``settings.PORTAL[name]``, falling back to ``PORTAL_DEFAULTS``."""
    return getattr(settings, "PORTAL", {}).get(name, PORTAL_DEFAULTS[name])


def payment_amount() -> Decimal:
    """Amount recorded on every payment submission."""
    return Decimal(str(portal_setting("PAYMENT_AMOUNT")))


def session_age() -> int:
    """Session lifetime in seconds, fixed from issuance."""
    return int(portal_setting("SESSION_AGE"))


def allow_decision_before_payment() -> bool:
    """Whether officers may decide requests still awaiting payment."""
    return bool(portal_setting("ALLOW_DECISION_BEFORE_PAYMENT"))


def max_upload_bytes() -> int:
    return int(portal_setting("MAX_UPLOAD_BYTES"))
