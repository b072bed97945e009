"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF global handler for those exceptions.
transactions       ``select_for_update`` lookups + guarded status changes.
access             Authorization Gate and role-scoped queryset selectors.
uploads            Purpose-routed upload paths and rollback cleanup.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidTransition
    from core.domain.transactions import lock_for_update, set_status
    from core.domain.access import require_role, apply_role_scope
    from core.domain.uploads import PurposeUploadPath, discard_on_failure
"""
