"""
core.domain.transactions — Helpers for safe state transitions.

Provides utilities that wrap ``select_for_update`` and the status-guard
check into reusable patterns so that every lifecycle operation follows
the same concurrency-safe approach.

Design goals
------------
* State-transition reads always lock the row first
  (``select_for_update``) so two concurrent decisions on the same
  request serialize on the database.
* Lookups go through a *scoped* queryset when one is supplied, so a row
  outside the caller's scope is indistinguishable from a missing row.
* The helpers are **generic**: they accept any Django model / queryset
  and a field name.

Usage::

    from django.db import transaction
    from core.domain.transactions import lock_for_update, set_status

    with transaction.atomic():
        locked = lock_for_update(scoped_qs, pk)
        previous = set_status(
            locked,
            target_status="under_review",
            allowed_sources={"awaiting_payment"},
        )
"""

from __future__ import annotations

from typing import Any, Iterable, TypeVar

from django.db import models, transaction
from django.db.models import QuerySet

from core.domain.exceptions import InvalidTransition, NotFound

M = TypeVar("M", bound=models.Model)


def lock_for_update(
    source: type[M] | QuerySet[M],
    pk: Any,
    *,
    not_found_message: str | None = None,
) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update(of=("self",)).get(pk=pk)``
    that must be called inside an ``atomic()`` block.  Only the row itself
    is locked; rows joined by the scope (e.g. the request's service) are not.

    Args:
        source:            Model class or an already-scoped queryset.
        pk:                Primary key value.
        not_found_message: Message for the ``NotFound`` raised when the
                           row is absent (or filtered out by the scope).

    Returns:
        The locked model instance.

    Raises:
        NotFound: If no row with that PK is visible through ``source``.
    """
    queryset = source if isinstance(source, QuerySet) else source.objects.all()
    model_class = queryset.model

    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("lock_for_update() must run inside transaction.atomic().")

    try:
        return queryset.select_for_update(of=("self",)).get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(
            not_found_message or f"{model_class.__name__} with pk={pk} does not exist."
        )


def set_status(
    instance: M,
    *,
    target_status: str,
    allowed_sources: Iterable[str] | None = None,
    status_field: str = "status",
    save_fields: Iterable[str] | None = None,
) -> str:
    """
    Move a locked instance to ``target_status`` and persist it.

    Steps:
        1. Read the current value of ``status_field``.
        2. If ``allowed_sources`` is provided, verify the current value
           is among them; raise ``InvalidTransition`` otherwise.
        3. Set ``status_field`` to ``target_status`` and save with
           ``update_fields``.

    Args:
        instance:        The (locked) model instance to transition.
        target_status:   The desired new value.
        allowed_sources: Status values from which the transition is
                         permitted.  ``None`` means any current value
                         is accepted.
        status_field:    Name of the status field.  Defaults to ``"status"``.
        save_fields:     Extra fields to include in ``update_fields``.
                         ``status_field`` and ``updated_at`` are always
                         included.

    Returns:
        The previous status value.

    Raises:
        InvalidTransition: If the current status is not in ``allowed_sources``.
    """
    current = getattr(instance, status_field)

    if allowed_sources is not None:
        allowed = {str(s) for s in allowed_sources}
        if str(current) not in allowed:
            raise InvalidTransition(
                current=str(current),
                target=str(target_status),
                reason=(
                    "allowed source states: "
                    + (", ".join(sorted(allowed)) or "none")
                ),
            )

    setattr(instance, status_field, target_status)

    update_fields = {status_field, "updated_at"}
    if save_fields:
        update_fields.update(save_fields)
    instance.save(update_fields=sorted(update_fields))

    return str(current)
