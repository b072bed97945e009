"""
Service-Requests Service Layer — the Request Lifecycle Engine.

This module is the **single source of truth** for every status change
of a ``ServiceRequest``.  Views validate input with serializers, call one
of the services below, and serialise what comes back.

Architecture
------------
- ``ALLOWED_TRANSITIONS`` / ``allowed_targets`` — the transition table.
- ``REQUEST_SCOPE_RULES``       — role → queryset filter.
- ``RequestQueryService``       — scoped listings, officer detail,
                                  payment form, dashboard counts.
- ``RequestSubmissionService``  — citizen creates a request.
- ``PaymentService``            — citizen submits payment proof.
- ``RequestDecisionService``    — scoped officer approves / rejects.

Every multi-row transition runs in one ``transaction.atomic()`` block
holding a row lock on the request, and writes one ``RequestStatusLog``
row.  Uploaded files are written inside that block and discarded by
``discard_on_failure`` if it rolls back.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import Count, QuerySet

from accounts.models import UserRole
from catalog.models import Service
from core.constants import allow_decision_before_payment, payment_amount
from core.domain.access import apply_role_scope
from core.domain.exceptions import DomainError, InvalidTransition, NotFound
from core.domain.transactions import lock_for_update, set_status
from core.domain.uploads import discard_on_failure

from .models import (
    Document,
    Payment,
    PaymentStatus,
    RequestStatus,
    RequestStatusLog,
    ServiceRequest,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Transition table
# ═══════════════════════════════════════════════════════════════════

#: Maps a source status to the statuses it may move to.  Terminal
#: statuses map to the empty set.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    RequestStatus.AWAITING_PAYMENT: frozenset({RequestStatus.UNDER_REVIEW}),
    RequestStatus.UNDER_REVIEW: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}

TERMINAL_STATES: frozenset[str] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)

#: Officer action → target status.
DECISION_TARGETS: dict[str, str] = {
    "approve": RequestStatus.APPROVED,
    "reject": RequestStatus.REJECTED,
}

#: Status segment of ``officer/requests/<status>/`` → stored status.
OFFICER_STATUS_FILTERS: dict[str, str] = {
    "pending": RequestStatus.UNDER_REVIEW,
    "approved": RequestStatus.APPROVED,
    "rejected": RequestStatus.REJECTED,
}


def decision_source_states() -> frozenset[str]:
    """
    Statuses an officer may approve or reject from.

    ``under_review`` always; ``awaiting_payment`` too when
    ``PORTAL["ALLOW_DECISION_BEFORE_PAYMENT"]`` is enabled.
    """
    sources = {RequestStatus.UNDER_REVIEW}
    if allow_decision_before_payment():
        sources.add(RequestStatus.AWAITING_PAYMENT)
    return frozenset(sources)


def allowed_targets(current: str) -> frozenset[str]:
    """Effective targets reachable from ``current`` under the current settings."""
    targets = set(ALLOWED_TRANSITIONS.get(current, frozenset()))
    if current in decision_source_states():
        targets.update(DECISION_TARGETS.values())
    return frozenset(targets)


def assert_transition(current: str, target: str) -> None:
    """Raise ``InvalidTransition`` unless ``current → target`` is allowed."""
    if target not in allowed_targets(current):
        reason = (
            "request has already been decided"
            if current in TERMINAL_STATES
            else "not permitted by the request lifecycle"
        )
        raise InvalidTransition(current=str(current), target=str(target), reason=reason)


def _record_transition(
    service_request: ServiceRequest,
    *,
    from_status: str,
    actor: Any,
    message: str = "",
) -> RequestStatusLog:
    return RequestStatusLog.objects.create(
        request=service_request,
        from_status=from_status,
        to_status=service_request.status,
        changed_by=actor,
        message=message,
    )


# ═══════════════════════════════════════════════════════════════════
#  Role scoping
# ═══════════════════════════════════════════════════════════════════


def _officer_scope(queryset: QuerySet, user: Any) -> QuerySet:
    if not user.department_id or not user.service_id:
        return queryset.none()
    return queryset.filter(
        service_id=user.service_id,
        service__department_id=user.department_id,
    )


REQUEST_SCOPE_RULES = {
    UserRole.CITIZEN: lambda qs, u: qs.filter(citizen=u),
    UserRole.OFFICER: _officer_scope,
    UserRole.ADMIN: lambda qs, u: qs,
}


# ═══════════════════════════════════════════════════════════════════
#  Request Query Service
# ═══════════════════════════════════════════════════════════════════


class RequestQueryService:
    """Read-side helpers; every lookup goes through the caller's scope."""

    @staticmethod
    def scoped_queryset(user: Any) -> QuerySet[ServiceRequest]:
        return apply_role_scope(
            ServiceRequest.objects.all(),
            user,
            scope_rules=REQUEST_SCOPE_RULES,
        )

    @staticmethod
    def list_for_citizen(citizen: Any) -> QuerySet[ServiceRequest]:
        """The citizen's own requests, newest first."""
        return (
            RequestQueryService.scoped_queryset(citizen)
            .select_related("service", "service__department")
            .order_by("-created_at", "-id")
        )

    @staticmethod
    def list_for_officer(officer: Any, status_filter: str) -> QuerySet[ServiceRequest]:
        """
        Requests in the officer's (department, service) scope with the
        status selected by ``status_filter``.

        Parameters
        ----------
        officer : User
            Officer with a department and service assignment.
        status_filter : str
            One of ``pending``, ``approved``, ``rejected``.

        Raises
        ------
        DomainError
            Unknown ``status_filter``.
        """
        try:
            status = OFFICER_STATUS_FILTERS[status_filter]
        except KeyError:
            raise DomainError(
                f"Unknown status filter '{status_filter}'. "
                f"Use one of: {', '.join(OFFICER_STATUS_FILTERS)}."
            )
        return (
            RequestQueryService.scoped_queryset(officer)
            .filter(status=status)
            .select_related("citizen", "service", "service__department")
            .order_by("-created_at", "-id")
        )

    @staticmethod
    def get_officer_detail(officer: Any, request_id: int) -> ServiceRequest:
        """Request with citizen, service, documents and payment, within scope."""
        queryset = (
            RequestQueryService.scoped_queryset(officer)
            .select_related("citizen", "service", "service__department", "payment")
            .prefetch_related("documents", "status_logs")
        )
        try:
            return queryset.get(pk=request_id)
        except ServiceRequest.DoesNotExist:
            raise NotFound(f"Request #{request_id} not found.")

    @staticmethod
    def get_payment_form(citizen: Any, request_id: int) -> dict[str, Any]:
        """Data for the citizen's payment page of an owned request."""
        try:
            service_request = (
                RequestQueryService.scoped_queryset(citizen)
                .select_related("service")
                .get(pk=request_id)
            )
        except ServiceRequest.DoesNotExist:
            raise NotFound(f"Request #{request_id} not found.")
        return {
            "request_id": service_request.pk,
            "service_name": service_request.service.name,
            "status": service_request.status,
            "amount": payment_amount(),
            "payable": service_request.status == RequestStatus.AWAITING_PAYMENT,
        }

    @staticmethod
    def status_counts(queryset: QuerySet[ServiceRequest]) -> dict[str, int]:
        """``{status: count}`` over ``queryset``, zero-filled for every status."""
        counts = {status: 0 for status in RequestStatus.values}
        rows = queryset.order_by().values("status").annotate(total=Count("id"))
        for row in rows:
            counts[row["status"]] = row["total"]
        return counts


# ═══════════════════════════════════════════════════════════════════
#  Dashboards
# ═══════════════════════════════════════════════════════════════════


class DashboardService:

    @staticmethod
    def citizen_dashboard(citizen: Any) -> dict[str, Any]:
        return {
            "user": citizen,
            "requests": list(RequestQueryService.list_for_citizen(citizen)),
        }

    @staticmethod
    def officer_dashboard(officer: Any) -> dict[str, Any]:
        counts = RequestQueryService.status_counts(
            RequestQueryService.scoped_queryset(officer)
        )
        return {
            "user": officer,
            "department_name": officer.department.name if officer.department_id else "",
            "service_name": officer.service.name if officer.service_id else "",
            "counts": counts,
        }


# ═══════════════════════════════════════════════════════════════════
#  Request Submission Service
# ═══════════════════════════════════════════════════════════════════


class RequestSubmissionService:

    @staticmethod
    def create_request(
        citizen: Any,
        *,
        service_id: int,
        description: str = "",
        document=None,
    ) -> ServiceRequest:
        """
        Create a request in ``awaiting_payment``.

        Parameters
        ----------
        citizen : User
            The applying citizen; becomes ``ServiceRequest.citizen``.
        service_id : int
            Must reference an existing service.
        description : str
            Free text, may be empty.
        document : UploadedFile or None
            Optional supporting document; its content type is stored as
            ``Document.file_type``.

        Returns
        -------
        ServiceRequest

        Raises
        ------
        DomainError
            The service does not exist.
        """
        try:
            service = Service.objects.get(pk=service_id)
        except Service.DoesNotExist:
            raise DomainError("The selected service does not exist.")

        with discard_on_failure() as track, transaction.atomic():
            service_request = ServiceRequest.objects.create(
                citizen=citizen,
                service=service,
                description=description or "",
                status=RequestStatus.AWAITING_PAYMENT,
            )
            if document is not None:
                attachment = Document(
                    request=service_request,
                    file_type=getattr(document, "content_type", "") or "",
                )
                attachment.file.save(document.name, document, save=False)
                track(attachment.file)
                attachment.save()
            _record_transition(
                service_request,
                from_status="",
                actor=citizen,
                message="Request submitted.",
            )

        logger.info(
            "Citizen #%s created request #%s for service #%s",
            citizen.pk, service_request.pk, service.pk,
        )
        return service_request


# ═══════════════════════════════════════════════════════════════════
#  Payment Service
# ═══════════════════════════════════════════════════════════════════


class PaymentService:

    @staticmethod
    def submit_payment(citizen: Any, request_id: int, proof_file) -> Payment:
        """
        Record payment proof and move the request to ``under_review``.

        The request row is locked for the whole operation, so two
        concurrent submissions cannot both see ``awaiting_payment``.

        Raises
        ------
        DomainError
            No proof file supplied.
        NotFound
            The request does not exist or belongs to another citizen.
        InvalidTransition
            The request is no longer awaiting payment.
        """
        if proof_file is None:
            raise DomainError("A proof of payment file is required.")

        owned = ServiceRequest.objects.filter(citizen=citizen)

        with discard_on_failure() as track, transaction.atomic():
            service_request = lock_for_update(
                owned, request_id, not_found_message=f"Request #{request_id} not found.",
            )
            assert_transition(service_request.status, RequestStatus.UNDER_REVIEW)

            payment = Payment(
                request=service_request,
                amount=payment_amount(),
                status=PaymentStatus.PENDING,
            )
            payment.proof_file.save(proof_file.name, proof_file, save=False)
            track(payment.proof_file)
            payment.save()

            previous = set_status(
                service_request,
                target_status=RequestStatus.UNDER_REVIEW,
                allowed_sources={RequestStatus.AWAITING_PAYMENT},
            )
            _record_transition(
                service_request,
                from_status=previous,
                actor=citizen,
                message="Payment proof submitted.",
            )

        logger.info(
            "Citizen #%s paid %s for request #%s", citizen.pk, payment.amount, request_id,
        )
        return payment


# ═══════════════════════════════════════════════════════════════════
#  Request Decision Service
# ═══════════════════════════════════════════════════════════════════


class RequestDecisionService:

    @staticmethod
    def decide(officer: Any, request_id: int, outcome: str, message: str = "") -> ServiceRequest:
        """
        Approve or reject a request in the officer's scope.

        Parameters
        ----------
        officer : User
            Officer whose (department, service) must match the request's
            service.
        request_id : int
        outcome : str
            ``"approve"`` or ``"reject"``.
        message : str
            Optional note stored on the status log.

        Returns
        -------
        ServiceRequest
            The request in its final state.  Repeating the decision the
            request already carries returns it unchanged.

        Raises
        ------
        DomainError
            Unknown ``outcome``.
        NotFound
            The request does not exist or is outside the officer's scope.
        InvalidTransition
            The request is in a status the outcome cannot be applied from.
        """
        try:
            target = DECISION_TARGETS[outcome]
        except KeyError:
            raise DomainError(
                f"Unknown action '{outcome}'. Use one of: {', '.join(DECISION_TARGETS)}."
            )

        scoped = RequestQueryService.scoped_queryset(officer)

        with transaction.atomic():
            service_request = lock_for_update(
                scoped, request_id, not_found_message=f"Request #{request_id} not found.",
            )

            if service_request.status == target:
                logger.info(
                    "Officer #%s repeated %s on request #%s; nothing to do",
                    officer.pk, outcome, request_id,
                )
                return service_request

            assert_transition(service_request.status, target)
            previous = set_status(
                service_request,
                target_status=target,
                allowed_sources=decision_source_states(),
            )
            _record_transition(
                service_request,
                from_status=previous,
                actor=officer,
                message=message,
            )

        logger.info(
            "Officer #%s moved request #%s from %s to %s",
            officer.pk, request_id, previous, target,
        )
        return service_request
