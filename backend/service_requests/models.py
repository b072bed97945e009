"""
Service-requests app models.

Covers the request lifecycle — a citizen applies for a service (optionally
attaching a supporting document), submits payment proof, and an officer
scoped to the service approves or rejects the request.

    awaiting_payment ──payment──▶ under_review ──approve──▶ approved
                                               └─reject───▶ rejected
"""

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.domain.uploads import PurposeUploadPath
from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class RequestStatus(models.TextChoices):
    """Lifecycle states of a ``ServiceRequest``."""

    AWAITING_PAYMENT = "awaiting_payment", "Awaiting Payment"
    UNDER_REVIEW = "under_review", "Under Review"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class PaymentStatus(models.TextChoices):
    """Verification state of a payment proof."""

    PENDING = "pending", "Pending"


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class ServiceRequest(TimeStampedModel):
    """
    A citizen's application for a government service.

    * Created in ``AWAITING_PAYMENT``.
    * Mutated only by its citizen (payment) or by an officer assigned to
      the request's service (decision).
    * Never deleted: citizens and services referencing requests are
      protected.
    """

    citizen = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="service_requests",
        verbose_name="Citizen",
    )
    service = models.ForeignKey(
        "catalog.Service",
        on_delete=models.PROTECT,
        related_name="requests",
        verbose_name="Service",
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )
    status = models.CharField(
        max_length=20,
        choices=RequestStatus.choices,
        default=RequestStatus.AWAITING_PAYMENT,
        verbose_name="Current Status",
        db_index=True,
    )

    class Meta:
        verbose_name = "Service Request"
        verbose_name_plural = "Service Requests"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["service", "status"], name="sreq_service_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(status__in=RequestStatus.values),
                name="service_request_status_valid",
            ),
        ]

    def __str__(self):
        return f"Request #{self.pk} [{self.status}]"


class Document(models.Model):
    """
    Supporting document uploaded together with a request.

    Immutable once created.  The current flow creates at most one per
    submission, but the schema permits many.
    """

    request = models.ForeignKey(
        ServiceRequest,
        on_delete=models.CASCADE,
        related_name="documents",
        verbose_name="Service Request",
    )
    file = models.FileField(
        upload_to=PurposeUploadPath("document"),
        max_length=255,
        verbose_name="File",
    )
    file_type = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="MIME Type",
    )
    uploaded_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Uploaded At",
    )

    class Meta:
        verbose_name = "Document"
        verbose_name_plural = "Documents"
        ordering = ["uploaded_at", "id"]

    def __str__(self):
        return f"Document #{self.pk} for Request #{self.request_id}"


class Payment(models.Model):
    """
    Proof of payment for a request.

    Exactly one per request; creating it moves the request to
    ``UNDER_REVIEW`` in the same transaction.
    """

    request = models.OneToOneField(
        ServiceRequest,
        on_delete=models.CASCADE,
        related_name="payment",
        verbose_name="Service Request",
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name="Amount",
    )
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        verbose_name="Payment Status",
    )
    proof_file = models.FileField(
        upload_to=PurposeUploadPath("proof_file"),
        max_length=255,
        verbose_name="Proof of Payment",
    )
    paid_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Paid At",
    )

    class Meta:
        verbose_name = "Payment"
        verbose_name_plural = "Payments"

    def __str__(self):
        return f"Payment {self.amount} for Request #{self.request_id}"


class RequestStatusLog(models.Model):
    """
    Immutable audit trail of every status change of a request.

    The creation itself is logged with an empty ``from_status``.
    """

    request = models.ForeignKey(
        ServiceRequest,
        on_delete=models.CASCADE,
        related_name="status_logs",
        verbose_name="Service Request",
    )
    from_status = models.CharField(
        max_length=20,
        blank=True,
        default="",
        choices=RequestStatus.choices,
        verbose_name="Previous Status",
    )
    to_status = models.CharField(
        max_length=20,
        choices=RequestStatus.choices,
        verbose_name="New Status",
    )
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="request_status_changes",
        verbose_name="Changed By",
    )
    message = models.TextField(
        blank=True,
        default="",
        verbose_name="Message",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )

    class Meta:
        verbose_name = "Request Status Log"
        verbose_name_plural = "Request Status Logs"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Request #{self.request_id}: {self.from_status or '∅'} → {self.to_status}"
