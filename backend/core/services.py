"""
Core app services — **Service Layer**.

Cross-app, read-only aggregation for the admin reports page and the
portal home.  Views delegate to the classes defined here.

╔══════════════════════════════════════════════════════════════════════╗
║  CROSS-APP IMPORT RULE                                             ║
║                                                                    ║
║  The core app is the ONLY app allowed to query models from every   ║
║  other app.  To keep ``core`` importable from those apps without   ║
║  cycles, models are resolved lazily inside methods:                ║
║                                                                    ║
║       from django.apps import apps                                 ║
║       ServiceRequest = apps.get_model("service_requests",          ║
║                                       "ServiceRequest")            ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

from typing import Any

from django.apps import apps
from django.db.models import Count, F
from django.urls import reverse


class ReportAggregationService:
    """
    Store-wide summary counts and the request activity log.

    Everything is computed at call time; nothing is cached, so the
    report always reflects the committed state of the store.
    """

    def get_report(self) -> dict[str, Any]:
        return {
            "summary": self.get_summary(),
            "activity": self.get_activity_log(),
        }

    def get_summary(self) -> dict[str, int]:
        User = apps.get_model("accounts", "User")
        Department = apps.get_model("catalog", "Department")
        Service = apps.get_model("catalog", "Service")
        ServiceRequest = apps.get_model("service_requests", "ServiceRequest")
        Payment = apps.get_model("service_requests", "Payment")
        from service_requests.models import RequestStatus

        by_status = {status: 0 for status in RequestStatus.values}
        rows = ServiceRequest.objects.order_by().values("status").annotate(total=Count("id"))
        for row in rows:
            by_status[row["status"]] = row["total"]

        return {
            "total_users": User.objects.count(),
            "total_departments": Department.objects.count(),
            "total_services": Service.objects.count(),
            "total_requests": sum(by_status.values()),
            "awaiting_payment": by_status[RequestStatus.AWAITING_PAYMENT],
            "under_review": by_status[RequestStatus.UNDER_REVIEW],
            "approved_requests": by_status[RequestStatus.APPROVED],
            "rejected_requests": by_status[RequestStatus.REJECTED],
            "total_payments": Payment.objects.count(),
        }

    def get_activity_log(self) -> list[dict[str, Any]]:
        """One row per request, newest first."""
        ServiceRequest = apps.get_model("service_requests", "ServiceRequest")
        return list(
            ServiceRequest.objects.order_by("-created_at", "-id").values(
                "id",
                "status",
                "created_at",
                user_name=F("citizen__name"),
                service_name=F("service__name"),
                department_name=F("service__department__name"),
            )
        )


class PortalHomeService:
    """Static entry data for ``GET /api/``."""

    @staticmethod
    def get_home() -> dict[str, Any]:
        return {
            "name": "Citizen e-Government Portal",
            "links": {
                "services": reverse("catalog:service-list"),
                "register": reverse("accounts:register"),
                "login": reverse("accounts:login"),
                "docs": reverse("swagger-ui"),
            },
        }
