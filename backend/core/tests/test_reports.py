"""
Integration tests — portal home and the admin reports page.

Endpoints under test:
    GET /api/                 (core:home)
    GET /api/admin/reports/   (core:admin-reports)
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from accounts.models import UserRole
from service_requests.models import Payment, RequestStatus, ServiceRequest


@pytest.mark.django_db
class TestHome:

    def test_home_links_public_routes(self, api_client):
        resp = api_client.get(reverse("core:home"))

        assert resp.status_code == status.HTTP_200_OK
        assert resp.data["links"]["services"] == reverse("catalog:service-list")
        assert resp.data["links"]["login"] == reverse("accounts:login")


@pytest.mark.django_db
class TestAdminReports:

    def test_empty_store(self, api_client, create_user, login_as):
        login_as(api_client, create_user(role=UserRole.ADMIN))

        resp = api_client.get(reverse("core:admin-reports"))

        assert resp.status_code == status.HTTP_200_OK
        assert resp.data["summary"]["total_users"] == 1
        assert resp.data["summary"]["total_requests"] == 0
        assert resp.data["activity"] == []

    def test_counts_and_activity(self, api_client, create_user, create_department, create_service, login_as):
        department = create_department(name="Transport")
        service = create_service(department=department, name="Licence renewal")
        citizen = create_user(name="Jane Citizen")
        older = ServiceRequest.objects.create(
            citizen=citizen, service=service, status=RequestStatus.UNDER_REVIEW,
        )
        Payment.objects.create(request=older, amount=Decimal("100.00"), proof_file="payments/p.pdf")
        newer = ServiceRequest.objects.create(
            citizen=citizen, service=service, status=RequestStatus.APPROVED,
        )
        ServiceRequest.objects.create(citizen=citizen, service=service)
        login_as(api_client, create_user(role=UserRole.ADMIN))

        resp = api_client.get(reverse("core:admin-reports"))

        assert resp.status_code == status.HTTP_200_OK
        summary = resp.data["summary"]
        assert summary["total_users"] == 2
        assert summary["total_departments"] == 1
        assert summary["total_services"] == 1
        assert summary["total_requests"] == 3
        assert summary["awaiting_payment"] == 1
        assert summary["under_review"] == 1
        assert summary["approved_requests"] == 1
        assert summary["rejected_requests"] == 0
        assert summary["total_payments"] == 1

        activity = resp.data["activity"]
        assert [row["id"] for row in activity][1:] == [newer.pk, older.pk]
        assert activity[0]["user_name"] == "Jane Citizen"
        assert activity[0]["service_name"] == "Licence renewal"
        assert activity[0]["department_name"] == "Transport"
