"""
Integration tests — citizen and officer request endpoints.

Covers application, payment, officer listings / detail / decisions, the
apply redirect, and that a failed apply or payment leaves neither a row nor a
stored file behind.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status

from accounts.models import UserRole
from service_requests.models import Payment, RequestStatus, ServiceRequest


@pytest.fixture()
def scoped_officer(create_user, create_service):
    service = create_service(name="Passport renewal")
    officer = create_user(
        role=UserRole.OFFICER, department=service.department, service=service,
    )
    return officer, service


def _stored_files(root, subdirectory):
    directory = root / subdirectory
    return list(directory.iterdir()) if directory.exists() else []


# ════════════════════════════════════════════════════════════════════
#  Citizen: apply
# ════════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestApply:

    def test_redirect_to_apply_form(self, api_client, create_user, create_service, login_as):
        service = create_service()
        login_as(api_client, create_user())

        resp = api_client.get(
            reverse("service_requests:service-apply-redirect", kwargs={"service_id": service.pk}),
        )

        assert resp.status_code == status.HTTP_302_FOUND
        assert resp["Location"] == (
            f"{reverse('service_requests:citizen-apply')}?service_id={service.pk}"
        )

    def test_form_preselects_service(self, api_client, create_user, create_service, login_as):
        service = create_service()
        login_as(api_client, create_user())

        resp = api_client.get(
            reverse("service_requests:citizen-apply"), {"service_id": service.pk},
        )

        assert resp.status_code == status.HTTP_200_OK
        assert resp.data["selected_service_id"] == str(service.pk)
        assert [s["id"] for s in resp.data["services"]] == [service.pk]

    def test_apply_with_document(
        self, api_client, create_user, create_service, login_as, upload_file, isolated_media_root,
    ):
        citizen = create_user()
        service = create_service()
        login_as(api_client, citizen)

        resp = api_client.post(
            reverse("service_requests:citizen-apply"),
            {
                "service_id": service.pk,
                "description": "Lost my passport",
                "document": upload_file("loss_report.pdf"),
            },
            format="multipart",
        )

        assert resp.status_code == status.HTTP_201_CREATED, resp.data
        assert resp.data["status"] == RequestStatus.AWAITING_PAYMENT
        service_request = ServiceRequest.objects.get(pk=resp.data["id"])
        assert service_request.citizen == citizen
        assert len(_stored_files(isolated_media_root, "service_docs")) == 1

    def test_failed_apply_leaves_no_row_and_no_document(
        self, api_client, create_user, create_service, login_as, upload_file, isolated_media_root,
    ):
        service = create_service()
        login_as(api_client, create_user())

        with patch(
            "service_requests.services._record_transition",
            side_effect=DatabaseError("disk full"),
        ):
            resp = api_client.post(
                reverse("service_requests:citizen-apply"),
                {"service_id": service.pk, "document": upload_file("id_card.pdf")},
                format="multipart",
            )

        assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert not ServiceRequest.objects.exists()
        assert _stored_files(isolated_media_root, "service_docs") == []

    def test_apply_for_unknown_service_is_400(self, api_client, create_user, login_as):
        login_as(api_client, create_user())

        resp = api_client.post(
            reverse("service_requests:citizen-apply"), {"service_id": 999999}, format="multipart",
        )

        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert not ServiceRequest.objects.exists()

    def test_my_requests_lists_only_own(self, api_client, create_user, create_service, login_as):
        citizen, other = create_user(), create_user()
        service = create_service()
        mine = ServiceRequest.objects.create(citizen=citizen, service=service)
        ServiceRequest.objects.create(citizen=other, service=service)
        login_as(api_client, citizen)

        resp = api_client.get(reverse("service_requests:my-requests"))

        assert resp.status_code == status.HTTP_200_OK
        assert [r["id"] for r in resp.data] == [mine.pk]


# ════════════════════════════════════════════════════════════════════
#  Citizen: payment
# ════════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestPay:

    def test_payment_form_shows_amount(self, api_client, create_user, create_service, login_as):
        citizen = create_user()
        service_request = ServiceRequest.objects.create(citizen=citizen, service=create_service())
        login_as(api_client, citizen)

        resp = api_client.get(
            reverse("service_requests:citizen-pay", kwargs={"request_id": service_request.pk}),
        )

        assert resp.status_code == status.HTTP_200_OK
        assert resp.data["amount"] == "100.00"
        assert resp.data["payable"] is True

    def test_pay_then_pay_again(self, api_client, create_user, create_service, login_as, upload_file):
        citizen = create_user()
        service_request = ServiceRequest.objects.create(citizen=citizen, service=create_service())
        login_as(api_client, citizen)
        url = reverse("service_requests:citizen-pay", kwargs={"request_id": service_request.pk})

        first = api_client.post(url, {"proof_file": upload_file("receipt.pdf")}, format="multipart")
        second = api_client.post(url, {"proof_file": upload_file("again.pdf")}, format="multipart")

        assert first.status_code == status.HTTP_201_CREATED, first.data
        assert second.status_code == status.HTTP_409_CONFLICT
        assert Payment.objects.filter(request=service_request).count() == 1
        service_request.refresh_from_db()
        assert service_request.status == RequestStatus.UNDER_REVIEW

    def test_paying_for_another_citizen_is_404(
        self, api_client, create_user, create_service, login_as, upload_file,
    ):
        service_request = ServiceRequest.objects.create(
            citizen=create_user(), service=create_service(),
        )
        login_as(api_client, create_user())

        resp = api_client.post(
            reverse("service_requests:citizen-pay", kwargs={"request_id": service_request.pk}),
            {"proof_file": upload_file()},
            format="multipart",
        )

        assert resp.status_code == status.HTTP_404_NOT_FOUND
        assert not Payment.objects.exists()

    def test_failed_payment_leaves_no_row_and_no_file(
        self, api_client, create_user, create_service, login_as, upload_file, isolated_media_root,
    ):
        citizen = create_user()
        service_request = ServiceRequest.objects.create(citizen=citizen, service=create_service())
        login_as(api_client, citizen)

        with patch(
            "service_requests.services._record_transition",
            side_effect=DatabaseError("disk full"),
        ):
            resp = api_client.post(
                reverse("service_requests:citizen-pay", kwargs={"request_id": service_request.pk}),
                {"proof_file": upload_file("receipt.pdf")},
                format="multipart",
            )

        assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "disk full" not in resp.data["detail"]
        assert not Payment.objects.exists()
        service_request.refresh_from_db()
        assert service_request.status == RequestStatus.AWAITING_PAYMENT
        assert _stored_files(isolated_media_root, "payments") == []


# ════════════════════════════════════════════════════════════════════
#  Officer
# ════════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestOfficer:

    def test_lists_are_filtered_by_status_and_scope(
        self, api_client, create_user, create_service, login_as, scoped_officer,
    ):
        officer, service = scoped_officer
        citizen = create_user()
        pending = ServiceRequest.objects.create(
            citizen=citizen, service=service, status=RequestStatus.UNDER_REVIEW,
        )
        approved = ServiceRequest.objects.create(
            citizen=citizen, service=service, status=RequestStatus.APPROVED,
        )
        ServiceRequest.objects.create(
            citizen=citizen, service=create_service(), status=RequestStatus.UNDER_REVIEW,
        )
        login_as(api_client, officer)

        def ids(status_filter):
            resp = api_client.get(
                reverse(
                    "service_requests:officer-request-list",
                    kwargs={"status_filter": status_filter},
                ),
            )
            assert resp.status_code == status.HTTP_200_OK
            return [r["id"] for r in resp.data]

        assert ids("pending") == [pending.pk]
        assert ids("approved") == [approved.pk]
        assert ids("rejected") == []

    def test_unknown_status_filter_is_400(self, api_client, login_as, scoped_officer):
        login_as(api_client, scoped_officer[0])

        resp = api_client.get(
            reverse("service_requests:officer-request-list", kwargs={"status_filter": "lost"}),
        )

        assert resp.status_code == status.HTTP_400_BAD_REQUEST

    def test_dashboard_counts(self, api_client, create_user, login_as, scoped_officer):
        officer, service = scoped_officer
        ServiceRequest.objects.create(
            citizen=create_user(), service=service, status=RequestStatus.UNDER_REVIEW,
        )
        login_as(api_client, officer)

        resp = api_client.get(reverse("service_requests:officer-dashboard"))

        assert resp.status_code == status.HTTP_200_OK
        assert resp.data["service_name"] == "Passport renewal"
        assert resp.data["counts"][RequestStatus.UNDER_REVIEW] == 1
        assert resp.data["counts"][RequestStatus.APPROVED] == 0

    def test_detail_includes_documents_and_payment(
        self, api_client, create_user, login_as, scoped_officer, upload_file,
    ):
        officer, service = scoped_officer
        citizen = create_user()
        login_as(api_client, citizen)
        created = api_client.post(
            reverse("service_requests:citizen-apply"),
            {"service_id": service.pk, "document": upload_file("id.pdf")},
            format="multipart",
        )
        request_id = created.data["id"]
        api_client.post(
            reverse("service_requests:citizen-pay", kwargs={"request_id": request_id}),
            {"proof_file": upload_file("receipt.pdf")},
            format="multipart",
        )
        api_client.post(reverse("accounts:logout"))
        login_as(api_client, officer)

        resp = api_client.get(
            reverse("service_requests:officer-request-detail", kwargs={"request_id": request_id}),
        )

        assert resp.status_code == status.HTTP_200_OK, resp.data
        assert resp.data["citizen"]["id"] == citizen.pk
        assert len(resp.data["documents"]) == 1
        assert resp.data["payment"]["amount"] == "100.00"
        assert resp.data["status"] == RequestStatus.UNDER_REVIEW

    def test_detail_outside_scope_is_404(
        self, api_client, create_user, create_service, login_as, scoped_officer,
    ):
        other = ServiceRequest.objects.create(citizen=create_user(), service=create_service())
        login_as(api_client, scoped_officer[0])

        resp = api_client.get(
            reverse("service_requests:officer-request-detail", kwargs={"request_id": other.pk}),
        )

        assert resp.status_code == status.HTTP_404_NOT_FOUND

    def test_approve_route(self, api_client, create_user, login_as, scoped_officer):
        officer, service = scoped_officer
        service_request = ServiceRequest.objects.create(
            citizen=create_user(), service=service, status=RequestStatus.UNDER_REVIEW,
        )
        login_as(api_client, officer)

        resp = api_client.post(
            reverse(
                "service_requests:officer-request-approve",
                kwargs={"request_id": service_request.pk},
            ),
            {"message": "All documents in order"},
            format="json",
        )

        assert resp.status_code == status.HTTP_200_OK, resp.data
        assert resp.data["status"] == RequestStatus.APPROVED

    def test_generic_action_route_and_terminal_conflict(
        self, api_client, create_user, login_as, scoped_officer,
    ):
        officer, service = scoped_officer
        service_request = ServiceRequest.objects.create(
            citizen=create_user(), service=service, status=RequestStatus.UNDER_REVIEW,
        )
        login_as(api_client, officer)

        def act(action):
            return api_client.post(
                reverse(
                    "service_requests:officer-request-action",
                    kwargs={"request_id": service_request.pk, "action": action},
                ),
            )

        assert act("reject").status_code == status.HTTP_200_OK
        assert act("reject").status_code == status.HTTP_200_OK
        assert act("approve").status_code == status.HTTP_409_CONFLICT
        assert act("escalate").status_code == status.HTTP_400_BAD_REQUEST

        service_request.refresh_from_db()
        assert service_request.status == RequestStatus.REJECTED

    def test_decision_outside_scope_is_404(
        self, api_client, create_user, create_service, login_as, scoped_officer,
    ):
        other = ServiceRequest.objects.create(
            citizen=create_user(), service=create_service(), status=RequestStatus.UNDER_REVIEW,
        )
        login_as(api_client, scoped_officer[0])

        resp = api_client.post(
            reverse("service_requests:officer-request-reject", kwargs={"request_id": other.pk}),
        )

        assert resp.status_code == status.HTTP_404_NOT_FOUND
        other.refresh_from_db()
        assert other.status == RequestStatus.UNDER_REVIEW
