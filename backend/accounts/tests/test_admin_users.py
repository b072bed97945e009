"""
Integration tests — admin user management and profile pictures.

Endpoints under test:
    GET        /api/admin/users/                (accounts:admin-user-list)
    GET/POST   /api/admin/users/add/            (accounts:admin-user-add)
    GET/POST   /api/admin/users/edit/<id>/      (accounts:admin-user-edit)
    POST/DEL   /api/admin/users/delete/<id>/    (accounts:admin-user-delete)
    POST       /api/upload_profile/             (accounts:upload-profile)
"""

from __future__ import annotations

import os

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APIClient

from accounts.models import UserRole
from service_requests.models import RequestStatus, ServiceRequest

User = get_user_model()


@pytest.fixture()
def admin_client(api_client, create_user, login_as):
    admin = create_user(role=UserRole.ADMIN, name="Root Admin")
    login_as(api_client, admin)
    api_client.admin_user = admin
    return api_client


@pytest.mark.django_db
class TestAdminUserCreate:

    def test_form_lists_departments_and_roles(self, admin_client, create_department):
        create_department(name="Health")

        resp = admin_client.get(reverse("accounts:admin-user-add"))

        assert resp.status_code == 200
        assert [d["name"] for d in resp.data["departments"]] == ["Health"]
        assert set(resp.data["roles"]) == {"citizen", "officer", "admin"}

    def test_create_officer_with_matching_assignment(self, admin_client, create_service):
        service = create_service()

        resp = admin_client.post(
            reverse("accounts:admin-user-add"),
            {
                "name": "New Officer",
                "email": "officer@example.com",
                "password": "officerpass",
                "role": "officer",
                "department": service.department_id,
                "service": service.pk,
            },
            format="json",
        )

        assert resp.status_code == 201, resp.data
        officer = User.objects.get(email="officer@example.com")
        assert officer.role == UserRole.OFFICER
        assert officer.department_id == service.department_id
        assert officer.service_id == service.pk

    def test_officer_with_service_from_other_department_is_rejected(
        self, admin_client, create_department, create_service,
    ):
        other_department = create_department(name="Other")
        service = create_service()

        resp = admin_client.post(
            reverse("accounts:admin-user-add"),
            {
                "name": "Bad Officer",
                "email": "bad@example.com",
                "password": "officerpass",
                "role": "officer",
                "department": other_department.pk,
                "service": service.pk,
            },
            format="json",
        )

        assert resp.status_code == 400
        assert not User.objects.filter(email="bad@example.com").exists()

    def test_officer_without_service_is_rejected(self, admin_client, create_department):
        resp = admin_client.post(
            reverse("accounts:admin-user-add"),
            {
                "name": "Half Officer",
                "email": "half@example.com",
                "password": "officerpass",
                "role": "officer",
                "department": create_department().pk,
            },
            format="json",
        )

        assert resp.status_code == 400

    def test_non_officer_assignment_is_cleared(self, admin_client, create_service):
        service = create_service()

        resp = admin_client.post(
            reverse("accounts:admin-user-add"),
            {
                "name": "Plain Citizen",
                "email": "plain@example.com",
                "password": "citizenpass",
                "role": "citizen",
                "department": service.department_id,
                "service": service.pk,
            },
            format="json",
        )

        assert resp.status_code == 201, resp.data
        user = User.objects.get(email="plain@example.com")
        assert user.department_id is None
        assert user.service_id is None

    def test_duplicate_email_is_conflict(self, admin_client, create_user):
        create_user(email="taken@example.com")

        resp = admin_client.post(
            reverse("accounts:admin-user-add"),
            {"name": "Dup", "email": "taken@example.com", "password": "whatever1"},
            format="json",
        )

        assert resp.status_code == 409


@pytest.mark.django_db
class TestAdminUserEditAndDelete:

    def test_list_filters_by_role(self, admin_client, create_user):
        create_user(name="Citizen One")

        resp = admin_client.get(reverse("accounts:admin-user-list"), {"role": "citizen"})

        assert resp.status_code == 200
        assert [u["name"] for u in resp.data] == ["Citizen One"]

    def test_edit_keeps_password_when_blank(self, admin_client, create_user):
        user = create_user(name="Before")
        url = reverse("accounts:admin-user-edit", kwargs={"user_id": user.pk})

        resp = admin_client.post(url, {"name": "After", "password": ""}, format="json")

        assert resp.status_code == 200, resp.data
        user.refresh_from_db()
        assert user.name == "After"
        assert user.check_password("TestPass123!")

    def test_edit_changes_password_when_given(self, admin_client, create_user):
        user = create_user()
        url = reverse("accounts:admin-user-edit", kwargs={"user_id": user.pk})

        resp = admin_client.post(url, {"password": "brandnew1"}, format="json")

        assert resp.status_code == 200, resp.data
        user.refresh_from_db()
        assert user.check_password("brandnew1")

    def test_demoting_officer_clears_assignment(self, admin_client, create_user, create_service):
        service = create_service()
        officer = create_user(
            role=UserRole.OFFICER, department=service.department, service=service,
        )
        url = reverse("accounts:admin-user-edit", kwargs={"user_id": officer.pk})

        resp = admin_client.post(url, {"role": "citizen"}, format="json")

        assert resp.status_code == 200, resp.data
        officer.refresh_from_db()
        assert officer.role == UserRole.CITIZEN
        assert officer.department_id is None and officer.service_id is None

    def test_demoted_officer_session_cannot_decide_own_request(
        self, admin_client, create_user, create_service, login_as,
    ):
        citizen = create_user()
        own_request = ServiceRequest.objects.create(
            citizen=citizen, service=create_service(), status=RequestStatus.UNDER_REVIEW,
        )
        unrelated = create_service()
        citizen.role = UserRole.OFFICER
        citizen.department = unrelated.department
        citizen.service = unrelated
        citizen.save()
        officer_client = login_as(APIClient(), citizen)

        resp = admin_client.post(
            reverse("accounts:admin-user-edit", kwargs={"user_id": citizen.pk}),
            {"role": "citizen"},
            format="json",
        )
        assert resp.status_code == 200, resp.data

        resp = officer_client.post(
            reverse(
                "service_requests:officer-request-approve",
                kwargs={"request_id": own_request.pk},
            ),
        )

        assert resp.status_code == 401
        own_request.refresh_from_db()
        assert own_request.status == RequestStatus.UNDER_REVIEW

    def test_edit_unknown_user_is_404(self, admin_client):
        url = reverse("accounts:admin-user-edit", kwargs={"user_id": 999999})
        assert admin_client.get(url).status_code == 404

    def test_delete_user(self, admin_client, create_user):
        user = create_user()
        url = reverse("accounts:admin-user-delete", kwargs={"user_id": user.pk})

        resp = admin_client.delete(url)

        assert resp.status_code == 204
        assert not User.objects.filter(pk=user.pk).exists()

    def test_admin_cannot_delete_self(self, admin_client):
        url = reverse(
            "accounts:admin-user-delete", kwargs={"user_id": admin_client.admin_user.pk},
        )

        resp = admin_client.post(url)

        assert resp.status_code == 400
        assert User.objects.filter(pk=admin_client.admin_user.pk).exists()

    def test_citizen_with_requests_cannot_be_deleted(
        self, admin_client, create_user, create_service,
    ):
        citizen = create_user()
        ServiceRequest.objects.create(citizen=citizen, service=create_service())
        url = reverse("accounts:admin-user-delete", kwargs={"user_id": citizen.pk})

        resp = admin_client.post(url)

        assert resp.status_code == 409
        assert User.objects.filter(pk=citizen.pk).exists()


@pytest.mark.django_db
class TestProfilePicture:

    def test_upload_stores_file_under_profile_pics(
        self, api_client, create_user, login_as, png_file, isolated_media_root,
    ):
        user = create_user()
        login_as(api_client, user)

        resp = api_client.post(
            reverse("accounts:upload-profile"),
            {"profile_pic": png_file()},
            format="multipart",
        )

        assert resp.status_code == 200, resp.data
        user.refresh_from_db()
        assert user.profile_picture.name.startswith("profile_pics/profile_pic-")
        assert user.profile_picture.name.endswith(".png")
        assert os.path.exists(isolated_media_root / user.profile_picture.name)

    def test_replacing_picture_removes_previous_file(
        self, api_client, create_user, login_as, png_file, isolated_media_root,
    ):
        user = create_user()
        login_as(api_client, user)
        url = reverse("accounts:upload-profile")

        api_client.post(url, {"profile_pic": png_file("one.png")}, format="multipart")
        user.refresh_from_db()
        first = user.profile_picture.name

        api_client.post(url, {"profile_pic": png_file("two.png")}, format="multipart")
        user.refresh_from_db()

        assert user.profile_picture.name != first
        assert not os.path.exists(isolated_media_root / first)

    def test_non_image_is_rejected(self, api_client, create_user, login_as, upload_file):
        login_as(api_client, create_user())

        resp = api_client.post(
            reverse("accounts:upload-profile"),
            {"profile_pic": upload_file("fake.png", b"not an image", "image/png")},
            format="multipart",
        )

        assert resp.status_code == 400

    def test_anonymous_upload_is_401(self, api_client, png_file):
        resp = api_client.post(
            reverse("accounts:upload-profile"),
            {"profile_pic": png_file()},
            format="multipart",
        )
        assert resp.status_code == 401
