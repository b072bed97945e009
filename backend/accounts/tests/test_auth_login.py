"""
Integration tests — e-mail login, logout and the session identity.

Endpoints under test:
    POST /api/login/    (accounts:login)
    POST /api/logout/   (accounts:logout)
    GET  /api/me/       (accounts:me)

Login success returns {"user": {...}, "redirect": "<dashboard path>"}
and binds a server-side session; every failure is a 401 that does not
reveal whether the e-mail exists.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from catalog.models import Department, Service

User = get_user_model()

_PASSWORD = "Str0ng!Pass99"


class TestLogin(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.department = Department.objects.create(name="Transport")
        cls.service = Service.objects.create(department=cls.department, name="Licence renewal")
        cls.citizen = User.objects.create_user(
            email="citizen@example.com", password=_PASSWORD, name="Cit Izen",
        )
        cls.officer = User.objects.create_user(
            email="officer@example.com",
            password=_PASSWORD,
            name="Off Icer",
            role=UserRole.OFFICER,
            department=cls.department,
            service=cls.service,
        )
        cls.admin = User.objects.create_superuser(
            email="admin@example.com", password=_PASSWORD, name="Ad Min",
        )

    def setUp(self):
        self.client = APIClient()
        self.login_url = reverse("accounts:login")
        self.me_url = reverse("accounts:me")

    def _login(self, email, password=_PASSWORD):
        return self.client.post(
            self.login_url, {"email": email, "password": password}, format="json",
        )

    # ── Success: one per role, each redirected to its own dashboard ──

    def test_citizen_login_redirects_to_citizen_dashboard(self):
        resp = self._login("citizen@example.com")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["redirect"], reverse("service_requests:citizen-dashboard"))
        self.assertEqual(resp.data["user"]["role"], "citizen")

    def test_officer_login_redirects_to_officer_dashboard(self):
        resp = self._login("officer@example.com")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["redirect"], reverse("service_requests:officer-dashboard"))

    def test_admin_login_redirects_to_admin_dashboard(self):
        resp = self._login("admin@example.com")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["redirect"], reverse("accounts:admin-dashboard"))

    def test_login_email_is_case_insensitive(self):
        resp = self._login("CITIZEN@Example.com")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)

    # ── Session identity ────────────────────────────────────────────

    def test_me_returns_session_identity_after_login(self):
        self._login("officer@example.com")
        resp = self.client.get(self.me_url)

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data, {"userId": self.officer.pk, "role": "officer"})

    def test_me_without_session_is_401(self):
        resp = self.client.get(self.me_url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_destroys_session(self):
        self._login("citizen@example.com")
        resp = self.client.post(reverse("accounts:logout"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        resp = self.client.get(self.me_url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_session_expiry_is_fixed_at_login(self):
        self._login("citizen@example.com")
        self.assertEqual(self.client.session.get_expiry_age(), 3600)

    # ── Failures ─────────────────────────────────────────────────────

    def test_wrong_password_is_401(self):
        resp = self._login("citizen@example.com", password="wrong-password")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.data["detail"], "Invalid email or password.")

    def test_unknown_email_gets_same_message(self):
        resp = self._login("nobody@example.com")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.data["detail"], "Invalid email or password.")

    def test_inactive_user_cannot_log_in(self):
        self.citizen.is_active = False
        self.citizen.save(update_fields=["is_active"])

        resp = self._login("citizen@example.com")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
