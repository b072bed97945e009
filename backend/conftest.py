"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating portal users.
  - ``create_department`` / ``create_service`` catalog factories.
  - ``login_as`` helper that logs a client in through ``/api/login/``
    so the server-side session is real.
  - ``upload_file`` / ``png_file`` upload factories.
  - an autouse fixture that points ``MEDIA_ROOT`` at a temp directory.
"""

from __future__ import annotations

import io

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from PIL import Image
from rest_framework.test import APIClient

DEFAULT_PASSWORD = "TestPass123!"


@pytest.fixture(autouse=True)
def isolated_media_root(settings, tmp_path):
    """Every test writes uploads into its own temp directory."""
    settings.MEDIA_ROOT = tmp_path / "uploads"
    return settings.MEDIA_ROOT


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_department(db):
    from catalog.models import Department

    _counter = 0

    def _factory(*, name: str | None = None, description: str = "") -> Department:
        nonlocal _counter
        _counter += 1
        return Department.objects.create(
            name=name or f"Department {_counter}",
            description=description,
        )

    return _factory


@pytest.fixture()
def create_service(db, create_department):
    from catalog.models import Service

    _counter = 0

    def _factory(*, department=None, name: str | None = None, description: str = "") -> Service:
        nonlocal _counter
        _counter += 1
        return Service.objects.create(
            department=department or create_department(),
            name=name or f"Service {_counter}",
            description=description,
        )

    return _factory


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            citizen = create_user()
            officer = create_user(role="officer", department=d, service=s)
    """
    from accounts.models import User, UserRole

    _counter = 0

    def _factory(
        *,
        name: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        role: str = UserRole.CITIZEN,
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if name is None:
            name = f"Test User {_counter}"
        if email is None:
            email = f"user{_counter}@test.local"
        return User.objects.create_user(
            email=email,
            password=password,
            name=name,
            role=role,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def login_as():
    """
    Log ``client`` in as ``user`` through the real login endpoint.

    Usage::

        def test_protected(api_client, create_user, login_as):
            login_as(api_client, create_user())
            resp = api_client.get(reverse("service_requests:my-requests"))
    """

    def _login(client: APIClient, user, password: str = DEFAULT_PASSWORD) -> APIClient:
        resp = client.post(
            reverse("accounts:login"),
            {"email": user.email, "password": password},
            format="json",
        )
        assert resp.status_code == 200, resp.data
        return client

    return _login


@pytest.fixture()
def upload_file():
    def _make(
        name: str = "document.pdf",
        content: bytes = b"%PDF-1.4 test document",
        content_type: str = "application/pdf",
    ) -> SimpleUploadedFile:
        return SimpleUploadedFile(name, content, content_type=content_type)

    return _make


def make_png(name: str = "avatar.png") -> SimpleUploadedFile:
    """A real 2×2 PNG, valid for ``ImageField``."""
    buffer = io.BytesIO()
    Image.new("RGB", (2, 2), color=(200, 30, 30)).save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


@pytest.fixture()
def png_file():
    return make_png
