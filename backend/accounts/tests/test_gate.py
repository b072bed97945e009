"""
Unit tests — session store and Authorization Gate.

The gate is exercised without a request object: it only sees a
``SessionIdentity`` (or ``None``).
"""

from __future__ import annotations

import pytest
from django.contrib.sessions.backends.db import SessionStore
from django.urls import reverse

from accounts.models import UserRole
from accounts.sessions import (
    SESSION_ROLE_KEY,
    SESSION_USER_KEY,
    PortalSession,
    SessionIdentity,
)
from core.domain.access import require_role, require_session
from core.domain.exceptions import AuthenticationRequired, PermissionDenied


# ════════════════════════════════════════════════════════════════════
#  Authorization Gate
# ════════════════════════════════════════════════════════════════════


class TestRequireRole:

    def test_admits_matching_role(self):
        identity = SessionIdentity(user_id=7, role=UserRole.OFFICER)
        assert require_role(identity, UserRole.OFFICER) is identity

    def test_anonymous_is_authentication_error(self):
        with pytest.raises(AuthenticationRequired):
            require_role(None, UserRole.CITIZEN)

    def test_identity_without_user_id_is_authentication_error(self):
        with pytest.raises(AuthenticationRequired):
            require_role(SessionIdentity(user_id=0, role=UserRole.CITIZEN), UserRole.CITIZEN)

    @pytest.mark.parametrize(
        "session_role,required_role",
        [
            (UserRole.CITIZEN, UserRole.OFFICER),
            (UserRole.CITIZEN, UserRole.ADMIN),
            (UserRole.OFFICER, UserRole.CITIZEN),
            (UserRole.OFFICER, UserRole.ADMIN),
            (UserRole.ADMIN, UserRole.CITIZEN),
            (UserRole.ADMIN, UserRole.OFFICER),
        ],
    )
    def test_role_mismatch_is_access_denied(self, session_role, required_role):
        identity = SessionIdentity(user_id=1, role=session_role)
        with pytest.raises(PermissionDenied):
            require_role(identity, required_role)

    def test_require_session_admits_any_role(self):
        for role in UserRole:
            identity = SessionIdentity(user_id=3, role=role)
            assert require_session(identity) is identity


# ════════════════════════════════════════════════════════════════════
#  Session store
# ════════════════════════════════════════════════════════════════════


@pytest.mark.django_db
class TestPortalSession:

    def test_establish_stores_user_and_role(self, create_user):
        user = create_user()
        store = SessionStore()

        identity = PortalSession(store).establish(user)

        assert identity == SessionIdentity(user_id=user.pk, role=UserRole.CITIZEN)
        assert store[SESSION_USER_KEY] == user.pk
        assert store[SESSION_ROLE_KEY] == "citizen"
        assert store.get_expiry_age() == 3600

    def test_establish_rotates_session_key(self, create_user):
        store = SessionStore()
        store["anything"] = 1
        store.save()
        old_key = store.session_key

        PortalSession(store).establish(create_user())

        assert store.session_key != old_key

    def test_unknown_role_in_store_yields_no_identity(self):
        store = SessionStore()
        store[SESSION_USER_KEY] = 5
        store[SESSION_ROLE_KEY] = "superhero"

        assert PortalSession(store).identity() is None

    def test_empty_store_yields_no_identity(self):
        assert PortalSession(SessionStore()).identity() is None

    def test_destroy_clears_identity(self, create_user):
        store = SessionStore()
        session = PortalSession(store)
        session.establish(create_user())

        session.destroy()

        assert session.identity() is None


# ════════════════════════════════════════════════════════════════════
#  Gate applied over HTTP
# ════════════════════════════════════════════════════════════════════


GATED_ROUTES = [
    # (url name, kwargs, required role)
    ("service_requests:citizen-dashboard", {}, UserRole.CITIZEN),
    ("service_requests:my-requests", {}, UserRole.CITIZEN),
    ("service_requests:officer-dashboard", {}, UserRole.OFFICER),
    ("service_requests:officer-request-list", {"status_filter": "pending"}, UserRole.OFFICER),
    ("accounts:admin-dashboard", {}, UserRole.ADMIN),
    ("accounts:admin-user-list", {}, UserRole.ADMIN),
    ("catalog:admin-department-list", {}, UserRole.ADMIN),
    ("catalog:admin-service-list", {}, UserRole.ADMIN),
    ("core:admin-reports", {}, UserRole.ADMIN),
]


@pytest.mark.django_db
class TestGateOverHTTP:

    @pytest.mark.parametrize("url_name,kwargs,role", GATED_ROUTES)
    def test_anonymous_gets_401(self, api_client, url_name, kwargs, role):
        resp = api_client.get(reverse(url_name, kwargs=kwargs))
        assert resp.status_code == 401

    @pytest.mark.parametrize("url_name,kwargs,role", GATED_ROUTES)
    def test_wrong_role_gets_403(
        self, api_client, create_user, create_service, login_as, url_name, kwargs, role,
    ):
        other_role = UserRole.CITIZEN if role != UserRole.CITIZEN else UserRole.ADMIN
        login_as(api_client, create_user(role=other_role))

        resp = api_client.get(reverse(url_name, kwargs=kwargs))

        assert resp.status_code == 403
        assert "Access denied" in resp.data["detail"]

    @pytest.mark.parametrize("url_name,kwargs,role", GATED_ROUTES)
    def test_matching_role_is_admitted(
        self, api_client, create_user, create_service, login_as, url_name, kwargs, role,
    ):
        extra = {}
        if role == UserRole.OFFICER:
            service = create_service()
            extra = {"department": service.department, "service": service}
        login_as(api_client, create_user(role=role, **extra))

        resp = api_client.get(reverse(url_name, kwargs=kwargs))

        assert resp.status_code == 200, resp.data

    def test_public_routes_need_no_session(self, api_client):
        assert api_client.get(reverse("core:home")).status_code == 200
        assert api_client.get(reverse("catalog:service-list")).status_code == 200
