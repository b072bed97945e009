"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service function / method, and
return the result wrapped in a DRF ``Response``.

Architecture
------------
- ``UserRegistrationService``  — citizen self-registration.
- ``AuthenticationService``    — e-mail login, session establishment, logout.
- ``CurrentUserService``       — profile read + profile-picture upload.
- ``UserManagementService``    — admin CRUD over users, including officer
                                 (department, service) assignment.
- ``dashboard_url``            — role → dashboard route, exhaustive over
                                 ``UserRole``.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import authenticate as django_authenticate
from django.contrib.auth import get_user_model
from django.contrib.sessions.backends.base import SessionBase
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, Q, QuerySet
from django.urls import reverse

from catalog.models import Department, Service
from core.domain.exceptions import (
    AuthenticationRequired,
    Conflict,
    DomainError,
    NotFound,
)
from core.domain.uploads import discard_on_failure

from .models import UserRole
from .sessions import PortalSession, SessionIdentity

logger = logging.getLogger(__name__)

User = get_user_model()

#: Role → URL name of the dashboard the client is sent to after login.
_DASHBOARD_URL_NAMES: dict[str, str] = {
    UserRole.CITIZEN: "service_requests:citizen-dashboard",
    UserRole.OFFICER: "service_requests:officer-dashboard",
    UserRole.ADMIN: "accounts:admin-dashboard",
}

if set(_DASHBOARD_URL_NAMES) != set(UserRole.values):  # pragma: no cover
    raise RuntimeError("Every UserRole needs a dashboard route.")


def dashboard_url(role: str) -> str:
    """Return the dashboard path for ``role``."""
    try:
        return reverse(_DASHBOARD_URL_NAMES[UserRole(role)])
    except (KeyError, ValueError):
        raise DomainError(f"Unknown role '{role}'.")


def _check_email(email: str) -> str:
    email = (email or "").strip()
    try:
        validate_email(email)
    except DjangoValidationError:
        raise DomainError("Please enter a valid email address.")
    return email.lower()


# ═══════════════════════════════════════════════════════════════════
#  Registration Service
# ═══════════════════════════════════════════════════════════════════


class UserRegistrationService:
    """Citizen self-registration.  Officers and admins are created by admins."""

    @staticmethod
    def register_citizen(validated_data: dict[str, Any]) -> User:
        """
        Create a new citizen account.

        Parameters
        ----------
        validated_data : dict
            ``name``, ``email``, ``password`` and optionally
            ``national_id``, ``date_of_birth``, ``contact``.

        Returns
        -------
        User
            The saved user with ``role=citizen`` and no assignment.

        Raises
        ------
        DomainError
            Malformed e-mail address.
        Conflict
            The e-mail address is already registered.
        """
        data = dict(validated_data)
        password = data.pop("password")
        data["email"] = _check_email(data.get("email", ""))

        # The role is fixed; whatever the client sent is ignored.
        data.pop("role", None)
        data.pop("department", None)
        data.pop("service", None)

        if User.objects.filter(email__iexact=data["email"]).exists():
            raise Conflict("Email already exists. Please use another.")

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    password=password,
                    role=UserRole.CITIZEN,
                    **data,
                )
        except IntegrityError:
            raise Conflict("Email already exists. Please use another.")

        logger.info("Registered citizen #%s", user.pk)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """Credential check + session establishment."""

    @staticmethod
    def login(
        store: SessionBase,
        *,
        email: str,
        password: str,
        request=None,
    ) -> tuple[User, SessionIdentity]:
        """
        Verify the credential and bind the session to the user.

        Returns
        -------
        tuple
            ``(user, identity)`` where ``identity.role`` is the stored
            ``User.role``.

        Raises
        ------
        AuthenticationRequired
            Unknown e-mail, wrong password, or inactive account.  The
            message does not say which.
        """
        user = django_authenticate(request, email=email, password=password)
        if user is None:
            logger.info("Failed login attempt")
            raise AuthenticationRequired("Invalid email or password.")

        identity = PortalSession(store).establish(user)
        logger.info("User #%s logged in as %s", user.pk, identity.role)
        return user, identity

    @staticmethod
    def logout(store: SessionBase) -> None:
        PortalSession(store).destroy()


# ═══════════════════════════════════════════════════════════════════
#  Current User Service
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:
    """Helpers for the logged-in user's own account."""

    @staticmethod
    def get_profile(user_id: int) -> User:
        try:
            return User.objects.select_related(
                "department", "service"
            ).get(pk=user_id)
        except User.DoesNotExist:
            raise NotFound("User not found.")

    @staticmethod
    def update_profile_picture(user: User, upload) -> User:
        """
        Store ``upload`` under ``profile_pics/`` and point the user at it.

        The previous picture is removed once the new one is committed.
        A failed save leaves the old picture and no orphan file.
        """
        previous = user.profile_picture.name if user.profile_picture else ""
        storage = User._meta.get_field("profile_picture").storage

        with discard_on_failure() as track, transaction.atomic():
            user.profile_picture.save(upload.name, upload, save=False)
            track(user.profile_picture)
            user.save(update_fields=["profile_picture"])

        if previous and previous != user.profile_picture.name:
            storage.delete(previous)

        logger.info("User #%s updated profile picture", user.pk)
        return user


# ═══════════════════════════════════════════════════════════════════
#  User Management Service (admin)
# ═══════════════════════════════════════════════════════════════════


class UserManagementService:
    """
    Administrative operations on users.

    Access is restricted to the admin role at the view level
    (``IsAdmin``); this layer owns the assignment rules.
    """

    @staticmethod
    def list_users(*, role: str | None = None, search: str | None = None) -> QuerySet[User]:
        qs = User.objects.select_related("department", "service").order_by("id")
        if role:
            qs = qs.filter(role=role)
        if search:
            qs = qs.filter(
                Q(name__icontains=search)
                | Q(email__icontains=search)
                | Q(national_id__icontains=search)
            )
        return qs

    @staticmethod
    def get_user(user_id: int) -> User:
        try:
            return User.objects.select_related("department", "service").get(pk=user_id)
        except User.DoesNotExist:
            raise NotFound(f"User with id {user_id} not found.")

    @staticmethod
    def resolve_assignment(
        role: str,
        department: Department | None,
        service: Service | None,
    ) -> tuple[Department | None, Service | None]:
        """
        Validate the officer (department, service) pair.

        Officers need both, and the service must belong to the
        department.  Every other role is stored without an assignment.
        """
        if role != UserRole.OFFICER:
            return None, None

        if department is None or service is None:
            raise DomainError("Officers must be assigned a department and a service.")
        if service.department_id != department.pk:
            raise DomainError(
                f"Service '{service.name}' does not belong to department '{department.name}'."
            )
        return department, service

    @staticmethod
    def create_user(validated_data: dict[str, Any]) -> User:
        """
        Create a user of any role.

        Raises
        ------
        DomainError
            Invalid e-mail or inconsistent officer assignment.
        Conflict
            Duplicate e-mail.
        """
        data = dict(validated_data)
        password = data.pop("password")
        data["email"] = _check_email(data.get("email", ""))
        role = data.get("role", UserRole.CITIZEN)

        data["department"], data["service"] = UserManagementService.resolve_assignment(
            role, data.get("department"), data.get("service"),
        )

        if User.objects.filter(email__iexact=data["email"]).exists():
            raise Conflict("Email already exists. Please use another.")

        try:
            with transaction.atomic():
                user = User.objects.create_user(password=password, **data)
        except IntegrityError:
            raise Conflict("Email already exists. Please use another.")

        logger.info("Admin created user #%s with role %s", user.pk, user.role)
        return user

    @staticmethod
    def update_user(user_id: int, validated_data: dict[str, Any]) -> User:
        """
        Update profile fields, role and assignment of a user.

        A blank/absent password leaves the current one unchanged.
        """
        user = UserManagementService.get_user(user_id)
        data = dict(validated_data)

        password = data.pop("password", None)
        if "email" in data:
            data["email"] = _check_email(data["email"])
            if User.objects.filter(email__iexact=data["email"]).exclude(pk=user.pk).exists():
                raise Conflict("Email already exists. Please use another.")

        role = data.get("role", user.role)
        department = data.get("department", user.department)
        service = data.get("service", user.service)
        data["department"], data["service"] = UserManagementService.resolve_assignment(
            role, department, service,
        )

        for field, value in data.items():
            setattr(user, field, value)
        if password:
            user.set_password(password)

        try:
            with transaction.atomic():
                user.save()
        except IntegrityError:
            raise Conflict("Email already exists. Please use another.")

        logger.info("Admin updated user #%s", user.pk)
        return user

    @staticmethod
    def delete_user(user_id: int, performed_by: User) -> None:
        """
        Delete a user.

        Raises
        ------
        DomainError
            Admins cannot delete their own account.
        Conflict
            The user still owns service requests.
        """
        user = UserManagementService.get_user(user_id)
        if user.pk == performed_by.pk:
            raise DomainError("You cannot delete your own account.")

        try:
            with transaction.atomic():
                user.delete()
        except ProtectedError:
            raise Conflict(
                "Cannot delete a user who still has service requests on record."
            )

        logger.info("Admin #%s deleted user #%s", performed_by.pk, user_id)
