"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — uniqueness,
officer assignment rules and session handling are delegated to
``services.py``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import serializers

from catalog.models import Department, Service
from core.constants import max_upload_bytes

from .models import UserRole

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class RegisterRequestSerializer(serializers.Serializer):
    """
    Validates citizen self-registration data.

    ``email`` is declared explicitly so that DRF does not attach a
    ``UniqueValidator``: a duplicate address is a 409 raised by the
    service, not a 400.
    """

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(
        write_only=True,
        min_length=6,
        style={"input_type": "password"},
        help_text="Minimum 6 characters.",
    )
    national_id = serializers.CharField(max_length=32, required=False, allow_blank=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    contact = serializers.CharField(max_length=50, required=False, allow_blank=True)


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.CharField(help_text="Registered e-mail address.")
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


class SessionIdentitySerializer(serializers.Serializer):
    """Shape of ``GET /api/me/``."""

    userId = serializers.IntegerField(source="user_id")
    role = serializers.ChoiceField(choices=UserRole.choices)


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserDetailSerializer(serializers.ModelSerializer):
    """Full profile as shown on dashboards and the admin user pages."""

    department_name = serializers.CharField(
        source="department.name", read_only=True, default=None,
    )
    service_name = serializers.CharField(
        source="service.name", read_only=True, default=None,
    )

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "national_id",
            "date_of_birth",
            "contact",
            "profile_picture",
            "department",
            "department_name",
            "service",
            "service_name",
            "is_active",
            "date_joined",
        ]
        read_only_fields = fields


class LoginResponseSerializer(serializers.Serializer):
    user = UserDetailSerializer()
    redirect = serializers.CharField(help_text="Dashboard path for the user's role.")


class ProfilePictureUploadSerializer(serializers.Serializer):
    """Multipart body of ``POST /api/upload_profile/``."""

    profile_pic = serializers.ImageField()

    def validate_profile_pic(self, value):
        limit = max_upload_bytes()
        if value.size > limit:
            raise serializers.ValidationError(f"File too large; the limit is {limit} bytes.")
        return value


# ═══════════════════════════════════════════════════════════════════
#  Admin User Management Serializers
# ═══════════════════════════════════════════════════════════════════


class AdminUserWriteSerializer(serializers.Serializer):
    """
    Create / update a user of any role.

    On update every field is optional and a blank ``password`` keeps
    the current one.  Whether the (department, service) pair is
    consistent with the role is decided by ``UserManagementService``.
    """

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Minimum 6 characters; leave blank on update to keep the current one.",
    )
    role = serializers.ChoiceField(choices=UserRole.choices, default=UserRole.CITIZEN)
    national_id = serializers.CharField(max_length=32, required=False, allow_blank=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    contact = serializers.CharField(max_length=50, required=False, allow_blank=True)
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(), required=False, allow_null=True,
    )
    service = serializers.PrimaryKeyRelatedField(
        queryset=Service.objects.all(), required=False, allow_null=True,
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.partial:
            password = self.fields["password"]
            password.required = False
            password.allow_blank = True

    def validate_password(self, value: str) -> str:
        if value and len(value) < 6:
            raise serializers.ValidationError("Ensure this field has at least 6 characters.")
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if self.partial and not attrs.get("password"):
            attrs.pop("password", None)
        return attrs


class DepartmentOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ["id", "name"]


class UserFormSerializer(serializers.Serializer):
    """``GET`` of the add / edit user pages: the user (edit) plus dropdown data."""

    user = UserDetailSerializer(required=False)
    departments = DepartmentOptionSerializer(many=True)
    roles = serializers.ListField(child=serializers.CharField())
