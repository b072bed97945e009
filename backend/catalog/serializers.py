"""
Catalog app serializers.

Departments and services, for the public listing and for the admin
CRUD pages.  Uniqueness of names is enforced by the service layer
(``Conflict``, 409) rather than by DRF validators (400), so the name
fields are declared explicitly.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Department, Service


class DepartmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ["id", "name", "description"]
        read_only_fields = ["id"]


class DepartmentWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ServiceSerializer(serializers.ModelSerializer):
    """Service joined with its department name."""

    department_name = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = Service
        fields = ["id", "name", "description", "department", "department_name"]
        read_only_fields = fields


class ServiceOptionSerializer(serializers.ModelSerializer):
    """``{"id", "name"}`` pairs for the dependent service dropdown."""

    class Meta:
        model = Service
        fields = ["id", "name"]


class ServiceWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    department = serializers.PrimaryKeyRelatedField(queryset=Department.objects.all())


class ServiceFormSerializer(serializers.Serializer):
    """``GET`` of the add / edit service pages."""

    service = ServiceSerializer(required=False)
    departments = DepartmentSerializer(many=True)
