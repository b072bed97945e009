"""
Catalog Service Layer.

Departments and the services they offer.  Listing is public; every
mutation is an admin action (``IsAdmin`` at the view level).

Architecture
------------
- ``CatalogQueryService``      — public listing, dependent dropdown data.
- ``DepartmentAdminService``   — department CRUD.
- ``ServiceAdminService``      — service CRUD.

Deletion never cascades into requests or officer assignments: the
foreign keys are ``PROTECT`` and a blocked delete surfaces as
``Conflict``.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, QuerySet

from core.domain.exceptions import Conflict, DomainError, NotFound

from .models import Department, Service

logger = logging.getLogger(__name__)


class CatalogQueryService:
    """Read-side helpers shared by public and admin views."""

    @staticmethod
    def list_public_services() -> QuerySet[Service]:
        """All services joined with their department, by department then name."""
        return Service.objects.select_related("department").order_by(
            "department__name", "name"
        )

    @staticmethod
    def services_for_department(department_id: int) -> QuerySet[Service]:
        """Services of one department, ordered by name (dependent dropdown)."""
        if not Department.objects.filter(pk=department_id).exists():
            raise NotFound(f"Department with id {department_id} not found.")
        return Service.objects.filter(department_id=department_id).order_by("name")

    @staticmethod
    def get_service(service_id: int) -> Service:
        try:
            return Service.objects.select_related("department").get(pk=service_id)
        except Service.DoesNotExist:
            raise NotFound(f"Service with id {service_id} not found.")


# ═══════════════════════════════════════════════════════════════════
#  Department administration
# ═══════════════════════════════════════════════════════════════════


class DepartmentAdminService:

    @staticmethod
    def list_departments() -> QuerySet[Department]:
        return Department.objects.order_by("id")

    @staticmethod
    def get_department(department_id: int) -> Department:
        try:
            return Department.objects.get(pk=department_id)
        except Department.DoesNotExist:
            raise NotFound(f"Department with id {department_id} not found.")

    @staticmethod
    def create_department(validated_data: dict[str, Any]) -> Department:
        try:
            with transaction.atomic():
                department = Department.objects.create(**validated_data)
        except IntegrityError:
            raise Conflict(f"Department '{validated_data.get('name')}' already exists.")
        logger.info("Created department #%s", department.pk)
        return department

    @staticmethod
    def update_department(department_id: int, validated_data: dict[str, Any]) -> Department:
        department = DepartmentAdminService.get_department(department_id)
        for field, value in validated_data.items():
            setattr(department, field, value)
        try:
            with transaction.atomic():
                department.save()
        except IntegrityError:
            raise Conflict(f"Department '{department.name}' already exists.")
        logger.info("Updated department #%s", department.pk)
        return department

    @staticmethod
    def delete_department(department_id: int) -> None:
        department = DepartmentAdminService.get_department(department_id)
        try:
            with transaction.atomic():
                department.delete()
        except ProtectedError:
            raise Conflict(
                f"Cannot delete department '{department.name}' while it still has "
                "services or assigned officers."
            )
        logger.info("Deleted department #%s", department_id)


# ═══════════════════════════════════════════════════════════════════
#  Service administration
# ═══════════════════════════════════════════════════════════════════


class ServiceAdminService:

    @staticmethod
    def list_services() -> QuerySet[Service]:
        return Service.objects.select_related("department").order_by("id")

    @staticmethod
    def create_service(validated_data: dict[str, Any]) -> Service:
        if validated_data.get("department") is None:
            raise DomainError("A service must belong to a department.")
        try:
            with transaction.atomic():
                service = Service.objects.create(**validated_data)
        except IntegrityError:
            raise Conflict(
                f"Service '{validated_data.get('name')}' already exists in this department."
            )
        logger.info("Created service #%s in department #%s", service.pk, service.department_id)
        return service

    @staticmethod
    def update_service(service_id: int, validated_data: dict[str, Any]) -> Service:
        """
        Update a service.

        Moving a service to another department is refused while officers
        are assigned to it, since their (department, service) pair would
        no longer match.
        """
        service = CatalogQueryService.get_service(service_id)

        new_department = validated_data.get("department")
        if (
            new_department is not None
            and new_department.pk != service.department_id
            and service.officers.exists()
        ):
            raise Conflict(
                "Reassign the officers of this service before moving it to another department."
            )

        for field, value in validated_data.items():
            setattr(service, field, value)
        try:
            with transaction.atomic():
                service.save()
        except IntegrityError:
            raise Conflict(f"Service '{service.name}' already exists in this department.")
        logger.info("Updated service #%s", service.pk)
        return service

    @staticmethod
    def delete_service(service_id: int) -> None:
        service = CatalogQueryService.get_service(service_id)
        try:
            with transaction.atomic():
                service.delete()
        except ProtectedError:
            raise Conflict(
                f"Cannot delete service '{service.name}' while it has requests "
                "or assigned officers."
            )
        logger.info("Deleted service #%s", service_id)
