"""
Catalog app views.

Thin views over ``catalog.services``: the public services listing and
the admin pages for departments and services.

View Map
--------
- ``ServiceListView``              — GET /api/services/ (public)
- ``AdminDepartmentListView``      — GET /api/admin/departments/
- ``AdminDepartmentCreateView``    — POST /api/admin/departments/add/
- ``AdminDepartmentEditView``      — GET / POST /api/admin/departments/edit/<id>/
- ``AdminDepartmentDeleteView``    — POST / DELETE /api/admin/departments/delete/<id>/
- ``AdminServiceListView``         — GET /api/admin/services/
- ``AdminServiceCreateView``       — GET / POST /api/admin/services/add/
- ``AdminServiceEditView``         — GET / POST /api/admin/services/edit/<id>/
- ``AdminServiceDeleteView``       — POST / DELETE /api/admin/services/delete/<id>/
- ``DepartmentServicesView``       — GET /api/admin/getServices/<department_id>/
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from accounts.permissions import IsAdmin

from .serializers import (
    DepartmentSerializer,
    DepartmentWriteSerializer,
    ServiceFormSerializer,
    ServiceOptionSerializer,
    ServiceSerializer,
    ServiceWriteSerializer,
)
from .services import (
    CatalogQueryService,
    DepartmentAdminService,
    ServiceAdminService,
)


class ServiceListView(APIView):
    """Public listing of every service with its department name."""

    permission_classes = [AllowAny]

    @extend_schema(
        summary="List services",
        responses={200: ServiceSerializer(many=True)},
        tags=["Services"],
    )
    def get(self, request: Request) -> Response:
        services = CatalogQueryService.list_public_services()
        return Response(ServiceSerializer(services, many=True).data)


# ═══════════════════════════════════════════════════════════════════
#  Admin: Departments
# ═══════════════════════════════════════════════════════════════════


class AdminDepartmentListView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="List departments",
        responses={200: DepartmentSerializer(many=True)},
        tags=["Admin: Departments"],
    )
    def get(self, request: Request) -> Response:
        departments = DepartmentAdminService.list_departments()
        return Response(DepartmentSerializer(departments, many=True).data)


class AdminDepartmentCreateView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Create a department",
        request=DepartmentWriteSerializer,
        responses={
            201: OpenApiResponse(response=DepartmentSerializer, description="Department created."),
            409: OpenApiResponse(description="Name already taken."),
        },
        tags=["Admin: Departments"],
    )
    def post(self, request: Request) -> Response:
        serializer = DepartmentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        department = DepartmentAdminService.create_department(serializer.validated_data)
        return Response(DepartmentSerializer(department).data, status=status.HTTP_201_CREATED)


class AdminDepartmentEditView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Retrieve a department for editing",
        responses={200: DepartmentSerializer},
        tags=["Admin: Departments"],
    )
    def get(self, request: Request, department_id: int) -> Response:
        department = DepartmentAdminService.get_department(department_id)
        return Response(DepartmentSerializer(department).data)

    @extend_schema(
        summary="Update a department",
        request=DepartmentWriteSerializer,
        responses={
            200: OpenApiResponse(response=DepartmentSerializer, description="Department updated."),
            404: OpenApiResponse(description="No such department."),
            409: OpenApiResponse(description="Name already taken."),
        },
        tags=["Admin: Departments"],
    )
    def post(self, request: Request, department_id: int) -> Response:
        serializer = DepartmentWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        department = DepartmentAdminService.update_department(
            department_id, serializer.validated_data,
        )
        return Response(DepartmentSerializer(department).data)


class AdminDepartmentDeleteView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Delete a department",
        request=None,
        responses={
            204: OpenApiResponse(description="Deleted."),
            409: OpenApiResponse(description="Department still has services or officers."),
        },
        tags=["Admin: Departments"],
    )
    def delete(self, request: Request, department_id: int) -> Response:
        DepartmentAdminService.delete_department(department_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(exclude=True)
    def post(self, request: Request, department_id: int) -> Response:
        return self.delete(request, department_id)


# ═══════════════════════════════════════════════════════════════════
#  Admin: Services
# ═══════════════════════════════════════════════════════════════════


class AdminServiceListView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="List services (admin)",
        responses={200: ServiceSerializer(many=True)},
        tags=["Admin: Services"],
    )
    def get(self, request: Request) -> Response:
        services = ServiceAdminService.list_services()
        return Response(ServiceSerializer(services, many=True).data)


class AdminServiceCreateView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Add-service form data",
        responses={200: ServiceFormSerializer},
        tags=["Admin: Services"],
    )
    def get(self, request: Request) -> Response:
        payload = {"departments": DepartmentAdminService.list_departments()}
        return Response(ServiceFormSerializer(payload).data)

    @extend_schema(
        summary="Create a service",
        request=ServiceWriteSerializer,
        responses={
            201: OpenApiResponse(response=ServiceSerializer, description="Service created."),
            409: OpenApiResponse(description="Name already taken in that department."),
        },
        tags=["Admin: Services"],
    )
    def post(self, request: Request) -> Response:
        serializer = ServiceWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = ServiceAdminService.create_service(serializer.validated_data)
        return Response(ServiceSerializer(service).data, status=status.HTTP_201_CREATED)


class AdminServiceEditView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Edit-service form data",
        responses={200: ServiceFormSerializer},
        tags=["Admin: Services"],
    )
    def get(self, request: Request, service_id: int) -> Response:
        payload = {
            "service": CatalogQueryService.get_service(service_id),
            "departments": DepartmentAdminService.list_departments(),
        }
        return Response(ServiceFormSerializer(payload).data)

    @extend_schema(
        summary="Update a service",
        request=ServiceWriteSerializer,
        responses={
            200: OpenApiResponse(response=ServiceSerializer, description="Service updated."),
            404: OpenApiResponse(description="No such service."),
            409: OpenApiResponse(description="Name taken, or officers still assigned."),
        },
        tags=["Admin: Services"],
    )
    def post(self, request: Request, service_id: int) -> Response:
        serializer = ServiceWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        service = ServiceAdminService.update_service(service_id, serializer.validated_data)
        return Response(ServiceSerializer(service).data)


class AdminServiceDeleteView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Delete a service",
        request=None,
        responses={
            204: OpenApiResponse(description="Deleted."),
            409: OpenApiResponse(description="Service still has requests or officers."),
        },
        tags=["Admin: Services"],
    )
    def delete(self, request: Request, service_id: int) -> Response:
        ServiceAdminService.delete_service(service_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(exclude=True)
    def post(self, request: Request, service_id: int) -> Response:
        return self.delete(request, service_id)


class DepartmentServicesView(APIView):
    """Dependent dropdown: services of one department as ``[{"id", "name"}]``."""

    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Services of a department",
        responses={
            200: ServiceOptionSerializer(many=True),
            404: OpenApiResponse(description="No such department."),
        },
        tags=["Admin: Services"],
    )
    def get(self, request: Request, department_id: int) -> Response:
        services = CatalogQueryService.services_for_department(department_id)
        return Response(ServiceOptionSerializer(services, many=True).data)
