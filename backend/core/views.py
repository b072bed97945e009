"""
Core app views — **Thin Views**.

Each view delegates all work to the corresponding service in
``core.services``.  No model imports, no aggregation logic here.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from accounts.permissions import IsAdmin

from .serializers import AdminReportSerializer, PortalHomeSerializer
from .services import PortalHomeService, ReportAggregationService


class HomeView(APIView):
    """
    **GET /api/**

    Public portal entry point: the portal name and links to the
    anonymous routes.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Portal home",
        responses={200: PortalHomeSerializer},
        tags=["Portal"],
    )
    def get(self, request: Request) -> Response:
        data = PortalHomeService.get_home()
        return Response(PortalHomeSerializer(data).data, status=status.HTTP_200_OK)


class AdminReportsView(APIView):
    """
    **GET /api/admin/reports/**

    Summary counts over users, departments, services, requests and
    payments, plus the request activity log (newest first).

    **Authentication**: admin session.

    **Error Responses**:
        - ``401 Unauthorized``: no session.
        - ``403 Forbidden``: session of another role.
    """

    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Admin reports",
        responses={
            200: OpenApiResponse(response=AdminReportSerializer, description="Report."),
            401: OpenApiResponse(description="Not logged in."),
            403: OpenApiResponse(description="Not an admin."),
        },
        tags=["Admin"],
    )
    def get(self, request: Request) -> Response:
        report = ReportAggregationService().get_report()
        return Response(AdminReportSerializer(report).data, status=status.HTTP_200_OK)
