"""
Service-requests app views.

Architecture: Views are intentionally thin.
Every view follows a strict three-step pattern:

    1. Parse and validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

Scoping, ownership and lifecycle checks live exclusively in
``services.py``; the permission class on each view is the
Authorization Gate for its role.
"""

from __future__ import annotations

from urllib.parse import urlencode

from django.http import HttpResponseRedirect
from django.urls import reverse
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from accounts.permissions import IsCitizen, IsOfficer, IsPortalUser
from catalog.serializers import ServiceSerializer
from catalog.services import CatalogQueryService

from .serializers import (
    CitizenDashboardSerializer,
    DecisionSerializer,
    OfficerDashboardSerializer,
    PaymentFormSerializer,
    PaymentSerializer,
    PaymentSubmitSerializer,
    ServiceRequestCreateSerializer,
    ServiceRequestDetailSerializer,
    ServiceRequestListSerializer,
)
from .services import (
    DashboardService,
    PaymentService,
    RequestDecisionService,
    RequestQueryService,
    RequestSubmissionService,
)


class ServiceApplyRedirectView(APIView):
    """``/api/service/<id>/`` → ``/api/citizen/apply/?service_id=<id>``."""

    permission_classes = [IsPortalUser]

    @extend_schema(
        summary="Apply for a service",
        responses={302: OpenApiResponse(description="Redirect to the application form.")},
        tags=["Services"],
    )
    def get(self, request: Request, service_id: int):
        target = reverse("service_requests:citizen-apply")
        return HttpResponseRedirect(f"{target}?{urlencode({'service_id': service_id})}")


# ═══════════════════════════════════════════════════════════════════
#  Citizen Views
# ═══════════════════════════════════════════════════════════════════


class CitizenDashboardView(APIView):
    permission_classes = [IsCitizen]

    @extend_schema(
        summary="Citizen dashboard",
        responses={200: CitizenDashboardSerializer},
        tags=["Citizen"],
    )
    def get(self, request: Request) -> Response:
        data = DashboardService.citizen_dashboard(request.user)
        return Response(CitizenDashboardSerializer(data).data)


class CitizenApplyView(APIView):
    """
    GET  /api/citizen/apply/[?service_id=<id>] → services for the form.
    POST /api/citizen/apply/                   → create a request.

    The POST body is multipart when a ``document`` is attached.
    """

    permission_classes = [IsCitizen]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(
        summary="Application form data",
        responses={200: ServiceSerializer(many=True)},
        tags=["Citizen"],
    )
    def get(self, request: Request) -> Response:
        services = CatalogQueryService.list_public_services()
        return Response({
            "services": ServiceSerializer(services, many=True).data,
            "selected_service_id": request.query_params.get("service_id"),
        })

    @extend_schema(
        summary="Submit a service request",
        request={"multipart/form-data": ServiceRequestCreateSerializer},
        responses={
            201: OpenApiResponse(response=ServiceRequestListSerializer, description="Request created."),
            400: OpenApiResponse(description="Unknown service or invalid upload."),
        },
        tags=["Citizen"],
    )
    def post(self, request: Request) -> Response:
        serializer = ServiceRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        service_request = RequestSubmissionService.create_request(
            request.user,
            service_id=data["service_id"],
            description=data.get("description", ""),
            document=data.get("document"),
        )
        return Response(
            ServiceRequestListSerializer(service_request).data,
            status=status.HTTP_201_CREATED,
        )


class CitizenPaymentView(APIView):
    """
    GET  /api/citizen/pay/<id>/ → amount due and current status.
    POST /api/citizen/pay/<id>/ → submit ``proof_file``.
    """

    permission_classes = [IsCitizen]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        summary="Payment form data",
        responses={
            200: PaymentFormSerializer,
            404: OpenApiResponse(description="No such request for this citizen."),
        },
        tags=["Citizen"],
    )
    def get(self, request: Request, request_id: int) -> Response:
        data = RequestQueryService.get_payment_form(request.user, request_id)
        return Response(PaymentFormSerializer(data).data)

    @extend_schema(
        summary="Submit payment proof",
        request={"multipart/form-data": PaymentSubmitSerializer},
        responses={
            201: OpenApiResponse(response=PaymentSerializer, description="Payment recorded."),
            404: OpenApiResponse(description="No such request for this citizen."),
            409: OpenApiResponse(description="Request is not awaiting payment."),
        },
        tags=["Citizen"],
    )
    def post(self, request: Request, request_id: int) -> Response:
        serializer = PaymentSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = PaymentService.submit_payment(
            request.user, request_id, serializer.validated_data["proof_file"],
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class MyRequestsView(APIView):
    permission_classes = [IsCitizen]

    @extend_schema(
        summary="Own requests",
        responses={200: ServiceRequestListSerializer(many=True)},
        tags=["Citizen"],
    )
    def get(self, request: Request) -> Response:
        requests = RequestQueryService.list_for_citizen(request.user)
        return Response(ServiceRequestListSerializer(requests, many=True).data)


# ═══════════════════════════════════════════════════════════════════
#  Officer Views
# ═══════════════════════════════════════════════════════════════════


class OfficerDashboardView(APIView):
    permission_classes = [IsOfficer]

    @extend_schema(
        summary="Officer dashboard",
        responses={200: OfficerDashboardSerializer},
        tags=["Officer"],
    )
    def get(self, request: Request) -> Response:
        data = DashboardService.officer_dashboard(request.user)
        return Response(OfficerDashboardSerializer(data).data)


class OfficerRequestListView(APIView):
    """GET /api/officer/requests/<pending|approved|rejected>/"""

    permission_classes = [IsOfficer]

    @extend_schema(
        summary="Scoped requests by status",
        responses={
            200: ServiceRequestListSerializer(many=True),
            400: OpenApiResponse(description="Unknown status filter."),
        },
        tags=["Officer"],
    )
    def get(self, request: Request, status_filter: str) -> Response:
        requests = RequestQueryService.list_for_officer(request.user, status_filter)
        return Response(ServiceRequestListSerializer(requests, many=True).data)


class OfficerRequestDetailView(APIView):
    permission_classes = [IsOfficer]

    @extend_schema(
        summary="Scoped request detail",
        responses={
            200: ServiceRequestDetailSerializer,
            404: OpenApiResponse(description="Absent or outside the officer's scope."),
        },
        tags=["Officer"],
    )
    def get(self, request: Request, request_id: int) -> Response:
        service_request = RequestQueryService.get_officer_detail(request.user, request_id)
        return Response(ServiceRequestDetailSerializer(service_request).data)


class OfficerDecisionView(APIView):
    """
    POST /api/officer/requests/<id>/approve/
    POST /api/officer/requests/<id>/reject/
    POST /api/officer_requests/<id>/<action>/

    The fixed routes pass ``outcome`` through ``as_view``; the generic
    route takes it from the URL.
    """

    permission_classes = [IsOfficer]
    parser_classes = [JSONParser, FormParser, MultiPartParser]
    outcome: str | None = None

    @extend_schema(
        summary="Approve or reject a request",
        request=DecisionSerializer,
        responses={
            200: OpenApiResponse(response=ServiceRequestListSerializer, description="Decision applied."),
            400: OpenApiResponse(description="Unknown action."),
            404: OpenApiResponse(description="Absent or outside the officer's scope."),
            409: OpenApiResponse(description="Request cannot be decided from its current status."),
        },
        tags=["Officer"],
    )
    def post(self, request: Request, request_id: int, action: str | None = None) -> Response:
        serializer = DecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service_request = RequestDecisionService.decide(
            request.user,
            request_id,
            action or self.outcome,
            message=serializer.validated_data.get("message", ""),
        )
        return Response(ServiceRequestListSerializer(service_request).data)
