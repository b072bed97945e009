"""
Service-requests app serializers.

Request and response shapes for the citizen, officer and payment
endpoints.  Uploads are size-checked here; every lifecycle rule lives in
``services.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from accounts.serializers import UserDetailSerializer
from catalog.serializers import ServiceSerializer
from core.constants import max_upload_bytes

from .models import Document, Payment, RequestStatus, RequestStatusLog, ServiceRequest


def _check_upload_size(upload):
    limit = max_upload_bytes()
    if upload is not None and upload.size > limit:
        raise serializers.ValidationError(f"File too large; the limit is {limit} bytes.")
    return upload


# ═══════════════════════════════════════════════════════════════════
#  Request Serializers (input)
# ═══════════════════════════════════════════════════════════════════


class ServiceRequestCreateSerializer(serializers.Serializer):
    """Multipart body of ``POST /api/citizen/apply/``."""

    service_id = serializers.IntegerField(min_value=1)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    document = serializers.FileField(required=False, allow_null=True)

    def validate_document(self, value):
        return _check_upload_size(value)


class PaymentSubmitSerializer(serializers.Serializer):
    """Multipart body of ``POST /api/citizen/pay/<id>/``."""

    proof_file = serializers.FileField()

    def validate_proof_file(self, value):
        return _check_upload_size(value)


class DecisionSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, default="")


# ═══════════════════════════════════════════════════════════════════
#  Response Serializers
# ═══════════════════════════════════════════════════════════════════


class DocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Document
        fields = ["id", "file", "file_type", "uploaded_at"]


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ["id", "amount", "status", "proof_file", "paid_at"]


class RequestStatusLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = RequestStatusLog
        fields = ["from_status", "to_status", "changed_by", "message", "created_at"]


class ServiceRequestListSerializer(serializers.ModelSerializer):
    """One row of the citizen / officer request tables."""

    service_name = serializers.CharField(source="service.name", read_only=True)
    department_name = serializers.CharField(source="service.department.name", read_only=True)
    citizen_name = serializers.CharField(source="citizen.name", read_only=True)

    class Meta:
        model = ServiceRequest
        fields = [
            "id",
            "service",
            "service_name",
            "department_name",
            "citizen",
            "citizen_name",
            "description",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ServiceRequestDetailSerializer(ServiceRequestListSerializer):
    """Officer view of one request: citizen, service, documents and payment."""

    citizen = UserDetailSerializer(read_only=True)
    service = ServiceSerializer(read_only=True)
    documents = DocumentSerializer(many=True, read_only=True)
    status_logs = RequestStatusLogSerializer(many=True, read_only=True)
    payment = serializers.SerializerMethodField()

    class Meta(ServiceRequestListSerializer.Meta):
        fields = ServiceRequestListSerializer.Meta.fields + ["documents", "payment", "status_logs"]
        read_only_fields = fields

    def get_payment(self, obj: ServiceRequest) -> dict | None:
        try:
            payment = obj.payment
        except Payment.DoesNotExist:
            return None
        return PaymentSerializer(payment, context=self.context).data


class PaymentFormSerializer(serializers.Serializer):
    request_id = serializers.IntegerField()
    service_name = serializers.CharField()
    status = serializers.ChoiceField(choices=RequestStatus.choices)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payable = serializers.BooleanField()


class CitizenDashboardSerializer(serializers.Serializer):
    user = UserDetailSerializer()
    requests = ServiceRequestListSerializer(many=True)


class OfficerDashboardSerializer(serializers.Serializer):
    user = UserDetailSerializer()
    department_name = serializers.CharField()
    service_name = serializers.CharField()
    counts = serializers.DictField(child=serializers.IntegerField())
