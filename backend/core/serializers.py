"""
Core app serializers.

Response-only shapes for the portal home and the admin reports page.
"""

from __future__ import annotations

from rest_framework import serializers


class PortalHomeSerializer(serializers.Serializer):
    name = serializers.CharField()
    links = serializers.DictField(child=serializers.CharField())


class ReportSummarySerializer(serializers.Serializer):
    """Store-wide counters."""

    total_users = serializers.IntegerField()
    total_departments = serializers.IntegerField()
    total_services = serializers.IntegerField()
    total_requests = serializers.IntegerField()
    awaiting_payment = serializers.IntegerField()
    under_review = serializers.IntegerField()
    approved_requests = serializers.IntegerField()
    rejected_requests = serializers.IntegerField()
    total_payments = serializers.IntegerField()


class ActivityLogEntrySerializer(serializers.Serializer):
    """One request in the activity log."""

    id = serializers.IntegerField()
    user_name = serializers.CharField()
    service_name = serializers.CharField()
    department_name = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()


class AdminReportSerializer(serializers.Serializer):
    summary = ReportSummarySerializer()
    activity = ActivityLogEntrySerializer(many=True)
