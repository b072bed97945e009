from django.contrib import admin

from .models import Document, Payment, RequestStatusLog, ServiceRequest


class DocumentInline(admin.TabularInline):
    model = Document
    extra = 0
    readonly_fields = ("file", "file_type", "uploaded_at")


class PaymentInline(admin.StackedInline):
    model = Payment
    extra = 0
    readonly_fields = ("amount", "status", "proof_file", "paid_at")


class RequestStatusLogInline(admin.TabularInline):
    model = RequestStatusLog
    extra = 0
    readonly_fields = ("from_status", "to_status", "changed_by", "message", "created_at")
    can_delete = False


@admin.register(ServiceRequest)
class ServiceRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "citizen", "service", "status", "created_at")
    list_filter = ("status", "service__department")
    search_fields = ("citizen__email", "citizen__name", "service__name")
    list_select_related = ("citizen", "service")
    # Status only moves through the lifecycle services.
    readonly_fields = ("status", "created_at", "updated_at")
    inlines = [DocumentInline, PaymentInline, RequestStatusLogInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "request", "amount", "status", "paid_at")
    list_filter = ("status",)
