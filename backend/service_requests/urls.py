"""
Service-requests app URL configuration.

Included in the project-level ``urls.py`` as::

    path('api/', include('service_requests.urls')),

Endpoint Map
------------
Any session
    GET    /service/{id}/                         → ServiceApplyRedirectView (302)

Citizen
    GET    /citizen/dashboard/                    → CitizenDashboardView
    GET    /citizen/apply/                        → CitizenApplyView (form data)
    POST   /citizen/apply/                        → CitizenApplyView
    GET    /citizen/pay/{id}/                     → CitizenPaymentView (form data)
    POST   /citizen/pay/{id}/                     → CitizenPaymentView
    GET    /my_requests/                          → MyRequestsView

Officer
    GET    /officer/dashboard/                    → OfficerDashboardView
    GET    /officer/requests/{status}/            → OfficerRequestListView
    GET    /officer/requests/{id}/view/           → OfficerRequestDetailView
    POST   /officer/requests/{id}/approve/        → OfficerDecisionView
    POST   /officer/requests/{id}/reject/         → OfficerDecisionView
    POST   /officer_requests/{id}/{action}/       → OfficerDecisionView
"""

from django.urls import path

from . import views

app_name = "service_requests"

urlpatterns = [
    path(
        "service/<int:service_id>/",
        views.ServiceApplyRedirectView.as_view(),
        name="service-apply-redirect",
    ),

    # ── Citizen ──────────────────────────────────────────────────────
    path(
        "citizen/dashboard/",
        views.CitizenDashboardView.as_view(),
        name="citizen-dashboard",
    ),
    path(
        "citizen/apply/",
        views.CitizenApplyView.as_view(),
        name="citizen-apply",
    ),
    path(
        "citizen/pay/<int:request_id>/",
        views.CitizenPaymentView.as_view(),
        name="citizen-pay",
    ),
    path(
        "my_requests/",
        views.MyRequestsView.as_view(),
        name="my-requests",
    ),

    # ── Officer ──────────────────────────────────────────────────────
    path(
        "officer/dashboard/",
        views.OfficerDashboardView.as_view(),
        name="officer-dashboard",
    ),
    path(
        "officer/requests/<int:request_id>/view/",
        views.OfficerRequestDetailView.as_view(),
        name="officer-request-detail",
    ),
    path(
        "officer/requests/<int:request_id>/approve/",
        views.OfficerDecisionView.as_view(outcome="approve"),
        name="officer-request-approve",
    ),
    path(
        "officer/requests/<int:request_id>/reject/",
        views.OfficerDecisionView.as_view(outcome="reject"),
        name="officer-request-reject",
    ),
    path(
        "officer/requests/<str:status_filter>/",
        views.OfficerRequestListView.as_view(),
        name="officer-request-list",
    ),
    path(
        "officer_requests/<int:request_id>/<str:action>/",
        views.OfficerDecisionView.as_view(),
        name="officer-request-action",
    ),
]
