"""
Core app URL configuration.

Portal entry point and cross-app reports.

URL prefix (registered in ``backend/urls.py``)::

    path('api/', include('core.urls'))

Endpoint summary
----------------
GET  /api/                 — Portal home (public).
GET  /api/admin/reports/   — Summary counts + activity log (admin).
"""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    path("", views.HomeView.as_view(), name="home"),
    path("admin/reports/", views.AdminReportsView.as_view(), name="admin-reports"),
]
