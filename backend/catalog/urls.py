"""
Catalog app URL configuration.

Included in the project-level ``urls.py`` as::

    path('api/', include('catalog.urls')),

Endpoint Map
------------
Public
    GET    /services/                          → ServiceListView

Admin: Departments
    GET    /admin/departments/                 → AdminDepartmentListView
    POST   /admin/departments/add/             → AdminDepartmentCreateView
    GET    /admin/departments/edit/{id}/       → AdminDepartmentEditView
    POST   /admin/departments/edit/{id}/       → AdminDepartmentEditView
    POST   /admin/departments/delete/{id}/     → AdminDepartmentDeleteView

Admin: Services
    GET    /admin/services/                    → AdminServiceListView
    GET    /admin/services/add/                → AdminServiceCreateView (form data)
    POST   /admin/services/add/                → AdminServiceCreateView
    GET    /admin/services/edit/{id}/          → AdminServiceEditView (form data)
    POST   /admin/services/edit/{id}/          → AdminServiceEditView
    POST   /admin/services/delete/{id}/        → AdminServiceDeleteView
    GET    /admin/getServices/{department_id}/ → DepartmentServicesView
"""

from django.urls import path

from . import views

app_name = "catalog"

urlpatterns = [
    # ── Public ───────────────────────────────────────────────────────
    path("services/", views.ServiceListView.as_view(), name="service-list"),

    # ── Admin: departments ───────────────────────────────────────────
    path(
        "admin/departments/",
        views.AdminDepartmentListView.as_view(),
        name="admin-department-list",
    ),
    path(
        "admin/departments/add/",
        views.AdminDepartmentCreateView.as_view(),
        name="admin-department-add",
    ),
    path(
        "admin/departments/edit/<int:department_id>/",
        views.AdminDepartmentEditView.as_view(),
        name="admin-department-edit",
    ),
    path(
        "admin/departments/delete/<int:department_id>/",
        views.AdminDepartmentDeleteView.as_view(),
        name="admin-department-delete",
    ),

    # ── Admin: services ──────────────────────────────────────────────
    path(
        "admin/services/",
        views.AdminServiceListView.as_view(),
        name="admin-service-list",
    ),
    path(
        "admin/services/add/",
        views.AdminServiceCreateView.as_view(),
        name="admin-service-add",
    ),
    path(
        "admin/services/edit/<int:service_id>/",
        views.AdminServiceEditView.as_view(),
        name="admin-service-edit",
    ),
    path(
        "admin/services/delete/<int:service_id>/",
        views.AdminServiceDeleteView.as_view(),
        name="admin-service-delete",
    ),
    path(
        "admin/getServices/<int:department_id>/",
        views.DepartmentServicesView.as_view(),
        name="department-services",
    ),
]
