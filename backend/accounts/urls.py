"""
Accounts app URL configuration.

All routes are namespaced under ``accounts`` and included in the
project-level ``urls.py`` as::

    path('api/', include('accounts.urls')),

Endpoint Map
------------
Authentication
    POST   /register/                   → RegisterView
    POST   /login/                      → LoginView
    POST   /logout/                     → LogoutView
    GET    /me/                         → MeView

Profile
    POST   /upload_profile/             → UploadProfileView

Admin
    GET    /admin/dashboard/            → AdminDashboardView
    GET    /admin/users/                → AdminUserListView
    GET    /admin/users/add/            → AdminUserCreateView (form data)
    POST   /admin/users/add/            → AdminUserCreateView
    GET    /admin/users/edit/{id}/      → AdminUserEditView (form data)
    POST   /admin/users/edit/{id}/      → AdminUserEditView
    POST   /admin/users/delete/{id}/    → AdminUserDeleteView
    DELETE /admin/users/delete/{id}/    → AdminUserDeleteView
"""

from django.urls import path

from .views import (
    AdminDashboardView,
    AdminUserCreateView,
    AdminUserDeleteView,
    AdminUserEditView,
    AdminUserListView,
    LoginView,
    LogoutView,
    MeView,
    RegisterView,
    UploadProfileView,
)

app_name = "accounts"

urlpatterns = [
    # ── Authentication ───────────────────────────────────────────────
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # ── Profile ──────────────────────────────────────────────────────
    path("upload_profile/", UploadProfileView.as_view(), name="upload-profile"),

    # ── Admin: dashboard & users ─────────────────────────────────────
    path("admin/dashboard/", AdminDashboardView.as_view(), name="admin-dashboard"),
    path("admin/users/", AdminUserListView.as_view(), name="admin-user-list"),
    path("admin/users/add/", AdminUserCreateView.as_view(), name="admin-user-add"),
    path(
        "admin/users/edit/<int:user_id>/",
        AdminUserEditView.as_view(),
        name="admin-user-edit",
    ),
    path(
        "admin/users/delete/<int:user_id>/",
        AdminUserDeleteView.as_view(),
        name="admin-user-delete",
    ),
]
