"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``RegisterView``            — POST /api/register/
- ``LoginView``               — POST /api/login/
- ``LogoutView``              — POST /api/logout/
- ``MeView``                  — GET  /api/me/
- ``UploadProfileView``       — POST /api/upload_profile/
- ``AdminDashboardView``      — GET  /api/admin/dashboard/
- ``AdminUserListView``       — GET  /api/admin/users/
- ``AdminUserCreateView``     — GET / POST /api/admin/users/add/
- ``AdminUserEditView``       — GET / POST /api/admin/users/edit/<id>/
- ``AdminUserDeleteView``     — POST / DELETE /api/admin/users/delete/<id>/
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)

from catalog.services import DepartmentAdminService
from core.domain.exceptions import AuthenticationRequired

from .models import UserRole
from .permissions import IsAdmin, IsPortalUser
from .serializers import (
    AdminUserWriteSerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
    ProfilePictureUploadSerializer,
    RegisterRequestSerializer,
    SessionIdentitySerializer,
    UserDetailSerializer,
    UserFormSerializer,
)
from .services import (
    AuthenticationService,
    CurrentUserService,
    UserManagementService,
    UserRegistrationService,
    dashboard_url,
)


def _user_form_payload(user=None) -> dict:
    payload = {
        "departments": DepartmentAdminService.list_departments(),
        "roles": list(UserRole.values),
    }
    if user is not None:
        payload["user"] = user
    return UserFormSerializer(payload).data


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class RegisterView(APIView):
    """
    POST /api/register/

    Public endpoint.  Creates a citizen account; officers and admins
    are only ever created by an admin.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Register a citizen",
        request=RegisterRequestSerializer,
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="Citizen created."),
            400: OpenApiResponse(description="Validation error (e.g. malformed e-mail)."),
            409: OpenApiResponse(description="E-mail already registered."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserRegistrationService.register_citizen(serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    POST /api/login/

    Verifies the e-mail / password pair, binds a fresh server-side
    session to the user and returns the path of the role's dashboard.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(response=LoginResponseSerializer, description="Session established."),
            401: OpenApiResponse(description="Invalid email or password."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, identity = AuthenticationService.login(
            request.session,
            email=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
            request=request._request,
        )
        payload = {"user": user, "redirect": dashboard_url(identity.role)}
        return Response(LoginResponseSerializer(payload).data, status=status.HTTP_200_OK)


class LogoutView(APIView):
    """POST /api/logout/ — destroys the session; harmless when anonymous."""

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log out",
        request=None,
        responses={200: OpenApiResponse(description="Session destroyed.")},
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        AuthenticationService.logout(request.session)
        return Response({"detail": "Logged out."}, status=status.HTTP_200_OK)


class MeView(APIView):
    """
    GET /api/me/

    Returns the session identity, or 401 when there is none.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Current session identity",
        responses={
            200: OpenApiResponse(response=SessionIdentitySerializer, description="Logged in."),
            401: OpenApiResponse(description="Not logged in."),
        },
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        identity = request.auth
        if identity is None:
            raise AuthenticationRequired("Not logged in.")
        return Response(SessionIdentitySerializer(identity).data)


class UploadProfileView(APIView):
    """
    POST /api/upload_profile/

    Multipart upload in the ``profile_pic`` field; any logged-in role.
    """

    permission_classes = [IsPortalUser]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        summary="Upload profile picture",
        request={"multipart/form-data": ProfilePictureUploadSerializer},
        responses={
            200: OpenApiResponse(response=UserDetailSerializer, description="Picture stored."),
            400: OpenApiResponse(description="Missing or invalid image."),
        },
        tags=["Profile"],
    )
    def post(self, request: Request) -> Response:
        serializer = ProfilePictureUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = CurrentUserService.update_profile_picture(
            request.user, serializer.validated_data["profile_pic"],
        )
        return Response(UserDetailSerializer(user).data)


# ═══════════════════════════════════════════════════════════════════
#  Admin Views
# ═══════════════════════════════════════════════════════════════════


class AdminDashboardView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Admin dashboard",
        responses={200: OpenApiResponse(response=UserDetailSerializer, description="Admin profile.")},
        tags=["Admin"],
    )
    def get(self, request: Request) -> Response:
        return Response({"user": UserDetailSerializer(request.user).data})


class AdminUserListView(APIView):
    """GET /api/admin/users/?role=&search="""

    permission_classes = [IsAdmin]

    @extend_schema(
        summary="List users",
        parameters=[
            OpenApiParameter("role", str, description="Filter by role."),
            OpenApiParameter("search", str, description="Match on name, e-mail or national id."),
        ],
        responses={200: UserDetailSerializer(many=True)},
        tags=["Admin: Users"],
    )
    def get(self, request: Request) -> Response:
        users = UserManagementService.list_users(
            role=request.query_params.get("role"),
            search=request.query_params.get("search"),
        )
        return Response(UserDetailSerializer(users, many=True).data)


class AdminUserCreateView(APIView):
    permission_classes = [IsAdmin]
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    @extend_schema(
        summary="Add-user form data",
        responses={200: UserFormSerializer},
        tags=["Admin: Users"],
    )
    def get(self, request: Request) -> Response:
        return Response(_user_form_payload())

    @extend_schema(
        summary="Create a user",
        request=AdminUserWriteSerializer,
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="User created."),
            400: OpenApiResponse(description="Validation error or inconsistent officer assignment."),
            409: OpenApiResponse(description="E-mail already registered."),
        },
        tags=["Admin: Users"],
    )
    def post(self, request: Request) -> Response:
        serializer = AdminUserWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService.create_user(serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_201_CREATED)


class AdminUserEditView(APIView):
    permission_classes = [IsAdmin]
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    @extend_schema(
        summary="Edit-user form data",
        responses={200: UserFormSerializer},
        tags=["Admin: Users"],
    )
    def get(self, request: Request, user_id: int) -> Response:
        user = UserManagementService.get_user(user_id)
        return Response(_user_form_payload(user))

    @extend_schema(
        summary="Update a user",
        request=AdminUserWriteSerializer,
        responses={
            200: OpenApiResponse(response=UserDetailSerializer, description="User updated."),
            400: OpenApiResponse(description="Validation error."),
            404: OpenApiResponse(description="No such user."),
            409: OpenApiResponse(description="E-mail already registered."),
        },
        tags=["Admin: Users"],
    )
    def post(self, request: Request, user_id: int) -> Response:
        serializer = AdminUserWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService.update_user(user_id, serializer.validated_data)
        return Response(UserDetailSerializer(user).data)


class AdminUserDeleteView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        summary="Delete a user",
        request=None,
        responses={
            204: OpenApiResponse(description="Deleted."),
            400: OpenApiResponse(description="Cannot delete own account."),
            409: OpenApiResponse(description="User still owns service requests."),
        },
        tags=["Admin: Users"],
    )
    def delete(self, request: Request, user_id: int) -> Response:
        UserManagementService.delete_user(user_id, performed_by=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(exclude=True)
    def post(self, request: Request, user_id: int) -> Response:
        return self.delete(request, user_id)
