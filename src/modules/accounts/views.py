"""Account API views.

Thin ViewSets: build the DTO and the ``Caller``, call the service, render.
Domain errors propagate to ``modules.core.exception_handler``.
"""

from __future__ import annotations

from collections.abc import Mapping

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import (
    AddressDTO,
    ChangePasswordDTO,
    ForgotPasswordDTO,
    LoginDTO,
    ProfileUpdateDTO,
    RegisterDTO,
    ResetPasswordDTO,
    RoleUpdateDTO,
    VerifyOTPDTO,
)
from modules.accounts.repositories import UserDjangoRepository
from modules.accounts.serializers import (
    AddressSerializer,
    AuthUserSerializer,
    UserSerializer,
)
from modules.accounts.services import AuthService, PasswordResetService, ProfileService
from modules.core.authentication import caller_from_request
from modules.core.permissions import IsAdmin


def _auth_payload(user, tokens) -> dict:
    return {**tokens, "user": AuthUserSerializer(user).data}


def _body(request: Request) -> Mapping:
    """The request body when it is a JSON object, else an empty mapping."""
    return request.data if isinstance(request.data, Mapping) else {}


class AuthViewSet(GenericViewSet):
    """``/api/auth/``: register, login, me and role management."""

    permission_classes = [AllowAny]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AuthService(user_repository=UserDjangoRepository())

    def get_permissions(self):
        if self.action == "me":
            return [IsAuthenticated()]
        if self.action == "update_role":
            return [IsAdmin()]
        return super().get_permissions()

    @action(detail=False, methods=["post"])
    def register(self, request: Request) -> Response:
        user, tokens = self._service.register(RegisterDTO.model_validate(request.data))
        return Response(
            {
                "success": True,
                "message": "User registered successfully",
                "data": _auth_payload(user, tokens),
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["post"])
    def login(self, request: Request) -> Response:
        user, tokens = self._service.login(LoginDTO.model_validate(request.data))
        return Response(
            {
                "success": True,
                "message": "Login successful",
                "data": _auth_payload(user, tokens),
            }
        )

    @action(detail=False, methods=["get"])
    def me(self, request: Request) -> Response:
        user = self._service.get_current_user(caller_from_request(request))
        return Response({"success": True, "data": UserSerializer(user).data})

    @action(
        detail=False,
        methods=["put"],
        url_path=r"users/(?P<user_id>[^/.]+)/role",
        url_name="update-role",
    )
    def update_role(self, request: Request, user_id: str) -> Response:
        user = self._service.update_role(
            caller_from_request(request),
            user_id,
            RoleUpdateDTO.model_validate(request.data),
        )
        return Response(
            {
                "success": True,
                "message": "User role updated successfully",
                "data": AuthUserSerializer(user).data,
            }
        )


class UserViewSet(GenericViewSet):
    """``/api/users/``: profile, address book and password reset."""

    permission_classes = [IsAuthenticated]

    PUBLIC_ACTIONS = {"forgot_password", "verify_otp", "reset_password"}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = UserDjangoRepository()
        self._profile = ProfileService(user_repository=repository)
        self._reset = PasswordResetService(user_repository=repository)

    def get_permissions(self):
        if self.action in self.PUBLIC_ACTIONS:
            return [AllowAny()]
        return super().get_permissions()

    def get_throttles(self):
        self.throttle_scope = (
            "password_reset" if self.action in self.PUBLIC_ACTIONS else None
        )
        return super().get_throttles()

    def _addresses_response(self, addresses, http_status=status.HTTP_200_OK) -> Response:
        return Response(
            {"success": True, "addresses": AddressSerializer(addresses, many=True).data},
            status=http_status,
        )

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get", "put"])
    def me(self, request: Request) -> Response:
        caller = caller_from_request(request)
        if request.method == "GET":
            user = self._profile.get_profile(caller)
        else:
            user = self._profile.update_profile(
                caller, ProfileUpdateDTO.model_validate(request.data)
            )
        return Response({"success": True, "user": UserSerializer(user).data})

    @action(detail=False, methods=["put"], url_path="change-password")
    def change_password(self, request: Request) -> Response:
        self._profile.change_password(
            caller_from_request(request), ChangePasswordDTO.model_validate(request.data)
        )
        return Response({"success": True, "message": "Password updated successfully"})

    # ------------------------------------------------------------------
    # Address book
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get", "post"])
    def addresses(self, request: Request) -> Response:
        caller = caller_from_request(request)
        if request.method == "GET":
            return self._addresses_response(self._profile.list_addresses(caller))
        addresses = self._profile.add_address(
            caller, AddressDTO.model_validate(request.data)
        )
        return self._addresses_response(addresses, status.HTTP_201_CREATED)

    @action(
        detail=False,
        methods=["put", "delete"],
        url_path=r"addresses/(?P<address_id>[^/.]+)",
        url_name="address-detail",
    )
    def address_detail(self, request: Request, address_id: str) -> Response:
        caller = caller_from_request(request)
        if request.method == "DELETE":
            addresses = self._profile.delete_address(caller, address_id)
        else:
            addresses = self._profile.update_address(
                caller, address_id, AddressDTO.model_validate(request.data)
            )
        return self._addresses_response(addresses)

    @action(
        detail=False,
        methods=["put"],
        url_path=r"addresses/(?P<address_id>[^/.]+)/default",
        url_name="address-default",
    )
    def set_default_address(self, request: Request, address_id: str) -> Response:
        addresses = self._profile.set_default_address(
            caller_from_request(request), address_id
        )
        return self._addresses_response(addresses)

    # ------------------------------------------------------------------
    # Password reset (public)
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"], url_path="forgot-password")
    def forgot_password(self, request: Request) -> Response:
        email = self._reset.request_otp(ForgotPasswordDTO.model_validate(request.data))
        return Response(
            {
                "success": True,
                "message": "OTP sent successfully to your email",
                "email": email,
            }
        )

    @action(detail=False, methods=["post"], url_path="verify-otp")
    def verify_otp(self, request: Request) -> Response:
        token = self._reset.verify_otp(VerifyOTPDTO.model_validate(request.data))
        return Response(
            {
                "success": True,
                "message": "OTP verified successfully",
                "reset_token": token,
            }
        )

    @action(
        detail=False,
        methods=["post"],
        url_path=r"reset-password/(?P<token>[0-9a-fA-F]+)",
        url_name="reset-password",
    )
    def reset_password(self, request: Request, token: str) -> Response:
        self._reset.reset_password(
            ResetPasswordDTO(token=token, password=_body(request).get("password", ""))
        )
        return Response(
            {"success": True, "message": "Password has been reset successfully"}
        )
