"""Account service layer (Use Cases).

- ``AuthService``: registration, login, current user, role management.
- ``ProfileService``: profile, password change and the address book.
- ``PasswordResetService``: emailed OTP -> reset token -> new password.

Services receive the acting ``Caller`` explicitly and never read
``request.user``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Tuple

import structlog
from django.conf import settings
from django.db import transaction
from rest_framework_simplejwt.tokens import RefreshToken

from modules.accounts.constants import UserRole
from modules.accounts.exceptions import (
    AccountDisabled,
    AddressNotFound,
    EmailInUse,
    IncorrectPassword,
    InvalidCredentials,
    InvalidOTP,
    InvalidResetToken,
    OTPDeliveryFailed,
    SelfDemotion,
    UserAlreadyExists,
    UserNotFound,
)
from modules.accounts.models import Address
from modules.notifications import emails
from modules.notifications.tasks import queue_email

if TYPE_CHECKING:
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
    from modules.accounts.models import User
    from modules.accounts.repositories.interfaces import IUserRepository
    from modules.core.authentication import Caller

logger = structlog.get_logger(__name__)


def issue_tokens(user: User) -> Dict[str, str]:
    """Access + refresh JWT pair carrying the user's role as a claim."""
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    return {"token": str(refresh.access_token), "refresh": str(refresh)}


class AuthService:
    def __init__(self, user_repository: IUserRepository) -> None:
        self._repo = user_repository

    @transaction.atomic
    def register(self, dto: RegisterDTO) -> Tuple[User, Dict[str, str]]:
        """Create a ``user`` account and queue the welcome email.

        Raises:
            UserAlreadyExists: the email is already registered.
        """
        if self._repo.email_taken(dto.email):
            logger.info("user.register_duplicate")
            raise UserAlreadyExists()

        user = self._repo.create(
            {"name": dto.name, "email": dto.email, "phone": dto.phone},
            password=dto.password,
        )
        queue_email("welcome", user.name, user.email)
        logger.info("user.registered", user_id=str(user.id))
        return user, issue_tokens(user)

    def login(self, dto: LoginDTO) -> Tuple[User, Dict[str, str]]:
        """Raises ``InvalidCredentials`` for unknown email or wrong password."""
        user = self._repo.get_by_email(dto.email)
        if user is None or not user.check_password(dto.password):
            logger.info("user.login_failed")
            raise InvalidCredentials()
        if not user.is_active:
            raise AccountDisabled()
        logger.info("user.logged_in", user_id=str(user.id))
        return user, issue_tokens(user)

    def get_current_user(self, caller: Caller) -> User:
        user = self._repo.get_by_id(str(caller.user_id))
        if user is None:
            raise UserNotFound()
        return user

    @transaction.atomic
    def update_role(self, caller: Caller, user_id: str, dto: RoleUpdateDTO) -> User:
        """Change another account's role (admin only, enforced by the view).

        Raises:
            UserNotFound: no such user.
            SelfDemotion: an admin tried to drop their own admin role.
        """
        user = self._repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound()
        if caller.owns(user.id) and dto.role != UserRole.ADMIN:
            raise SelfDemotion()

        old_role = user.role
        user.role = dto.role
        self._repo.save(user)
        logger.info(
            "user.role_updated",
            user_id=str(user.id),
            old_role=old_role,
            new_role=user.role,
            by=str(caller.user_id),
        )
        return user


class ProfileService:
    def __init__(self, user_repository: IUserRepository) -> None:
        self._repo = user_repository

    def get_profile(self, caller: Caller) -> User:
        user = self._repo.get_by_id(str(caller.user_id))
        if user is None:
            raise UserNotFound()
        return user

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_profile(self, caller: Caller, dto: ProfileUpdateDTO) -> User:
        user = self.get_profile(caller)
        if dto.email is not None and dto.email != user.email:
            if self._repo.email_taken(dto.email, exclude_id=str(user.id)):
                raise EmailInUse()
            user.email = dto.email
        if dto.name is not None:
            user.name = dto.name
        if dto.phone is not None:
            user.phone = dto.phone
        return self._repo.save(user)

    @transaction.atomic
    def change_password(self, caller: Caller, dto: ChangePasswordDTO) -> None:
        user = self.get_profile(caller)
        if not user.check_password(dto.current_password):
            raise IncorrectPassword()
        user.set_password(dto.new_password)
        self._repo.save(user)
        logger.info("user.password_changed", user_id=str(user.id))

    # ------------------------------------------------------------------
    # Address book
    # ------------------------------------------------------------------

    def list_addresses(self, caller: Caller) -> List[Address]:
        return self._repo.list_addresses(str(caller.user_id))

    @transaction.atomic
    def add_address(self, caller: Caller, dto: AddressDTO) -> List[Address]:
        """Add an address; the first one, or one flagged default, becomes default."""
        user = self.get_profile(caller)
        existing = self._repo.list_addresses(str(user.id))
        make_default = dto.is_default or not existing
        if make_default:
            self._repo.clear_default_address(str(user.id))
        self._repo.save_address(
            Address(
                user=user,
                is_default=make_default,
                **dto.model_dump(exclude={"is_default"}),
            )
        )
        return self._repo.list_addresses(str(user.id))

    @transaction.atomic
    def update_address(
        self, caller: Caller, address_id: str, dto: AddressDTO
    ) -> List[Address]:
        address = self._get_address(caller, address_id)
        if dto.is_default and not address.is_default:
            self._repo.clear_default_address(str(caller.user_id))
            address.is_default = True
        for field, value in dto.model_dump(exclude={"is_default"}).items():
            setattr(address, field, value)
        self._repo.save_address(address)
        return self._repo.list_addresses(str(caller.user_id))

    @transaction.atomic
    def delete_address(self, caller: Caller, address_id: str) -> List[Address]:
        """Delete an address; removing the default promotes the oldest remaining one."""
        address = self._get_address(caller, address_id)
        was_default = address.is_default
        self._repo.delete_address(address)

        remaining = self._repo.list_addresses(str(caller.user_id))
        if was_default and remaining:
            promoted = remaining[0]
            promoted.is_default = True
            self._repo.save_address(promoted)
        return self._repo.list_addresses(str(caller.user_id))

    @transaction.atomic
    def set_default_address(self, caller: Caller, address_id: str) -> List[Address]:
        address = self._get_address(caller, address_id)
        self._repo.clear_default_address(str(caller.user_id))
        address.is_default = True
        self._repo.save_address(address)
        return self._repo.list_addresses(str(caller.user_id))

    def _get_address(self, caller: Caller, address_id: str) -> Address:
        address = self._repo.get_address(str(caller.user_id), address_id)
        if address is None:
            raise AddressNotFound()
        return address


class PasswordResetService:
    def __init__(self, user_repository: IUserRepository) -> None:
        self._repo = user_repository

    def request_otp(self, dto: ForgotPasswordDTO) -> str:
        """Store a fresh OTP and email it; returns the address it went to.

        The OTP is cleared again when the email cannot be delivered, so an
        undeliverable code never stays valid.

        Raises:
            UserNotFound: no account with this email.
            OTPDeliveryFailed: the email provider refused or is not configured.
        """
        user = self._repo.get_by_email(dto.email)
        if user is None:
            raise UserNotFound("No user found with this email address")

        otp = user.issue_reset_otp(settings.PASSWORD_RESET_OTP_TTL)
        self._repo.save(user)

        result = emails.send_password_otp(user.name, user.email, otp)
        if not result.success:
            user.clear_reset_otp()
            self._repo.save(user)
            logger.error("user.otp_delivery_failed", user_id=str(user.id))
            raise OTPDeliveryFailed()

        logger.info("user.otp_sent", user_id=str(user.id))
        return user.email

    @transaction.atomic
    def verify_otp(self, dto: VerifyOTPDTO) -> str:
        """Exchange a valid OTP for a one-hour reset token (returned in clear)."""
        user = self._repo.get_by_email(dto.email)
        if user is None or not user.check_reset_otp(dto.otp):
            raise InvalidOTP()

        token = user.issue_reset_token(settings.PASSWORD_RESET_TOKEN_TTL)
        user.clear_reset_otp()
        self._repo.save(user)
        logger.info("user.otp_verified", user_id=str(user.id))
        return token

    @transaction.atomic
    def reset_password(self, dto: ResetPasswordDTO) -> None:
        user = self._repo.get_by_reset_token(dto.token)
        if user is None:
            raise InvalidResetToken()

        user.set_password(dto.password)
        user.clear_reset_token()
        self._repo.save(user)
        queue_email("password_reset_success", user.name, user.email)
        logger.info("user.password_reset", user_id=str(user.id))
