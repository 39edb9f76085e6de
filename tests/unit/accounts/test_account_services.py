"""Unit tests for the account services.

Covers registration and login, role management, the address book and the
OTP password reset flow.
"""

from __future__ import annotations

from datetime import timedelta
from unittest import mock

import pytest
from django.utils import timezone
from pydantic import ValidationError as PydanticValidationError

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
from modules.accounts.models import User
from modules.accounts.repositories import UserDjangoRepository
from modules.accounts.services import AuthService, PasswordResetService, ProfileService
from modules.notifications.client import EmailResult

pytestmark = pytest.mark.unit

PASSWORD = "Secret123"

HOME = {
    "full_name": "Asha Menon",
    "address_line1": "14 Lake View Road",
    "city": "Kochi",
    "state": "Kerala",
    "pincode": "682001",
    "phone": "9876543210",
}


@pytest.fixture()
def auth():
    return AuthService(user_repository=UserDjangoRepository())


@pytest.fixture()
def profile():
    return ProfileService(user_repository=UserDjangoRepository())


@pytest.fixture()
def reset():
    return PasswordResetService(user_repository=UserDjangoRepository())


class TestRegisterAndLogin:
    def test_register_creates_user_role_account(self, auth, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks() as callbacks:
            user, tokens = auth.register(
                RegisterDTO(name="Ravi Kumar", email="Ravi@Example.com", password=PASSWORD)
            )
        assert user.email == "ravi@example.com"
        assert user.role == "user"
        assert set(tokens) == {"token", "refresh"}
        # welcome email queued after commit
        assert len(callbacks) == 1

    def test_duplicate_email(self, auth, user):
        with pytest.raises(UserAlreadyExists):
            auth.register(RegisterDTO(name="Asha", email=user.email, password=PASSWORD))

    @pytest.mark.parametrize("password", ["short1A", "alllowercase1", "NoDigitsHere"])
    def test_password_policy(self, password):
        with pytest.raises(PydanticValidationError, match="Password must be at least 8"):
            RegisterDTO(name="Ravi", email="ravi@example.com", password=password)

    def test_login(self, auth, user):
        logged_in, tokens = auth.login(LoginDTO(email="ASHA@example.com", password=PASSWORD))
        assert logged_in.id == user.id
        assert tokens["token"]

    def test_wrong_password(self, auth, user):
        with pytest.raises(InvalidCredentials):
            auth.login(LoginDTO(email=user.email, password="Wrong1234"))

    def test_unknown_email_gives_same_error(self, auth):
        with pytest.raises(InvalidCredentials):
            auth.login(LoginDTO(email="nobody@example.com", password=PASSWORD))

    def test_deactivated_account(self, auth, user):
        user.is_active = False
        user.save()
        with pytest.raises(AccountDisabled):
            auth.login(LoginDTO(email=user.email, password=PASSWORD))


class TestRoles:
    def test_admin_promotes_user(self, auth, admin_caller, user):
        updated = auth.update_role(admin_caller, str(user.id), RoleUpdateDTO(role="admin"))
        assert updated.role == "admin"

    def test_admin_cannot_demote_self(self, auth, admin_caller, admin_user):
        with pytest.raises(SelfDemotion):
            auth.update_role(admin_caller, str(admin_user.id), RoleUpdateDTO(role="user"))

    def test_unknown_user(self, auth, admin_caller):
        with pytest.raises(UserNotFound):
            auth.update_role(admin_caller, "missing", RoleUpdateDTO(role="user"))


class TestProfile:
    def test_update_profile(self, profile, user_caller):
        user = profile.update_profile(
            user_caller, ProfileUpdateDTO(name="Asha M", phone="9000000000")
        )
        assert user.name == "Asha M"
        assert user.email == "asha@example.com"

    def test_email_in_use(self, profile, user_caller, other_user):
        with pytest.raises(EmailInUse):
            profile.update_profile(user_caller, ProfileUpdateDTO(email=other_user.email))

    def test_change_password(self, profile, user_caller, user):
        profile.change_password(
            user_caller,
            ChangePasswordDTO(current_password=PASSWORD, new_password="Another123"),
        )
        user.refresh_from_db()
        assert user.check_password("Another123")

    def test_change_password_requires_current(self, profile, user_caller):
        with pytest.raises(IncorrectPassword):
            profile.change_password(
                user_caller,
                ChangePasswordDTO(current_password="Nope12345", new_password="Another123"),
            )


class TestAddressBook:
    def test_first_address_becomes_default(self, profile, user_caller):
        addresses = profile.add_address(user_caller, AddressDTO(**HOME))
        assert len(addresses) == 1
        assert addresses[0].is_default is True

    def test_new_default_clears_previous(self, profile, user_caller):
        profile.add_address(user_caller, AddressDTO(**HOME))
        addresses = profile.add_address(
            user_caller,
            AddressDTO(**{**HOME, "address_line1": "2 Beach Road"}, is_default=True),
        )
        assert [a.is_default for a in addresses] == [False, True]

    def test_deleting_default_promotes_oldest(self, profile, user_caller):
        first = profile.add_address(user_caller, AddressDTO(**HOME))[0]
        profile.add_address(user_caller, AddressDTO(**{**HOME, "city": "Thrissur"}))
        profile.add_address(user_caller, AddressDTO(**{**HOME, "city": "Kannur"}))

        addresses = profile.delete_address(user_caller, str(first.id))
        assert [a.city for a in addresses] == ["Thrissur", "Kannur"]
        assert addresses[0].is_default is True

    def test_set_default(self, profile, user_caller):
        profile.add_address(user_caller, AddressDTO(**HOME))
        second = profile.add_address(user_caller, AddressDTO(**{**HOME, "city": "Kannur"}))[1]
        addresses = profile.set_default_address(user_caller, str(second.id))
        assert [a.is_default for a in addresses] == [False, True]

    def test_other_users_address_is_not_found(self, profile, user_caller, other_caller):
        address = profile.add_address(user_caller, AddressDTO(**HOME))[0]
        with pytest.raises(AddressNotFound):
            profile.delete_address(other_caller, str(address.id))

    def test_pincode_format(self):
        with pytest.raises(PydanticValidationError):
            AddressDTO(**{**HOME, "pincode": "6820"})


class TestPasswordReset:
    def _request(self, reset, user):
        with mock.patch(
            "modules.accounts.services.emails.send_password_otp",
            return_value=EmailResult(success=True),
        ) as send:
            reset.request_otp(ForgotPasswordDTO(email=user.email))
        return send.call_args.args[2]

    def test_full_flow(self, reset, user, django_capture_on_commit_callbacks):
        otp = self._request(reset, user)
        assert len(otp) == 5 and otp.isdigit()

        token = reset.verify_otp(VerifyOTPDTO(email=user.email, otp=otp))
        with django_capture_on_commit_callbacks() as callbacks:
            reset.reset_password(ResetPasswordDTO(token=token, password="Brandnew123"))

        user.refresh_from_db()
        assert user.check_password("Brandnew123")
        assert user.password_reset_otp == ""
        assert user.password_reset_token == ""
        assert len(callbacks) == 1

    def test_otp_is_single_use(self, reset, user):
        otp = self._request(reset, user)
        reset.verify_otp(VerifyOTPDTO(email=user.email, otp=otp))
        with pytest.raises(InvalidOTP):
            reset.verify_otp(VerifyOTPDTO(email=user.email, otp=otp))

    def test_expired_otp(self, reset, user):
        otp = self._request(reset, user)
        User.objects.filter(id=user.id).update(
            password_reset_otp_expires_at=timezone.now() - timedelta(seconds=1)
        )
        with pytest.raises(InvalidOTP):
            reset.verify_otp(VerifyOTPDTO(email=user.email, otp=otp))

    def test_otp_stored_as_digest(self, reset, user):
        otp = self._request(reset, user)
        user.refresh_from_db()
        assert user.password_reset_otp != otp
        assert len(user.password_reset_otp) == 64

    def test_unknown_email(self, reset):
        with pytest.raises(UserNotFound, match="No user found with this email address"):
            reset.request_otp(ForgotPasswordDTO(email="nobody@example.com"))

    def test_delivery_failure_clears_otp(self, reset, user, settings):
        settings.BREVO_API_KEY = ""
        with pytest.raises(OTPDeliveryFailed):
            reset.request_otp(ForgotPasswordDTO(email=user.email))
        user.refresh_from_db()
        assert user.password_reset_otp == ""

    def test_bad_reset_token(self, reset):
        with pytest.raises(InvalidResetToken):
            reset.reset_password(ResetPasswordDTO(token="deadbeef", password="Brandnew123"))
