"""Account DTOs (pydantic v2, immutable).

Contracts between the DRF views and the account services. Password policy
and address formats are enforced here so every entry point shares them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from modules.accounts.constants import (
    PASSWORD_PATTERN,
    PASSWORD_POLICY_MESSAGE,
    UserRole,
)


def check_password_policy(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    return value


class _EmailDTO(BaseModel):
    """Lower-cases the ``email`` field when present."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("email", check_fields=False)
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v is not None else v


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class RegisterDTO(_EmailDTO):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str
    phone: str = Field(default="", max_length=20)

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return check_password_policy(v)


class LoginDTO(_EmailDTO):
    email: EmailStr
    password: str = Field(min_length=1)


class RoleUpdateDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: UserRole


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class ProfileUpdateDTO(_EmailDTO):
    """Partial profile update; ``None`` means "leave unchanged"."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)


class ChangePasswordDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_password: str = Field(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return check_password_policy(v)


class AddressDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    full_name: str = Field(min_length=2, max_length=100)
    address_line1: str = Field(min_length=5, max_length=200)
    address_line2: str = Field(default="", max_length=200)
    city: str = Field(min_length=2, max_length=50)
    state: str = Field(min_length=2, max_length=50)
    pincode: str = Field(pattern=r"^[0-9]{6}$")
    phone: str = Field(pattern=r"^[0-9]{10}$")
    is_default: bool = False


# ---------------------------------------------------------------------------
# Password reset
# ---------------------------------------------------------------------------


class ForgotPasswordDTO(_EmailDTO):
    email: EmailStr


class VerifyOTPDTO(_EmailDTO):
    email: EmailStr
    otp: str = Field(pattern=r"^[0-9]{5}$")


class ResetPasswordDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    password: str

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        return check_password_policy(v)
