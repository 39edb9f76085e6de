"""Account domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import (
    Forbidden,
    InternalError,
    NotFound,
    ValidationError,
)


class UserAlreadyExists(ValidationError):
    default_message = "User already exists"


class InvalidCredentials(ValidationError):
    default_message = "Invalid credentials"


class AccountDisabled(Forbidden):
    default_message = "Account is deactivated"


class UserNotFound(NotFound):
    default_message = "User not found"


class EmailInUse(ValidationError):
    default_message = "Email already in use"


class IncorrectPassword(ValidationError):
    default_message = "Current password is incorrect"


class SelfDemotion(ValidationError):
    default_message = "Cannot demote yourself from admin role"


class AddressNotFound(NotFound):
    default_message = "Address not found"


class InvalidOTP(ValidationError):
    default_message = "Invalid or expired OTP"


class InvalidResetToken(ValidationError):
    default_message = "Password reset token is invalid or has expired"


class OTPDeliveryFailed(InternalError):
    default_message = "Failed to send OTP email. Please try again later."
