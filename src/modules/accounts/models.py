"""User and Address models.

- ``User`` is the project's ``AUTH_USER_MODEL``: email login, ``role`` drives
  authorization, ``is_staff`` is derived from it for the Django admin.
- OTPs and reset tokens are stored as SHA-256 digests, never in clear.
- ``Address`` rows belong to one user; a partial unique constraint keeps at
  most one default per user.
"""

from __future__ import annotations

import hashlib
import secrets
from datetime import timedelta
from typing import Optional

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone

from modules.accounts.constants import OTP_DIGITS, RESET_TOKEN_BYTES, UserRole
from modules.core.models import BaseModel


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, email: str, password: Optional[str] = None, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: Optional[str] = None, **extra_fields):
        extra_fields.setdefault("role", UserRole.ADMIN)
        extra_fields.setdefault("is_superuser", True)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin, BaseModel):
    name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True, default="")
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.USER,
    )
    is_active = models.BooleanField(default=True)

    password_reset_otp = models.CharField(max_length=64, blank=True, default="")
    password_reset_otp_expires_at = models.DateTimeField(null=True, blank=True)
    password_reset_token = models.CharField(
        max_length=64, blank=True, default="", db_index=True
    )
    password_reset_token_expires_at = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        db_table = "users"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["role"], name="users_role_idx"),
        ]

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.is_admin

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    @property
    def masked_phone(self) -> str:
        """All but the last four digits replaced by ``x``."""
        if not self.phone:
            return ""
        visible = self.phone[-4:]
        return "x" * (len(self.phone) - len(visible)) + visible

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    def issue_reset_otp(self, ttl_seconds: int) -> str:
        """Generate a numeric OTP, store its digest and return the clear value."""
        otp = str(secrets.randbelow(9 * 10 ** (OTP_DIGITS - 1)) + 10 ** (OTP_DIGITS - 1))
        self.password_reset_otp = _digest(otp)
        self.password_reset_otp_expires_at = timezone.now() + timedelta(seconds=ttl_seconds)
        return otp

    def clear_reset_otp(self) -> None:
        self.password_reset_otp = ""
        self.password_reset_otp_expires_at = None

    def check_reset_otp(self, otp: str) -> bool:
        if not self.password_reset_otp or self.password_reset_otp_expires_at is None:
            return False
        if self.password_reset_otp_expires_at <= timezone.now():
            return False
        return secrets.compare_digest(self.password_reset_otp, _digest(otp))

    def issue_reset_token(self, ttl_seconds: int) -> str:
        token = secrets.token_hex(RESET_TOKEN_BYTES)
        self.password_reset_token = _digest(token)
        self.password_reset_token_expires_at = timezone.now() + timedelta(
            seconds=ttl_seconds
        )
        return token

    def clear_reset_token(self) -> None:
        self.password_reset_token = ""
        self.password_reset_token_expires_at = None

    @staticmethod
    def digest_reset_token(token: str) -> str:
        return _digest(token)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class Address(BaseModel):
    user = models.ForeignKey(
        "accounts.User",
        on_delete=models.CASCADE,
        related_name="addresses",
    )
    full_name = models.CharField(max_length=100)
    address_line1 = models.CharField(max_length=200)
    address_line2 = models.CharField(max_length=200, blank=True, default="")
    city = models.CharField(max_length=50)
    state = models.CharField(max_length=50)
    pincode = models.CharField(max_length=6)
    phone = models.CharField(max_length=10)
    is_default = models.BooleanField(default=False)

    class Meta:
        db_table = "addresses"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(is_default=True),
                name="addresses_one_default_per_user",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.full_name}, {self.city}"
