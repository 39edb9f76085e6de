"""Account constants: roles and password / reset policy."""

import re

from django.db import models


class UserRole(models.TextChoices):
    USER = "user", "User"
    ADMIN = "admin", "Admin"


# At least 8 characters with one lowercase, one uppercase and one digit.
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters and contain uppercase, "
    "lowercase, and number"
)

OTP_DIGITS = 5
RESET_TOKEN_BYTES = 32
