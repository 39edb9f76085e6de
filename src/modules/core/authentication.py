"""Bearer-JWT authentication and the ``Caller`` identity value.

Views never hand ``request.user`` to services: they build an immutable
``Caller`` from the authenticated request and pass it explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID

import structlog
from rest_framework.exceptions import NotAuthenticated
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication

ADMIN_ROLE = "admin"


class ShopJWTAuthentication(JWTAuthentication):
    """SimpleJWT authentication that binds the user to the log context."""

    def authenticate(self, request) -> Optional[Tuple[object, object]]:
        result = super().authenticate(request)
        if result is not None:
            user, _token = result
            structlog.contextvars.bind_contextvars(user_id=str(user.pk))
        return result


@dataclass(frozen=True)
class Caller:
    """Who is performing an operation."""

    user_id: UUID
    role: str
    email: str = ""
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def owns(self, owner_id: UUID) -> bool:
        return str(self.user_id) == str(owner_id)


def caller_from_request(request: Request) -> Caller:
    """Build the ``Caller`` for an authenticated DRF request."""
    user = request.user
    if user is None or not user.is_authenticated:
        raise NotAuthenticated()
    return Caller(
        user_id=user.pk,
        role=getattr(user, "role", ""),
        email=getattr(user, "email", ""),
        name=getattr(user, "name", ""),
    )
