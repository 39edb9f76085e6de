"""Django ORM implementation of the User repository.

Look-ups return ``None`` for missing rows and malformed ids; the service
layer decides which domain error that becomes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from modules.accounts.constants import UserRole
from modules.accounts.models import Address, User
from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    """Concrete User repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any], password: str) -> User:
        user = User.objects.create_user(password=password, **data)
        logger.info("user.created", user_id=str(user.id), role=user.role)
        return user

    def get_by_id(self, id: str) -> Optional[User]:
        try:
            return User.objects.prefetch_related("addresses").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_email(self, email: str) -> Optional[User]:
        return User.objects.filter(email__iexact=email.strip()).first()

    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        queryset = User.objects.filter(email__iexact=email.strip())
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def get_by_reset_token(self, token: str) -> Optional[User]:
        return User.objects.filter(
            password_reset_token=User.digest_reset_token(token),
            password_reset_token_expires_at__gt=timezone.now(),
        ).first()

    def search_customers(self, search: str = "") -> QuerySet[User]:
        queryset = User.objects.filter(role=UserRole.USER)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(email__icontains=search)
                | Q(phone__icontains=search)
            )
        return queryset.order_by("-created_at")

    def count(self) -> int:
        return User.objects.count()

    @transaction.atomic
    def save(self, entity: User) -> User:
        entity.save()
        logger.info("user.saved", user_id=str(entity.id))
        return entity

    # ------------------------------------------------------------------
    # Address book
    # ------------------------------------------------------------------

    def list_addresses(self, user_id: str) -> List[Address]:
        return list(Address.objects.filter(user_id=user_id).order_by("created_at"))

    def get_address(self, user_id: str, address_id: str) -> Optional[Address]:
        try:
            return Address.objects.filter(id=address_id, user_id=user_id).first()
        except (ValueError, ValidationError):
            return None

    def save_address(self, address: Address) -> Address:
        address.save()
        return address

    def delete_address(self, address: Address) -> None:
        address.delete()

    def clear_default_address(self, user_id: str) -> None:
        Address.objects.filter(user_id=user_id, is_default=True).update(
            is_default=False
        )
