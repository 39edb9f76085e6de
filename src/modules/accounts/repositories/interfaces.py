"""User repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.accounts.models import Address, User


class IUserRepository(IRepository["User"]):
    """Repository contract for users and their address book."""

    @abstractmethod
    def create(self, data: Dict[str, Any], password: str) -> User:
        """Create a user with a hashed password."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive look-up by email."""

    @abstractmethod
    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        """Whether another account already uses ``email``."""

    @abstractmethod
    def get_by_reset_token(self, token: str) -> Optional[User]:
        """User holding an unexpired reset token."""

    @abstractmethod
    def search_customers(self, search: str = "") -> QuerySet[User]:
        """Users with role ``user`` matching name, email or phone."""

    @abstractmethod
    def count(self) -> int:
        """Total number of accounts."""

    # Address book -------------------------------------------------------

    @abstractmethod
    def list_addresses(self, user_id: str) -> List[Address]:
        """Addresses of a user, oldest first."""

    @abstractmethod
    def get_address(self, user_id: str, address_id: str) -> Optional[Address]:
        """Address owned by the user, or ``None``."""

    @abstractmethod
    def save_address(self, address: Address) -> Address:
        """Persist an address."""

    @abstractmethod
    def delete_address(self, address: Address) -> None:
        """Physically remove an address."""

    @abstractmethod
    def clear_default_address(self, user_id: str) -> None:
        """Unset the default flag on every address of the user."""
