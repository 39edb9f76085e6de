"""Generic repository contract.

Services depend on these abstractions; the Django ORM implementations live
next to each module's models.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base contract; ``T`` is the aggregate managed by the repository."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity or ``None`` (also for malformed ids)."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""
