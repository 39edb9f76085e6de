"""Product repository interface.

Besides catalog access it exposes the atomic stock primitives used by the
order workflow's inventory reconciliation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.products.models import Product, Review


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_id(self, id: str, include_deleted: bool = False) -> Optional[Product]:
        """Catalog product; soft-deleted rows only with ``include_deleted``."""

    @abstractmethod
    def get_many(
        self, ids: Iterable[str], include_deleted: bool = False
    ) -> Dict[str, Product]:
        """Products keyed by ``str(id)``; unknown ids are absent."""

    @abstractmethod
    def list(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> QuerySet[Product]:
        """Catalog listing (alive products only)."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete; ``False`` when nothing was deleted."""

    @abstractmethod
    def count(self) -> int:
        """Number of catalog products."""

    # Stock primitives ----------------------------------------------------

    @abstractmethod
    def decrement_stock(self, id: str, quantity: int) -> bool:
        """``stock -= quantity`` only if ``stock >= quantity``; ``True`` on success."""

    @abstractmethod
    def increment_stock(self, id: str, quantity: int) -> bool:
        """``stock += quantity``; ``False`` when the row does not exist."""

    # Reviews -------------------------------------------------------------

    @abstractmethod
    def add_review(
        self, product: Product, user_id: str, rating: int, comment: str
    ) -> Review:
        """Store a review and refresh the product's rating aggregates."""
