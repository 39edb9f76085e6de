"""Order repository interface.

Extends ``IRepository[Order]`` with methods required by the Order
aggregate: atomic creation with items, status history tracking,
row locking and the listing queries used by customers and admins.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` carries the order columns plus ``items``: a list of dicts
        with ``product_id``, ``product_name``, ``quantity``, ``unit_price``.
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        """All orders, newest first."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> QuerySet[Order]:
        """Orders placed by one user, newest first."""

    @abstractmethod
    def recent(self, limit: int = 5) -> List[Order]:
        """The most recently placed orders."""

    @abstractmethod
    def count(self) -> int:
        """Number of orders."""

    @abstractmethod
    def tracking_number_exists(self, tracking_number: str) -> bool:
        """Whether a tracking number is already taken."""

    @abstractmethod
    def add_history(
        self,
        order_id: Any,
        new_status: str,
        old_status: Optional[str] = None,
        user_id: Any = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
