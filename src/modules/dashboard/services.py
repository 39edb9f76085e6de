"""Admin dashboard figures, read through the module repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from modules.accounts.repositories.interfaces import IUserRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

RECENT_ORDERS_LIMIT = 5


@dataclass(frozen=True)
class DashboardStats:
    total_products: int
    total_orders: int
    total_users: int
    recent_orders: List[Order]


class DashboardService:
    def __init__(
        self,
        product_repository: IProductRepository,
        order_repository: IOrderRepository,
        user_repository: IUserRepository,
    ) -> None:
        self._products = product_repository
        self._orders = order_repository
        self._users = user_repository

    def get_stats(self) -> DashboardStats:
        return DashboardStats(
            total_products=self._products.count(),
            total_orders=self._orders.count(),
            total_users=self._users.count(),
            recent_orders=self._orders.recent(RECENT_ORDERS_LIMIT),
        )
