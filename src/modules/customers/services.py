"""Customer service layer (Use Cases).

Admin-side management of customer accounts: search, detail, activation
and order history.  Customers are ``user``-role accounts; admins are never
returned here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.accounts.constants import UserRole
from modules.customers.exceptions import CustomerNotFound

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.accounts.models import User
    from modules.accounts.repositories.interfaces import IUserRepository
    from modules.core.authentication import Caller
    from modules.customers.dtos import CustomerQueryDTO, CustomerStatusDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives the user and order repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        order_repository: IOrderRepository,
    ) -> None:
        self._users = user_repository
        self._orders = order_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_customers(self, query: CustomerQueryDTO) -> QuerySet[User]:
        """Customers matching ``search`` on name, email or phone, newest first."""
        return self._users.search_customers(query.search)

    def get_customer(self, customer_id: str) -> User:
        """Raises ``CustomerNotFound`` for unknown ids and non-customer accounts."""
        user = self._users.get_by_id(customer_id)
        if user is None or user.role != UserRole.USER:
            raise CustomerNotFound()
        return user

    def list_customer_orders(self, customer_id: str) -> QuerySet[Order]:
        return self._orders.list_for_user(customer_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def set_status(
        self, caller: Caller, customer_id: str, dto: CustomerStatusDTO
    ) -> User:
        """Activate or deactivate a customer; inactive customers cannot log in."""
        user = self.get_customer(customer_id)
        user.is_active = dto.is_active
        self._users.save(user)
        logger.info(
            "customer.status_updated",
            customer_id=str(user.id),
            is_active=user.is_active,
            by=str(caller.user_id),
        )
        return user
