"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Write operations are wrapped in ``transaction.atomic()`` so the Order
aggregate (Order + OrderItems) is persisted atomically, and pending
domain events are written to the outbox in the same transaction.

Concurrency control on status updates uses ``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.core.outbox import record_events
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        items = data.pop("items", [])
        order = Order(**data)
        order.save()

        for item_data in items:
            OrderItem(order=order, **item_data).save()

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            item_count=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _base_queryset(self) -> QuerySet[Order]:
        return Order.objects.select_related("user").prefetch_related(
            "items__product", "status_history"
        )

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self._base_queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Only the order row is locked (``of=("self",)``); the owner is
        joined for the status email.  Returns ``None`` for non-existent or
        invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update(of=("self",))
                .select_related("user")
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        queryset = self._base_queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("-created_at")

    def list_for_user(self, user_id: str) -> QuerySet[Order]:
        try:
            return self.list({"user_id": user_id})
        except (ValueError, ValidationError):
            return Order.objects.none()

    def recent(self, limit: int = 5) -> List[Order]:
        return list(self.list()[:limit])

    def count(self) -> int:
        return Order.objects.count()

    def tracking_number_exists(self, tracking_number: str) -> bool:
        return Order.objects.filter(tracking_number=tracking_number).exists()

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and move its pending events to the outbox."""
        entity.save()
        event_count = record_events(entity, OUTBOX_TOPIC)
        logger.info("order.saved", order_id=str(entity.id), event_count=event_count)
        return entity

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: Any,
        new_status: str,
        old_status: Optional[str] = None,
        user_id: Any = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=new_status,
            user_id=user_id,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=new_status,
        )
        return history
