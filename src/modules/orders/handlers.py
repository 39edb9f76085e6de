"""Event handlers for Orders domain events.

Run by the outbox relay after the order transaction has committed.  Email
failures come back as an ``EmailResult`` and are only logged; they never
mark the outbox row as failed.
"""

from __future__ import annotations

import structlog

from modules.notifications import emails
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.models import Order
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


def _load_order(event) -> Order | None:
    order = (
        Order.objects.select_related("user")
        .prefetch_related("items")
        .filter(id=event.aggregate_id)
        .first()
    )
    if order is None:
        logger.warning("order.event_order_missing", order_id=str(event.aggregate_id))
    return order


def _log_result(kind: str, order: Order, result) -> None:
    if result is None:
        return
    if result.success:
        logger.info("order.email_sent", kind=kind, order_id=str(order.id))
    else:
        logger.error(
            "order.email_failed",
            kind=kind,
            order_id=str(order.id),
            error=result.message,
        )


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    """Customer confirmation plus the admin new-order notification."""

    def handle(self, event: OrderCreated) -> None:
        order = _load_order(event)
        if order is None:
            return
        _log_result("confirmation", order, emails.send_order_confirmation(order))
        _log_result("admin_notification", order, emails.send_admin_order_notification(order))


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        order = _load_order(event)
        if order is None:
            return
        _log_result("status_update", order, emails.send_order_status_update(order))


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.cancellation_processed",
            order_id=str(event.aggregate_id),
            reason=event.reason,
        )


order_created_handler = OrderCreatedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_status_changed_handler = OrderStatusChangedHandler()
