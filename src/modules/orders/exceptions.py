"""Order domain exceptions.

Raised by the Service Layer when business rules are violated and
rendered by ``modules.core.exception_handler``.
"""

from __future__ import annotations

from modules.core.exceptions import (
    Forbidden,
    InternalError,
    InvalidTransition,
    NotFound,
    ValidationError,
)


class OrderNotFound(NotFound):
    default_message = "Order not found"


class OrderAccessDenied(Forbidden):
    """The caller neither owns the order nor is an admin."""

    default_message = "Not authorized"


class InvalidOrderStatus(InvalidTransition):
    """The operation is not allowed in the order's current status."""


class OrderNotCancellable(InvalidOrderStatus):
    default_message = "Only pending orders can be cancelled"


class OrderNotRefundable(InvalidOrderStatus):
    default_message = "Only cancelled orders can be refunded"


class OrderProductNotFound(ValidationError):
    """An order line references a product that does not exist."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id


class TrackingNumberCollision(InternalError):
    default_message = "Could not allocate a unique tracking number"
