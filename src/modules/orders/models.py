"""Order, OrderItem, and OrderStatusHistory models.

- Each status change generates an append-only history record.
- ``user`` uses PROTECT so an order's owner can never vanish under it.
- OrderItem snapshots product name and price at creation time.
- OrderItem subtotal is always ``quantity * unit_price`` (calculated on save).
- ``product`` uses SET_NULL: a hard-deleted product leaves a dangling line
  that stock reconciliation skips.
- Orders are never hard-deleted by the workflow.
"""

from __future__ import annotations

import random
import time
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    TRACKING_PREFIX,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``tracking_number`` is the customer-facing identifier
    (``TRK<epoch-millis><0-999>``); the UUIDv7 ``id`` is used for API
    lookups.  It is nullable and unique only when set.

    ``shipping_address`` embeds ``full_name``, ``address_line1``,
    ``address_line2``, ``city``, ``state``, ``postal_code`` and ``phone``.
    """

    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    tracking_number: models.CharField = models.CharField(
        max_length=32, unique=True, null=True, blank=True, default=None
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    delivery_charge: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    shipping_address: models.JSONField = models.JSONField(default=dict)
    payment_method: models.CharField = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
        default=PaymentMethod.COD,
    )
    payment_status: models.CharField = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_details: models.JSONField = models.JSONField(null=True, blank=True)
    cancellation_reason: models.TextField = models.TextField(blank=True, default="")
    refund_details: models.JSONField = models.JSONField(null=True, blank=True)
    expected_delivery_date: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )
    courier_service: models.CharField = models.CharField(
        max_length=100, blank=True, default=""
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(subtotal__gte=0),
                name="orders_subtotal_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(delivery_charge__gte=0),
                name="orders_delivery_charge_non_negative",
            ),
        ]

    @staticmethod
    def generate_tracking_number() -> str:
        """``TRK`` + epoch milliseconds + a random 0..999 suffix."""
        return f"{TRACKING_PREFIX}{int(time.time() * 1000)}{random.randint(0, 999)}"

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    def __str__(self) -> str:
        return f"{self.tracking_number or self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line item of an order.

    ``product_name`` and ``unit_price`` are **snapshots** taken at purchase
    time; they never follow later catalog edits.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    product_name: models.CharField = models.CharField(max_length=200, blank=True)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="order_items_unit_price_non_negative",
            ),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.subtotal = self.quantity * self.unit_price
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} ({self.subtotal})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``user`` is nullable: ``None`` means the change was performed by the
    system, or the acting account was removed later.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"
