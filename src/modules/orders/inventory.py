"""Inventory reconciliation for orders.

- ``reserve``: all-or-nothing decrement when an order is placed.
- ``release``: put stock back when an order is cancelled.
- ``reapply``: take stock again when a cancelled order is reinstated.

Every stock change is a single conditional ``UPDATE`` issued by the product
repository; the methods are atomic so an error rolls back the decrements
already applied within the same call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, NamedTuple, Optional

import structlog
from django.db import transaction

from modules.core.exceptions import InsufficientStock
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class StockLine(NamedTuple):
    """``product_id`` is ``None`` for lines whose product was hard-deleted."""

    product_id: Optional[str]
    quantity: int


def _summed(lines: Iterable[StockLine]) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for line in lines:
        if line.product_id is None:
            continue
        key = str(line.product_id)
        totals[key] = totals.get(key, 0) + line.quantity
    return totals


class InventoryService:
    def __init__(self, product_repository: IProductRepository) -> None:
        self._products = product_repository

    @transaction.atomic
    def reserve(self, lines: Iterable[StockLine]) -> None:
        """Check every line first, then decrement them all.

        Quantities of repeated products are summed before checking.

        Raises:
            ProductNotFound: a product is missing or soft-deleted.
            InsufficientStock: a product cannot cover its quantity, either at
                check time or because a concurrent order took it first.
        """
        totals = _summed(lines)
        products = self._products.get_many(totals.keys())

        for product_id, quantity in totals.items():
            product = products.get(product_id)
            if product is None:
                raise ProductNotFound(f"Product with ID {product_id} not found")
            if product.stock < quantity:
                raise InsufficientStock(product.name, product.stock, quantity)

        for product_id, quantity in totals.items():
            if not self._products.decrement_stock(product_id, quantity):
                current = self._products.get_by_id(product_id, include_deleted=True)
                logger.warning(
                    "inventory.reserve_race_lost",
                    product_id=product_id,
                    requested=quantity,
                )
                raise InsufficientStock(
                    products[product_id].name,
                    current.stock if current else 0,
                    quantity,
                )
            logger.info(
                "order.stock_reserved", product_id=product_id, quantity=quantity
            )

    @transaction.atomic
    def release(self, lines: Iterable[StockLine]) -> None:
        """Increment stock for each line; missing products are skipped."""
        for line in lines:
            if line.product_id is None or not self._products.increment_stock(
                str(line.product_id), line.quantity
            ):
                logger.warning(
                    "order.stock_release_skipped",
                    product_id=line.product_id,
                    quantity=line.quantity,
                )
                continue
            logger.info(
                "order.stock_released",
                product_id=str(line.product_id),
                quantity=line.quantity,
            )

    @transaction.atomic
    def reapply(self, lines: Iterable[StockLine]) -> None:
        """Decrement stock again for a reinstated order.

        Missing products are skipped. The first product that cannot cover
        its line aborts the whole call.

        Raises:
            InsufficientStock: with a "Cannot change order status" message.
        """
        for line in lines:
            if line.product_id is None:
                logger.warning("order.stock_reapply_skipped", quantity=line.quantity)
                continue
            product_id = str(line.product_id)
            product = self._products.get_by_id(product_id, include_deleted=True)
            if product is None:
                logger.warning(
                    "order.stock_reapply_skipped",
                    product_id=product_id,
                    quantity=line.quantity,
                )
                continue
            if not self._products.decrement_stock(product_id, line.quantity):
                current = self._products.get_by_id(product_id, include_deleted=True)
                available = current.stock if current else 0
                raise InsufficientStock(
                    product.name,
                    available,
                    line.quantity,
                    message=(
                        "Cannot change order status: Insufficient stock for "
                        f"product {product.name}. Available: {available}, "
                        f"Required: {line.quantity}"
                    ),
                )
            logger.info(
                "order.stock_reapplied",
                product_id=product_id,
                quantity=line.quantity,
            )
