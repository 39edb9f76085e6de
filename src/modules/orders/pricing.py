"""Order amount calculation.

Delivery is charged per unit for eligible products while the order
subtotal stays below ``FREE_DELIVERY_THRESHOLD``; at or above it delivery
is free.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from django.conf import settings

if TYPE_CHECKING:
    from modules.products.models import Product

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PricedLine:
    """An order line resolved against the catalog."""

    product: Product
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def delivery_charge(self) -> Decimal:
        if not self.product.delivery_charges_applicable:
            return ZERO
        return (self.product.delivery_charges or ZERO) * self.quantity


@dataclass(frozen=True)
class OrderQuote:
    subtotal: Decimal
    delivery_charge: Decimal

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.delivery_charge


def free_delivery_threshold() -> Decimal:
    return Decimal(str(settings.FREE_DELIVERY_THRESHOLD))


def subtotal_of(lines: Iterable[PricedLine]) -> Decimal:
    return sum((line.subtotal for line in lines), ZERO)


def delivery_charge_for(
    lines: Iterable[PricedLine],
    subtotal: Decimal,
    threshold: Optional[Decimal] = None,
) -> Decimal:
    if threshold is None:
        threshold = free_delivery_threshold()
    if subtotal >= threshold:
        return ZERO
    return sum((line.delivery_charge for line in lines), ZERO)


def quote(lines: Sequence[PricedLine], threshold: Optional[Decimal] = None) -> OrderQuote:
    subtotal = subtotal_of(lines)
    return OrderQuote(
        subtotal=subtotal,
        delivery_charge=delivery_charge_for(lines, subtotal, threshold),
    )
