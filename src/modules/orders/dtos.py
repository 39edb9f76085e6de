"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``); a failed validation lists every
offending field.

- ``OrderItemDTO``: a single order line (product, quantity, price).
- ``ShippingAddressDTO``: the embedded delivery address.
- ``CreateOrderDTO``: input for order creation.
- ``UpdateOrderStatusDTO``: admin status transition.
- ``CancelOrderDTO`` / ``RefundRequestDTO``: customer cancellation & refund.
- ``PaymentVerificationDTO``: admin payment bookkeeping.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from modules.orders.constants import OrderStatus, PaymentMethod, PaymentStatus

# ---------------------------------------------------------------------------
# Order creation
# ---------------------------------------------------------------------------


class OrderItemDTO(BaseModel):
    """One line of an order request.

    ``price`` is the unit price shown to the customer; whether it is trusted
    depends on ``ORDERS_TRUST_CLIENT_PRICES``.
    """

    model_config = ConfigDict(frozen=True)

    product: str = Field(min_length=1)
    quantity: int = Field(strict=True, ge=1)
    price: Decimal = Field(ge=0, decimal_places=2)
    name: Optional[str] = None


class ShippingAddressDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    full_name: str = Field(min_length=2, max_length=100)
    address_line1: str = Field(min_length=5, max_length=200)
    address_line2: str = Field(default="", max_length=200)
    city: str = Field(min_length=2, max_length=50)
    state: str = Field(min_length=2, max_length=50)
    postal_code: str = Field(pattern=r"^[0-9]{6}$")
    phone: str = Field(pattern=r"^[0-9]{10}$")


class CreateOrderDTO(BaseModel):
    """Validates:

    - ``items`` must contain at least one line.
    - Each quantity is a positive integer and each price is >= 0.
    - ``payment_method`` is ``cod`` or ``online``.
    """

    model_config = ConfigDict(frozen=True)

    items: List[OrderItemDTO]
    shipping_address: ShippingAddressDTO
    payment_method: PaymentMethod

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(cls, v: List[OrderItemDTO]) -> List[OrderItemDTO]:
        if not v:
            raise ValueError("Items must be a non-empty array")
        return v


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class UpdateOrderStatusDTO(BaseModel):
    """Admin status change; delivery info is only applied for ``shipped``."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    status: OrderStatus
    expected_delivery_date: Optional[datetime] = None
    courier_service: Optional[str] = Field(default=None, max_length=100)
    notes: str = Field(default="", max_length=500)


class CancelOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    reason: str = Field(default="", max_length=500)


class BankDetailsDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    account_name: Optional[str] = Field(default=None, max_length=100)
    account_number: Optional[str] = Field(default=None, max_length=34)
    bank_name: Optional[str] = Field(default=None, max_length=100)
    ifsc_code: Optional[str] = Field(default=None, max_length=11)
    upi_id: Optional[str] = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def requires_account_or_upi(self) -> BankDetailsDTO:
        if not (self.account_number or self.upi_id):
            raise ValueError("Provide either an account number or a UPI id")
        return self


class RefundRequestDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    bank_details: BankDetailsDTO


class PaymentVerificationDTO(BaseModel):
    """Manual payment bookkeeping by an admin.

    ``payment_status`` defaults to ``completed`` when ``verified`` and
    ``failed`` otherwise.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    transaction_id: Optional[str] = Field(default=None, max_length=100)
    amount: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    payment_date: Optional[datetime] = None
    verified: bool = True
    payment_status: Optional[PaymentStatus] = None

    @property
    def resolved_status(self) -> str:
        if self.payment_status is not None:
            return self.payment_status.value
        if self.verified:
            return PaymentStatus.COMPLETED.value
        return PaymentStatus.FAILED.value
