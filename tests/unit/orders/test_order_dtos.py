"""Unit tests for order DTO validation."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.orders.constants import OrderStatus, PaymentMethod, PaymentStatus
from modules.orders.dtos import (
    CreateOrderDTO,
    OrderItemDTO,
    PaymentVerificationDTO,
    RefundRequestDTO,
    UpdateOrderStatusDTO,
)

pytestmark = pytest.mark.unit

ADDRESS = {
    "full_name": "Asha Menon",
    "address_line1": "14 Lake View Road",
    "city": "Kochi",
    "state": "Kerala",
    "postal_code": "682001",
    "phone": "9876543210",
}


def _item(**overrides):
    item = {"product": "p-1", "quantity": 1, "price": Decimal("10.00")}
    item.update(overrides)
    return item


class TestOrderItemDTO:
    def test_product_reference_required(self):
        with pytest.raises(ValidationError):
            OrderItemDTO(**_item(product=""))

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2"])
    def test_quantity_must_be_positive_integer(self, quantity):
        with pytest.raises(ValidationError):
            OrderItemDTO(**_item(quantity=quantity))

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            OrderItemDTO(**_item(price=Decimal("-1.00")))


class TestCreateOrderDTO:
    def test_valid(self):
        dto = CreateOrderDTO(
            items=[_item()], shipping_address=ADDRESS, payment_method="cod"
        )
        assert dto.payment_method is PaymentMethod.COD
        assert dto.shipping_address.address_line2 == ""

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="Items must be a non-empty array"):
            CreateOrderDTO(items=[], shipping_address=ADDRESS, payment_method="cod")

    def test_unknown_payment_method_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(
                items=[_item()], shipping_address=ADDRESS, payment_method="card"
            )

    @pytest.mark.parametrize(
        "field,value", [("postal_code", "68200"), ("phone", "98765-43210")]
    )
    def test_address_formats(self, field, value):
        with pytest.raises(ValidationError):
            CreateOrderDTO(
                items=[_item()],
                shipping_address={**ADDRESS, field: value},
                payment_method="online",
            )

    def test_every_offending_field_is_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateOrderDTO(
                items=[_item(quantity=0)],
                shipping_address={**ADDRESS, "phone": "1"},
                payment_method="card",
            )
        assert len(exc_info.value.errors()) == 3


class TestUpdateOrderStatusDTO:
    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            UpdateOrderStatusDTO(status="lost")

    def test_shipping_fields_optional(self):
        dto = UpdateOrderStatusDTO(status="shipped")
        assert dto.status is OrderStatus.SHIPPED
        assert dto.expected_delivery_date is None


class TestRefundRequestDTO:
    def test_account_number_or_upi_required(self):
        with pytest.raises(ValidationError):
            RefundRequestDTO(bank_details={"account_name": "Asha"})

    def test_upi_alone_is_enough(self):
        dto = RefundRequestDTO(bank_details={"upi_id": "asha@upi"})
        assert dto.bank_details.upi_id == "asha@upi"


class TestPaymentVerificationDTO:
    def test_verified_defaults_to_completed(self):
        assert PaymentVerificationDTO().resolved_status == PaymentStatus.COMPLETED

    def test_unverified_is_failed(self):
        assert PaymentVerificationDTO(verified=False).resolved_status == "failed"

    def test_explicit_status_wins(self):
        dto = PaymentVerificationDTO(verified=True, payment_status="refunded")
        assert dto.resolved_status == "refunded"
