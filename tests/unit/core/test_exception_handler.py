"""Unit tests for the API error envelope."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions as drf_exceptions

from modules.core.exception_handler import api_exception_handler
from modules.core.exceptions import InsufficientStock, InternalError, NotFound

pytestmark = pytest.mark.unit


class _QuantityDTO(BaseModel):
    quantity: int = Field(ge=1)


def _handle(exc):
    return api_exception_handler(exc, {"view": None})


class TestDomainErrors:
    def test_not_found(self):
        response = _handle(NotFound("Order not found"))
        assert response.status_code == 404
        assert response.data == {"success": False, "message": "Order not found"}

    def test_insufficient_stock_is_bad_request(self):
        response = _handle(InsufficientStock("Silk Saree", 1, 3))
        assert response.status_code == 400
        assert response.data["message"] == (
            "Insufficient stock for product: Silk Saree. Available: 1, Requested: 3"
        )

    def test_internal_error(self):
        assert _handle(InternalError()).status_code == 500


class TestValidationErrors:
    def test_pydantic_errors_list_every_field(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            _QuantityDTO(quantity=0)
        response = _handle(exc_info.value)

        assert response.status_code == 400
        assert response.data["message"] == "Validation failed"
        assert response.data["errors"][0]["field"] == "quantity"

    def test_drf_errors_are_flattened(self):
        exc = drf_exceptions.ValidationError(
            {"items": [{"quantity": ["Item quantity must be a positive integer"]}]}
        )
        response = _handle(exc)
        assert response.data["errors"] == [
            {
                "field": "items.0.quantity",
                "message": "Item quantity must be a positive integer",
            }
        ]


class TestOtherErrors:
    def test_authentication_failure_keeps_status(self):
        response = _handle(drf_exceptions.NotAuthenticated())
        assert response.status_code == 401
        assert response.data["success"] is False

    def test_unexpected_error_hides_details(self):
        response = _handle(RuntimeError("database password is hunter2"))
        assert response.status_code == 500
        assert response.data == {"success": False, "message": "Internal server error"}
