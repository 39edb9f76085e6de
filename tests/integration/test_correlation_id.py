"""X-Request-ID propagation through the storefront API."""

import logging
import uuid

import pytest

pytestmark = pytest.mark.integration


class TestRequestIdHeader:
    def test_client_id_echoed_on_catalog(self, api_client, silk_saree):
        response = api_client.get("/api/products/", HTTP_X_REQUEST_ID="cart-7f3a")
        assert response.status_code == 200
        assert response["X-Request-ID"] == "cart-7f3a"

    def test_generated_when_missing(self, api_client):
        response = api_client.get("/api/slides/")
        request_id = response["X-Request-ID"]
        assert str(uuid.UUID(request_id, version=4)) == request_id

    def test_present_on_error_envelope(self, api_client):
        response = api_client.get(
            "/api/orders/my-orders/", HTTP_X_REQUEST_ID="no-token-1"
        )
        assert response.status_code == 401
        assert response["X-Request-ID"] == "no-token-1"

    def test_each_request_gets_its_own_id(self, api_client):
        first = api_client.get("/api/products/")["X-Request-ID"]
        second = api_client.get("/api/products/")["X-Request-ID"]
        assert first != second


class TestRequestIdInLogs:
    def test_order_placement_logs_carry_request_id(
        self, user_client, silk_saree, shipping_address, caplog
    ):
        payload = {
            "items": [{"product": str(silk_saree.id), "quantity": 1, "price": "200.00"}],
            "shipping_address": shipping_address,
            "payment_method": "cod",
        }
        with caplog.at_level(logging.INFO):
            response = user_client.post(
                "/api/orders/",
                payload,
                format="json",
                HTTP_X_REQUEST_ID="checkout-42",
            )

        assert response.status_code == 201
        messages = [record.getMessage() for record in caplog.records]
        tagged = [m for m in messages if "checkout-42" in m]
        assert any("order.created" in m for m in tagged), messages
        assert any("request_finished" in m for m in tagged), messages
