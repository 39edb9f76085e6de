"""Integration tests for the transactional outbox and its relay.

An order placed over HTTP writes ``OrderCreated`` to the outbox; the relay
task dispatches it to the email handlers through the event bus.
"""

from __future__ import annotations

from unittest import mock

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.core.outbox import relay_pending_events
from modules.core.tasks import publish_outbox_events

pytestmark = pytest.mark.integration


@pytest.fixture()
def brevo(settings):
    settings.BREVO_API_KEY = "test-key"
    settings.ADMIN_EMAIL = "owner@example.com"
    with mock.patch("modules.notifications.client.requests.post") as post:
        post.return_value.json.return_value = {"messageId": "m-1"}
        yield post


@pytest.fixture()
def placed_order(user_client, silk_saree, shipping_address):
    response = user_client.post(
        "/api/orders/",
        {
            "items": [{"product": str(silk_saree.id), "quantity": 1, "price": "200.00"}],
            "shipping_address": shipping_address,
            "payment_method": "cod",
        },
        format="json",
    )
    return response.json()["order"]


def test_order_creation_writes_pending_event(placed_order):
    event = OutboxEvent.objects.get(aggregate_id=placed_order["id"])
    assert event.event_type == "OrderCreated"
    assert event.topic == "orders"
    assert event.status == EventStatus.PENDING


def test_relay_enqueued_on_commit(user_client, silk_saree, shipping_address, django_capture_on_commit_callbacks):
    with mock.patch("modules.core.tasks.publish_outbox_events.delay") as delay:
        with django_capture_on_commit_callbacks(execute=True):
            user_client.post(
                "/api/orders/",
                {
                    "items": [{"product": str(silk_saree.id), "quantity": 1, "price": "200.00"}],
                    "shipping_address": shipping_address,
                    "payment_method": "cod",
                },
                format="json",
            )
    delay.assert_called_once_with()


def test_relay_sends_confirmation_and_admin_emails(brevo, placed_order, user):
    counts = publish_outbox_events()

    assert counts == {"published": 1, "failed": 0}
    recipients = [call.kwargs["json"]["to"][0]["email"] for call in brevo.call_args_list]
    assert recipients == [user.email, "owner@example.com"]
    event = OutboxEvent.objects.get(aggregate_id=placed_order["id"])
    assert event.status == EventStatus.PUBLISHED
    assert event.processed_at is not None


def test_status_change_email(brevo, admin_client, placed_order, user):
    relay_pending_events()
    brevo.reset_mock()

    admin_client.put(
        f"/api/orders/{placed_order['id']}/status/", {"status": "shipped"}, format="json"
    )
    relay_pending_events()

    body = brevo.call_args.kwargs["json"]
    assert body["subject"] == "Order Status Update"
    assert "SHIPPED" in body["htmlContent"]


def test_published_rows_are_not_relayed_twice(brevo, placed_order):
    relay_pending_events()
    assert relay_pending_events() == {"published": 0, "failed": 0}
    assert brevo.call_count == 2


def test_handler_error_marks_row_failed(placed_order):
    with mock.patch(
        "modules.orders.handlers.emails.send_order_confirmation",
        side_effect=RuntimeError("template missing"),
    ):
        counts = relay_pending_events()

    assert counts == {"published": 0, "failed": 1}
    event = OutboxEvent.objects.get(aggregate_id=placed_order["id"])
    assert event.status == EventStatus.FAILED
    assert event.error_message == "template missing"
    assert event.retry_count == 1


def test_unknown_event_type_fails(db):
    OutboxEvent.objects.create(
        event_type="InvoiceIssued", aggregate_id="x", payload={}, topic="billing"
    )
    assert relay_pending_events() == {"published": 0, "failed": 1}
