"""Unit tests for the Brevo email client and the templated emails."""

from __future__ import annotations

from unittest import mock

import pytest
import requests

from modules.notifications import emails
from modules.notifications.client import BrevoEmailClient
from modules.notifications.tasks import send_email

pytestmark = pytest.mark.unit


@pytest.fixture()
def brevo(settings):
    settings.BREVO_API_KEY = "test-key"
    settings.SENDER_EMAIL = "shop@example.com"
    settings.SENDER_NAME = "Silk House"
    with mock.patch("modules.notifications.client.requests.post") as post:
        post.return_value.json.return_value = {"messageId": "<msg-1@brevo>"}
        yield post


class TestBrevoEmailClient:
    def test_posts_transactional_email(self, brevo):
        result = BrevoEmailClient().send("asha@example.com", "Hello", "<p>Hi</p>")

        assert result.success is True
        assert result.message_id == "<msg-1@brevo>"
        body = brevo.call_args.kwargs["json"]
        assert body["sender"] == {"name": "Silk House", "email": "shop@example.com"}
        assert body["to"] == [{"email": "asha@example.com"}]
        assert body["htmlContent"] == "<p>Hi</p>"
        assert brevo.call_args.kwargs["headers"]["api-key"] == "test-key"

    def test_not_configured_never_calls_api(self, settings):
        settings.BREVO_API_KEY = ""
        with mock.patch("modules.notifications.client.requests.post") as post:
            result = BrevoEmailClient().send("asha@example.com", "Hello", "<p>Hi</p>")
        assert result.success is False
        assert result.message == "Email service not configured"
        post.assert_not_called()

    def test_http_error_is_returned_not_raised(self, brevo):
        brevo.return_value.raise_for_status.side_effect = requests.HTTPError("401")
        result = BrevoEmailClient().send(["a@example.com", "b@example.com"], "S", "x")
        assert result.success is False
        assert "401" in result.message


class TestTemplatedEmails:
    def test_password_otp_contains_code(self, brevo):
        result = emails.send_password_otp("Asha", "asha@example.com", "48213")

        assert result.success is True
        body = brevo.call_args.kwargs["json"]
        assert body["subject"] == "Password Reset OTP - Silk House"
        assert "48213" in body["htmlContent"]

    def test_admin_notification_skipped_without_address(self, settings):
        settings.ADMIN_EMAIL = ""
        assert emails.send_admin_order_notification(mock.Mock()) is None


class TestSendEmailTask:
    def test_sends_known_kind(self, brevo):
        outcome = send_email("welcome", "Asha", "asha@example.com")
        assert outcome["success"] is True
        assert brevo.call_args.kwargs["json"]["subject"] == "Welcome to Silk House"

    def test_unknown_kind(self):
        outcome = send_email("newsletter", "Asha", "asha@example.com")
        assert outcome["success"] is False
