"""Transactional emails of the shop.

Each function renders a template from ``templates/notifications`` and hands
it to the Brevo client, returning the ``EmailResult``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from django.template.loader import render_to_string

from modules.notifications.client import BrevoEmailClient, EmailResult

logger = structlog.get_logger(__name__)

STATUS_DESCRIPTIONS = {
    "pending": "Your order has been received and is awaiting processing.",
    "processing": "We are currently processing your order.",
    "shipped": "Your order has been shipped and is on its way!",
    "delivered": "Your order has been delivered successfully.",
    "cancelled": "Your order has been cancelled.",
}


def get_email_client() -> BrevoEmailClient:
    return BrevoEmailClient()


def send_templated(
    to: str,
    subject: str,
    template: str,
    context: Dict[str, Any],
    client: Optional[BrevoEmailClient] = None,
) -> EmailResult:
    context = {
        "shop_name": settings.SENDER_NAME,
        "support_email": settings.SENDER_EMAIL,
        **context,
    }
    html = render_to_string(f"notifications/{template}.html", context)
    return (client or get_email_client()).send(to, subject, html)


def send_welcome(name: str, email: str) -> EmailResult:
    return send_templated(
        email, f"Welcome to {settings.SENDER_NAME}", "welcome", {"name": name}
    )


def send_order_confirmation(order) -> EmailResult:
    return send_templated(
        order.user.email,
        "Order Confirmation",
        "order_confirmation",
        {"name": order.user.name, "order": order},
    )


def send_admin_order_notification(order) -> Optional[EmailResult]:
    """Notify the shop admin of a new order; ``None`` when no admin address."""
    if not settings.ADMIN_EMAIL:
        logger.warning("email.admin_address_missing", order_id=str(order.id))
        return None
    return send_templated(
        settings.ADMIN_EMAIL,
        "New Order Placed",
        "admin_new_order",
        {"order": order, "customer": order.user},
    )


def send_order_status_update(order) -> EmailResult:
    return send_templated(
        order.user.email,
        "Order Status Update",
        "order_status_update",
        {
            "name": order.user.name,
            "order": order,
            "status_label": order.status.upper(),
            "status_description": STATUS_DESCRIPTIONS.get(order.status, ""),
        },
    )


def send_password_otp(name: str, email: str, otp: str) -> EmailResult:
    return send_templated(
        email,
        f"Password Reset OTP - {settings.SENDER_NAME}",
        "password_otp",
        {
            "name": name,
            "otp": otp,
            "ttl_minutes": settings.PASSWORD_RESET_OTP_TTL // 60,
        },
    )


def send_password_reset_success(name: str, email: str) -> EmailResult:
    return send_templated(
        email,
        f"Password Reset Successful - {settings.SENDER_NAME}",
        "password_reset_success",
        {"name": name},
    )
