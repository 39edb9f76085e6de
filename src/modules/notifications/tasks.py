"""Celery tasks for out-of-band email delivery."""

import structlog
from celery import shared_task
from django.db import transaction

from modules.notifications import emails

logger = structlog.get_logger(__name__)

# Emails that may be queued by name from other modules.
QUEUEABLE = {
    "welcome": emails.send_welcome,
    "password_reset_success": emails.send_password_reset_success,
}


@shared_task(name="notifications.send_email")
def send_email(kind, name, email):
    """Send one of the ``QUEUEABLE`` emails; the result is returned, not raised."""
    sender = QUEUEABLE.get(kind)
    if sender is None:
        logger.error("email.unknown_kind", kind=kind)
        return {"success": False, "message": f"Unknown email kind: {kind}"}
    result = sender(name, email)
    return {"success": result.success, "message": result.message}


def queue_email(kind: str, name: str, email: str) -> None:
    """Queue an email once the current transaction commits."""

    def _enqueue() -> None:
        try:
            send_email.delay(kind, name, email)
        except Exception as exc:
            logger.error("email.enqueue_failed", kind=kind, error=str(exc))

    transaction.on_commit(_enqueue)
