"""Celery tasks for the core module."""

import structlog
from celery import shared_task

from modules.core.outbox import relay_pending_events

logger = structlog.get_logger(__name__)


@shared_task(name="core.debug_task")
def debug_task():
    """Diagnostic task confirming a worker is consuming the queue."""
    logger.info("debug_task.executed", status="ok")
    return {"status": "ok", "message": "Celery is working"}


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size=None):
    return relay_pending_events(batch_size=batch_size)
