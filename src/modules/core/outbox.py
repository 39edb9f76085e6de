"""Transactional outbox: record domain events and relay them after commit."""

from __future__ import annotations

from typing import Dict, Optional

import structlog
from django.conf import settings
from django.db import transaction

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import DomainEventMixin
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


def record_events(aggregate: DomainEventMixin, topic: str) -> int:
    """Persist the aggregate's pending domain events as outbox rows.

    Must run inside the transaction that persists the aggregate. The relay is
    scheduled for after the commit, so a rollback discards both.
    """
    events = aggregate.domain_events
    for event in events:
        OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=event.to_payload(),
            topic=topic,
        )
    aggregate.clear_domain_events()
    if events:
        schedule_relay()
    return len(events)


def schedule_relay() -> None:
    transaction.on_commit(_enqueue_relay)


def _enqueue_relay() -> None:
    from modules.core.tasks import publish_outbox_events

    try:
        publish_outbox_events.delay()
    except Exception as exc:
        # Rows stay PENDING; the beat sweep picks them up.
        logger.warning("outbox.enqueue_failed", error=str(exc))


def relay_pending_events(batch_size: Optional[int] = None) -> Dict[str, int]:
    """Dispatch PENDING outbox rows to the event bus, oldest first.

    Each row is claimed under its own row lock so concurrent relays never
    deliver the same event twice. A handler error marks the row FAILED.
    """
    limit = batch_size or settings.OUTBOX_BATCH_SIZE
    pending_ids = list(
        OutboxEvent.objects.filter(status=EventStatus.PENDING)
        .order_by("created_at")
        .values_list("id", flat=True)[:limit]
    )

    counts = {"published": 0, "failed": 0}
    for event_id in pending_ids:
        with transaction.atomic():
            row = (
                OutboxEvent.objects.select_for_update(skip_locked=True)
                .filter(id=event_id, status=EventStatus.PENDING)
                .first()
            )
            if row is None:
                continue
            if _dispatch(row):
                counts["published"] += 1
            else:
                counts["failed"] += 1

    if pending_ids:
        logger.info("outbox.relay_completed", **counts)
    return counts


def _dispatch(row: OutboxEvent) -> bool:
    log = logger.bind(
        outbox_id=str(row.id),
        event_type=row.event_type,
        aggregate_id=row.aggregate_id,
    )
    event_class = event_bus.resolve(row.event_type)
    if event_class is None:
        log.warning("outbox.no_handler")
        row.mark_as_failed(f"No handler registered for {row.event_type}")
        return False

    try:
        event_bus.publish(event_class.from_payload(row.payload))
    except Exception as exc:
        log.error("outbox.dispatch_failed", error=str(exc), exc_info=exc)
        row.mark_as_failed(str(exc))
        return False

    row.mark_as_published()
    log.info("outbox.published")
    return True
