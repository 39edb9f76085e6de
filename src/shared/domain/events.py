"""Domain event primitives shared by every module."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    Subclasses add their own fields, all of which must have defaults and be
    JSON friendly once normalised (str, int, Decimal, UUID, datetime).
    """

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)

    def to_payload(self) -> Dict[str, Any]:
        """Serialise the event into a JSON-compatible dict (outbox payload)."""
        return _normalize_for_json(asdict(self))

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> DomainEvent:
        """Rebuild an event from the dict produced by :meth:`to_payload`."""
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if not f.init or f.name not in payload:
                continue
            kwargs[f.name] = payload[f.name]
        kwargs["aggregate_id"] = UUID(str(kwargs["aggregate_id"]))
        if "event_id" in kwargs:
            kwargs["event_id"] = UUID(str(kwargs["event_id"]))
        if isinstance(kwargs.get("occurred_on"), str):
            kwargs["occurred_on"] = datetime.fromisoformat(kwargs["occurred_on"])
        return cls(**kwargs)


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value


class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        if hasattr(self, "_domain_events"):
            self._domain_events.clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return list(self._domain_events)
