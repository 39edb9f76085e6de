"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    """In-process event bus.

    Handlers run synchronously in the caller's thread; the outbox relay is
    the only publisher, so a handler error surfaces there and marks the
    outbox row as failed.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), []):
            handler.handle(event)

    def resolve(self, event_name: str) -> Optional[Type[DomainEvent]]:
        """Return the subscribed event class whose name is ``event_name``."""
        for event_class in self._handlers:
            if event_class.__name__ == event_name:
                return event_class
        return None


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
