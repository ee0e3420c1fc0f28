"""
Event publishers: in-process bus and fan-out composite.
"""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable, Iterable

from django.conf import settings

from orders.domain.events import DomainEvent
from orders.domain.ports import EventPublisher


logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class InProcessEventBus(EventPublisher):
    """
    Synchronous in-process event bus.

    Handlers are matched by event class; a handler subscribed to DomainEvent
    receives every event. One failing handler never stops delivery to the
    others.
    """

    def __init__(self):
        self._handlers: dict[type, list[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        with self._lock:
            if handler in self._handlers.get(event_type, []):
                self._handlers[event_type].remove(handler)

    def handlers_for(self, event: DomainEvent) -> list[EventHandler]:
        with self._lock:
            return [
                handler
                for event_type, handlers in self._handlers.items()
                if isinstance(event, event_type)
                for handler in handlers
            ]

    def publish(self, event: DomainEvent) -> None:
        for handler in self.handlers_for(event):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "event_handler_failed",
                    extra={
                        "event_type": event.event_type,
                        "event_id": str(event.event_id),
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                        "error": str(e),
                    },
                    exc_info=True,
                )


class CompositeEventPublisher(EventPublisher):
    """Fans each event out to several sinks; a failing sink is logged and skipped."""

    def __init__(self, publishers: Iterable[EventPublisher]):
        self.publishers = list(publishers)

    def publish(self, event: DomainEvent) -> None:
        for publisher in self.publishers:
            try:
                publisher.publish(event)
            except Exception as e:
                logger.error(
                    "event_sink_failed",
                    extra={
                        "event_type": event.event_type,
                        "event_id": str(event.event_id),
                        "sink": type(publisher).__name__,
                        "error": str(e),
                    },
                    exc_info=True,
                )


_default_bus: InProcessEventBus | None = None
_default_bus_lock = threading.Lock()


def get_event_bus() -> InProcessEventBus:
    """Process-wide bus that consumers subscribe to at app startup."""
    global _default_bus
    with _default_bus_lock:
        if _default_bus is None:
            _default_bus = InProcessEventBus()
        return _default_bus


def build_event_publisher(names: Iterable[str] | None = None) -> EventPublisher:
    """Build the publisher named by ORDERS_EVENT_PUBLISHERS ("bus", "store")."""
    from orders.infra.event_store import EventStorePublisher

    if names is None:
        names = getattr(settings, "ORDERS_EVENT_PUBLISHERS", ["bus", "store"])

    publishers: list[EventPublisher] = []
    for name in names:
        name = name.strip().lower()
        if name == "bus":
            publishers.append(get_event_bus())
        elif name == "store":
            publishers.append(EventStorePublisher())
        elif name:
            raise ValueError(f"Unknown event publisher: {name}")

    if len(publishers) == 1:
        return publishers[0]
    return CompositeEventPublisher(publishers)
