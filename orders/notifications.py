"""
Customer notifications driven by order events.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from orders.domain.events import (
    DomainEvent,
    OrderCancelled,
    OrderCreated,
    OrderPaid,
    OrderShipped,
)
from orders.infra.event_bus import InProcessEventBus


logger = logging.getLogger(__name__)


class NotificationSender(ABC):
    """Delivery channel for customer notifications."""

    @abstractmethod
    def send(self, customer_id: str, subject: str, body: str) -> None:
        ...


class LoggingNotificationSender(NotificationSender):
    """Writes notifications to the log instead of delivering them."""

    def send(self, customer_id: str, subject: str, body: str) -> None:
        logger.info(
            "notification_sent",
            extra={"customer_id": customer_id, "subject": subject},
        )


def render(event: DomainEvent) -> tuple[str, str]:
    """Build (subject, body) for an order event."""
    if isinstance(event, OrderCreated):
        return (
            "Order received",
            f"Your order {event.order_id} with {event.item_count} item(s) "
            f"totalling {event.total_amount} was received.",
        )
    if isinstance(event, OrderPaid):
        return (
            "Payment confirmed",
            f"Payment of {event.total_amount} for order {event.order_id} was confirmed.",
        )
    if isinstance(event, OrderShipped):
        return "Order shipped", f"Your order {event.order_id} is on its way."
    if isinstance(event, OrderCancelled):
        return "Order cancelled", f"Your order {event.order_id} was cancelled: {event.reason}"
    return event.event_type, f"Order {event.order_id} was updated."


class NotificationService:
    """Forwards order events to a NotificationSender. Never raises."""

    def __init__(self, sender: NotificationSender | None = None):
        self.sender = sender or LoggingNotificationSender()

    def register(self, bus: InProcessEventBus) -> None:
        bus.subscribe(DomainEvent, self.handle)

    def handle(self, event: DomainEvent) -> None:
        subject, body = render(event)
        try:
            self.sender.send(event.customer_id, subject, body)
        except Exception as e:
            logger.error(
                "notification_failed",
                extra={
                    "order_id": event.order_id,
                    "event_type": event.event_type,
                    "error": str(e),
                },
                exc_info=True,
            )
