"""
Domain events recorded by the Order aggregate.

Events are immutable facts. The aggregate only records them; publishing is
done by the application service after the state change is persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from orders.domain.money import Money


class EventVersion(str, Enum):
    """Event version for upcasting."""
    V1 = "1.0"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event."""
    order_id: str
    customer_id: str
    # event_id, occurred_at and version are set in subclasses to avoid dataclass field ordering issues

    @property
    def event_type(self) -> str:
        return type(self).__name__

    @property
    def aggregate_id(self) -> str:
        return self.order_id

    def to_dict(self) -> dict:
        """Serialize event to JSON-safe dict."""
        data = {"event_type": self.event_type}
        for f in fields(self):
            data[f.name] = _serialize(getattr(self, f.name))
        return data


def _serialize(value):
    if isinstance(value, Money):
        return value.to_dict()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Order created event."""
    total_amount: Money
    item_count: int
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    version: EventVersion = EventVersion.V1


@dataclass(frozen=True)
class OrderPaid(DomainEvent):
    """Order paid event."""
    total_amount: Money
    paid_at: datetime
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    version: EventVersion = EventVersion.V1


@dataclass(frozen=True)
class OrderShipped(DomainEvent):
    """Order shipped event."""
    shipped_at: datetime
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    version: EventVersion = EventVersion.V1


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Order cancelled event."""
    reason: str
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    version: EventVersion = EventVersion.V1


ORDER_EVENTS = (OrderCreated, OrderPaid, OrderShipped, OrderCancelled)
