"""
Ports the domain needs from the outside world.

Adapters live in orders.infra.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from orders.domain.events import DomainEvent
from orders.domain.order import Order, OrderStatus


class OrderRepository(ABC):
    """Persistence port for the Order aggregate."""

    @abstractmethod
    def save(self, order: Order) -> Order:
        """Insert or update an order and return it with its new version."""

    @abstractmethod
    def find_by_id(self, order_id: str) -> Order | None:
        ...

    @abstractmethod
    def find_by_customer_id(self, customer_id: str) -> list[Order]:
        ...

    @abstractmethod
    def find_by_status(self, status: OrderStatus) -> list[Order]:
        ...

    @abstractmethod
    def find_all(self) -> list[Order]:
        ...

    @abstractmethod
    def exists_by_id(self, order_id: str) -> bool:
        ...

    @abstractmethod
    def delete_by_id(self, order_id: str) -> None:
        ...


class EventPublisher(ABC):
    """Outbound port for domain events."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        ...

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.publish(event)
