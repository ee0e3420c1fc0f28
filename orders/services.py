"""
Application service for order lifecycle operations.
"""
from __future__ import annotations

import logging
from typing import Callable, ContextManager, Iterable

from django.conf import settings
from django.db import transaction

from orders.domain.address import Address
from orders.domain.exceptions import OrderNotFound
from orders.domain.order import Order, OrderItem, OrderStatus
from orders.domain.ports import EventPublisher, OrderRepository
from orders.infra.event_bus import build_event_publisher
from orders.infra.locks import order_lock
from orders.infra.repositories import DjangoOrderRepository
from orders.infra.retry import RetryPolicy


logger = logging.getLogger(__name__)


class OrderService:
    """
    Orchestrates order use cases: load, mutate, save, then publish.

    Every write is one transaction under a per-order lock, retried as a whole
    on transient persistence errors. Events are published only after the
    transaction has finished; a publishing failure is logged and never
    undoes the committed change.
    """

    def __init__(
        self,
        repository: OrderRepository,
        publisher: EventPublisher,
        retry_policy: RetryPolicy | None = None,
        lock: Callable[[str], ContextManager] = order_lock,
    ):
        self.repository = repository
        self.publisher = publisher
        self.retry_policy = retry_policy or RetryPolicy()
        self.lock = lock

    def create_order(
        self,
        customer_id: str,
        items: Iterable[OrderItem],
        shipping_address: Address,
    ) -> Order:
        """Create order in CREATED status."""
        order = Order.create(customer_id, items, shipping_address)

        def _persist() -> Order:
            # A failed attempt may have bumped the version before rollback
            order.version = 0
            with transaction.atomic(), self.lock(order.order_id):
                return self.repository.save(order)

        self.retry_policy.call(_persist)
        logger.info(
            "order_created",
            extra={
                "order_id": order.order_id,
                "customer_id": order.customer_id,
                "status": order.status.value,
            },
        )
        self._publish(order)
        return order

    def pay_order(self, order_id: str) -> Order:
        """Mark order as paid (idempotent for PAID and SHIPPED orders)."""
        return self._transition(order_id, lambda order: order.pay(), "order_paid")

    def ship_order(self, order_id: str) -> Order:
        return self._transition(order_id, lambda order: order.ship(), "order_shipped")

    def cancel_order(self, order_id: str, reason: str | None = None) -> Order:
        """Cancel order (idempotent for CANCELLED orders)."""
        return self._transition(order_id, lambda order: order.cancel(reason), "order_cancelled")

    def get_order(self, order_id: str) -> Order:
        order = self.repository.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order not found: {order_id}")
        return order

    def find_order(self, order_id: str) -> Order | None:
        return self.repository.find_by_id(order_id)

    def orders_for_customer(self, customer_id: str) -> list[Order]:
        return self.repository.find_by_customer_id(customer_id)

    def orders_with_status(self, status: OrderStatus) -> list[Order]:
        return self.repository.find_by_status(OrderStatus(status))

    def all_orders(self) -> list[Order]:
        return self.repository.find_all()

    def _transition(self, order_id: str, mutate: Callable[[Order], None], operation: str) -> Order:
        def _attempt() -> tuple[Order, OrderStatus]:
            with transaction.atomic(), self.lock(order_id):
                order = self.get_order(order_id)
                previous_status = order.status
                mutate(order)
                if order.status != previous_status:
                    self.repository.save(order)
                return order, previous_status

        order, previous_status = self.retry_policy.call(_attempt)

        if order.status == previous_status:
            logger.info(
                "order_transition_noop",
                extra={"order_id": order_id, "operation": operation, "status": order.status.value},
            )
        else:
            logger.info(
                operation,
                extra={
                    "order_id": order_id,
                    "from_status": previous_status.value,
                    "status": order.status.value,
                },
            )
        self._publish(order)
        return order

    def _publish(self, order: Order) -> None:
        for event in order.drain_events():
            try:
                self.publisher.publish(event)
            except Exception as e:
                logger.error(
                    "event_publish_failed",
                    extra={
                        "order_id": order.order_id,
                        "event_type": event.event_type,
                        "event_id": str(event.event_id),
                        "error": str(e),
                    },
                    exc_info=True,
                )


def default_order_service() -> OrderService:
    """OrderService wired with the Django-backed adapters from settings."""
    return OrderService(
        repository=DjangoOrderRepository(),
        publisher=build_event_publisher(),
        retry_policy=RetryPolicy(
            max_attempts=getattr(settings, "ORDERS_RETRY_MAX_ATTEMPTS", 3),
            base_delay=getattr(settings, "ORDERS_RETRY_BASE_DELAY", 1.0),
            multiplier=getattr(settings, "ORDERS_RETRY_MULTIPLIER", 2.0),
        ),
    )
