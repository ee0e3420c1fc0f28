"""
Projector for updating read models from stored events.
"""
from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from orders.infra.event_store import EventStore, EventStoreRepository
from orders.infra.read_models import OrderSummary


logger = logging.getLogger(__name__)


class MissingOrderSummary(LookupError):
    """Event arrived before its order summary was projected."""


class Projector:
    """Projector for updating read models from domain events."""

    def __init__(self, event_store_repo: EventStoreRepository | None = None):
        self.event_store_repo = event_store_repo or EventStoreRepository()

    def process_events(self, limit: int = 100) -> int:
        """Project un-projected events; returns how many were applied."""
        events = self.event_store_repo.get_unprojected(limit=limit)
        processed_count = 0

        for event_orm in events:
            try:
                with transaction.atomic():
                    self._process_event(event_orm)
                    EventStore.objects.filter(id=event_orm.id).update(
                        projected=True,
                        projected_at=timezone.now(),
                    )
                processed_count += 1
            except Exception as e:
                # Left un-projected for the next run
                logger.error(
                    "projector_error",
                    extra={
                        "event_id": str(event_orm.event_id),
                        "event_type": event_orm.event_type,
                        "error": str(e),
                    },
                    exc_info=True,
                )

        return processed_count

    def _process_event(self, event_orm: EventStore) -> None:
        """Process single event."""
        handler = {
            "OrderCreated": self._handle_order_created,
            "OrderPaid": self._handle_order_paid,
            "OrderShipped": self._handle_order_shipped,
            "OrderCancelled": self._handle_order_cancelled,
        }.get(event_orm.event_type)

        if handler is None:
            logger.warning(
                "projector_unknown_event_type",
                extra={"event_id": str(event_orm.event_id), "event_type": event_orm.event_type},
            )
            return
        handler(event_orm.aggregate_id, event_orm.event_data)

    def _handle_order_created(self, order_id: str, event_data: dict) -> None:
        total = event_data["total_amount"]
        OrderSummary.objects.update_or_create(
            order_id=order_id,
            defaults={
                "customer_id": event_data["customer_id"],
                "status": "CREATED",
                "total_amount": Decimal(total["amount"]),
                "currency": total["currency"],
                "items_count": event_data.get("item_count", 0),
                "created_at_read": parse_datetime(event_data["occurred_at"]),
            },
        )

    def _handle_order_paid(self, order_id: str, event_data: dict) -> None:
        self._update_summary(
            order_id,
            status="PAID",
            paid_at=parse_datetime(event_data["paid_at"]),
        )

    def _handle_order_shipped(self, order_id: str, event_data: dict) -> None:
        self._update_summary(
            order_id,
            status="SHIPPED",
            shipped_at=parse_datetime(event_data["shipped_at"]),
        )

    def _handle_order_cancelled(self, order_id: str, event_data: dict) -> None:
        self._update_summary(
            order_id,
            status="CANCELLED",
            cancellation_reason=event_data.get("reason", ""),
            cancelled_at=parse_datetime(event_data["occurred_at"]),
        )

    def _update_summary(self, order_id: str, **fields) -> None:
        # Raising keeps the event un-projected until OrderCreated is applied
        if OrderSummary.objects.filter(order_id=order_id).update(**fields) == 0:
            raise MissingOrderSummary(f"No order summary for order {order_id}")
