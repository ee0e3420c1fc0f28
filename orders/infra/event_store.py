"""
Durable append-only event store.
"""
from __future__ import annotations

import logging
from uuid import uuid4

from django.db import IntegrityError, models, transaction
from django.db.models import Max

from orders.domain.events import DomainEvent, EventVersion
from orders.domain.ports import EventPublisher
from orders.infra.models import TimeStampedModel


logger = logging.getLogger(__name__)

ORDER_AGGREGATE = "Order"


class EventStore(TimeStampedModel):
    """Event store for domain events."""
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    event_id = models.UUIDField(unique=True)
    aggregate_id = models.CharField(max_length=36)
    aggregate_type = models.CharField(max_length=50)
    event_type = models.CharField(max_length=100)
    event_version = models.CharField(max_length=10, default=EventVersion.V1.value)
    event_data = models.JSONField()
    sequence_number = models.BigIntegerField()  # Per-aggregate ordering
    occurred_at = models.DateTimeField()
    projected = models.BooleanField(default=False)
    projected_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = [("aggregate_id", "aggregate_type", "sequence_number")]
        indexes = [
            models.Index(fields=("aggregate_id", "aggregate_type")),
            models.Index(fields=("projected", "created_at")),
        ]
        ordering = ["created_at", "sequence_number"]


class EventStoreRepository:
    """Repository for event store."""

    def append(self, event: DomainEvent, aggregate_type: str = ORDER_AGGREGATE) -> EventStore | None:
        """Append event; returns None when the event id is already stored."""
        if EventStore.objects.filter(event_id=event.event_id).exists():
            return None

        try:
            with transaction.atomic():
                last_sequence = (
                    EventStore.objects
                    .filter(aggregate_id=event.aggregate_id, aggregate_type=aggregate_type)
                    .aggregate(last=Max("sequence_number"))["last"]
                )
                return EventStore.objects.create(
                    event_id=event.event_id,
                    aggregate_id=event.aggregate_id,
                    aggregate_type=aggregate_type,
                    event_type=event.event_type,
                    event_version=event.version.value,
                    event_data=event.to_dict(),
                    sequence_number=(last_sequence or 0) + 1,
                    occurred_at=event.occurred_at,
                )
        except IntegrityError:
            # Lost a race with another writer for the same event or sequence
            if EventStore.objects.filter(event_id=event.event_id).exists():
                return None
            raise

    def get_events(self, aggregate_id: str, aggregate_type: str = ORDER_AGGREGATE) -> list[dict]:
        """Get all events for aggregate."""
        events = (
            EventStore.objects
            .filter(aggregate_id=aggregate_id, aggregate_type=aggregate_type)
            .order_by("sequence_number")
        )
        return [self._deserialize_event(e) for e in events]

    def get_unprojected(self, limit: int = 100) -> list[EventStore]:
        return list(
            EventStore.objects
            .filter(projected=False)
            .order_by("created_at", "sequence_number")[:limit]
        )

    def _deserialize_event(self, event_orm: EventStore) -> dict:
        """Deserialize event from store."""
        return {
            "id": str(event_orm.id),
            "event_id": str(event_orm.event_id),
            "aggregate_id": event_orm.aggregate_id,
            "event_type": event_orm.event_type,
            "version": event_orm.event_version,
            "data": event_orm.event_data,
            "sequence_number": event_orm.sequence_number,
            "occurred_at": event_orm.occurred_at.isoformat(),
        }


class EventStorePublisher(EventPublisher):
    """Publishes events by appending them to the event store."""

    def __init__(self, repository: EventStoreRepository | None = None):
        self.repository = repository or EventStoreRepository()

    def publish(self, event: DomainEvent) -> None:
        stored = self.repository.append(event)
        if stored is None:
            logger.info(
                "event_already_stored",
                extra={"event_id": str(event.event_id), "event_type": event.event_type},
            )
            return
        logger.info(
            "event_stored",
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "order_id": event.order_id,
                "sequence_number": stored.sequence_number,
            },
        )
