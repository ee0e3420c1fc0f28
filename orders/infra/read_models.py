"""
Read models (projections) for CQRS.
"""
from __future__ import annotations

from django.db import models

from orders.infra.models import STATUS_CHOICES, TimeStampedModel


class OrderSummary(TimeStampedModel):
    """Read model for order summary (denormalized for fast reads)."""
    order_id = models.CharField(primary_key=True, max_length=36)
    customer_id = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    total_amount = models.DecimalField(max_digits=19, decimal_places=4)
    currency = models.CharField(max_length=3)
    items_count = models.IntegerField(default=0)
    cancellation_reason = models.TextField(blank=True, default="")
    created_at_read = models.DateTimeField()  # Denormalized from write model
    paid_at = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=("customer_id", "status")),
            models.Index(fields=("customer_id", "-created_at_read")),
            models.Index(fields=("status",)),
        ]
