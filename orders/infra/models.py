from __future__ import annotations

from django.db import models


STATUS_CHOICES = (
    ("CREATED", "Created"),
    ("PAID", "Paid"),
    ("SHIPPED", "Shipped"),
    ("CANCELLED", "Cancelled"),
)


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class OrderORM(models.Model):
    # Identity is assigned by the domain, never by the database
    id = models.CharField(primary_key=True, max_length=36, editable=False)
    customer_id = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    currency = models.CharField(max_length=3)
    total_amount = models.DecimalField(max_digits=19, decimal_places=4)

    street = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=50)
    postal_code = models.CharField(max_length=20)
    country = models.CharField(max_length=2)

    created_at = models.DateTimeField()
    paid_at = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    version = models.PositiveIntegerField(default=0)

    class Meta:
        indexes = [
            models.Index(fields=("customer_id",)),
            models.Index(fields=("status",)),
            models.Index(fields=("customer_id", "status")),
        ]
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.id} ({self.status})"


class OrderItemORM(TimeStampedModel):
    order = models.ForeignKey(
        OrderORM,
        on_delete=models.CASCADE,
        related_name="items",
    )
    position = models.PositiveIntegerField()
    product_id = models.CharField(max_length=255)
    product_name = models.CharField(max_length=255)
    unit_price = models.DecimalField(max_digits=19, decimal_places=4)
    currency = models.CharField(max_length=3)
    quantity = models.PositiveIntegerField()

    class Meta:
        unique_together = [("order", "position")]
        indexes = [
            models.Index(fields=("order",)),
        ]
        ordering = ["position"]
