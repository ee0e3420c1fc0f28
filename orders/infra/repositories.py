"""
Infrastructure repositories for the Order aggregate.
"""
from __future__ import annotations

import copy
import logging
import threading

from django.db import transaction
from django.db.models import F

from orders.domain.address import Address
from orders.domain.exceptions import ConcurrentModificationError
from orders.domain.money import Money
from orders.domain.order import Order, OrderItem, OrderStatus
from orders.domain.ports import OrderRepository
from orders.infra.models import OrderItemORM, OrderORM


logger = logging.getLogger(__name__)


class DjangoOrderRepository(OrderRepository):
    """Order repository backed by the Django ORM with optimistic locking."""

    def find_by_id(self, order_id: str) -> Order | None:
        """Get order by ID with items (no N+1)."""
        try:
            order_orm = self._queryset().get(id=order_id)
        except OrderORM.DoesNotExist:
            return None
        return self._to_domain(order_orm)

    def find_by_customer_id(self, customer_id: str) -> list[Order]:
        return [self._to_domain(o) for o in self._queryset().filter(customer_id=customer_id)]

    def find_by_status(self, status: OrderStatus) -> list[Order]:
        status = OrderStatus(status)
        return [self._to_domain(o) for o in self._queryset().filter(status=status.value)]

    def find_all(self) -> list[Order]:
        return [self._to_domain(o) for o in self._queryset()]

    def exists_by_id(self, order_id: str) -> bool:
        return OrderORM.objects.filter(id=order_id).exists()

    def delete_by_id(self, order_id: str) -> None:
        OrderORM.objects.filter(id=order_id).delete()

    @transaction.atomic
    def save(self, order: Order) -> Order:
        """Insert a new order or compare-and-swap update an existing one."""
        fields = self._order_fields(order)

        if order.version == 0 and not OrderORM.objects.filter(id=order.order_id).exists():
            order_orm = OrderORM.objects.create(id=order.order_id, version=1, **fields)
            self._save_items(order_orm, order)
            order.version = order_orm.version
            return order

        updated = (
            OrderORM.objects
            .filter(id=order.order_id, version=order.version)
            .update(version=F("version") + 1, **fields)
        )
        if updated == 0:
            logger.warning(
                "order_version_conflict",
                extra={"order_id": order.order_id, "version": order.version},
            )
            raise ConcurrentModificationError(
                f"Order {order.order_id} was modified concurrently (expected version {order.version})"
            )

        # Items never change after creation
        order.version += 1
        return order

    def _queryset(self):
        return OrderORM.objects.prefetch_related("items").order_by("created_at")

    def _order_fields(self, order: Order) -> dict:
        total = order.calculate_total()
        address = order.shipping_address
        return {
            "customer_id": order.customer_id,
            "status": order.status.value,
            "currency": total.currency,
            "total_amount": total.amount,
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "postal_code": address.postal_code,
            "country": address.country,
            "created_at": order.created_at,
            "paid_at": order.paid_at,
            "shipped_at": order.shipped_at,
        }

    def _save_items(self, order_orm: OrderORM, order: Order) -> None:
        OrderItemORM.objects.bulk_create([
            OrderItemORM(
                order=order_orm,
                position=position,
                product_id=item.product_id,
                product_name=item.product_name,
                unit_price=item.unit_price.amount,
                currency=item.unit_price.currency,
                quantity=item.quantity,
            )
            for position, item in enumerate(order.items)
        ])

    def _to_domain(self, order_orm: OrderORM) -> Order:
        """Convert ORM model to domain entity (no validation replay, no events)."""
        items = [
            OrderItem(
                product_id=item_orm.product_id,
                product_name=item_orm.product_name,
                unit_price=Money(item_orm.unit_price, item_orm.currency),
                quantity=item_orm.quantity,
            )
            for item_orm in sorted(order_orm.items.all(), key=lambda i: i.position)
        ]
        address = Address(
            street=order_orm.street,
            city=order_orm.city,
            state=order_orm.state,
            postal_code=order_orm.postal_code,
            country=order_orm.country,
        )
        return Order(
            order_id=order_orm.id,
            customer_id=order_orm.customer_id,
            items=items,
            shipping_address=address,
            status=OrderStatus(order_orm.status),
            created_at=order_orm.created_at,
            paid_at=order_orm.paid_at,
            shipped_at=order_orm.shipped_at,
            version=order_orm.version,
        )


class InMemoryOrderRepository(OrderRepository):
    """Thread-safe in-memory repository, used by tests and local wiring."""

    def __init__(self):
        self._orders: dict[str, Order] = {}
        self._lock = threading.RLock()

    def save(self, order: Order) -> Order:
        with self._lock:
            stored = self._orders.get(order.order_id)
            current_version = stored.version if stored else 0
            if order.version != current_version:
                raise ConcurrentModificationError(
                    f"Order {order.order_id} was modified concurrently (expected version {order.version})"
                )
            order.version = current_version + 1
            snapshot = copy.deepcopy(order)
            # Recorded events belong to the caller's instance, not the stored state
            snapshot.drain_events()
            self._orders[order.order_id] = snapshot
            return order

    def find_by_id(self, order_id: str) -> Order | None:
        with self._lock:
            stored = self._orders.get(order_id)
            return copy.deepcopy(stored) if stored else None

    def find_by_customer_id(self, customer_id: str) -> list[Order]:
        return [o for o in self.find_all() if o.customer_id == customer_id]

    def find_by_status(self, status: OrderStatus) -> list[Order]:
        status = OrderStatus(status)
        return [o for o in self.find_all() if o.status == status]

    def find_all(self) -> list[Order]:
        with self._lock:
            orders = [copy.deepcopy(o) for o in self._orders.values()]
        return sorted(orders, key=lambda o: o.created_at)

    def exists_by_id(self, order_id: str) -> bool:
        with self._lock:
            return order_id in self._orders

    def delete_by_id(self, order_id: str) -> None:
        with self._lock:
            self._orders.pop(order_id, None)

    def clear(self) -> None:
        with self._lock:
            self._orders.clear()
