"""
Domain model for Order aggregate.

State machine:
    CREATED -> PAID -> SHIPPED
    CREATED -> CANCELLED
    PAID -> CANCELLED
SHIPPED and CANCELLED are terminal.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from orders.domain.address import Address
from orders.domain.events import (
    DomainEvent,
    OrderCancelled,
    OrderCreated,
    OrderPaid,
    OrderShipped,
)
from orders.domain.exceptions import (
    EmptyOrderTotal,
    InvalidItem,
    InvalidOrder,
    InvalidTransition,
)
from orders.domain.money import Money


DEFAULT_CANCELLATION_REASON = "Order cancelled"


class OrderStatus(str, Enum):
    """Order status enumeration."""
    CREATED = "CREATED"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"

    def can_transition_to(self, target: OrderStatus) -> bool:
        return can_transition(self, target)

    def is_terminal(self) -> bool:
        return is_terminal(self)


_VALID_TRANSITIONS = {
    OrderStatus.CREATED: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset(),  # Terminal
    OrderStatus.CANCELLED: frozenset(),  # Terminal
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Check whether current -> target is a legal edge."""
    return OrderStatus(target) in _VALID_TRANSITIONS[OrderStatus(current)]


def is_terminal(status: OrderStatus) -> bool:
    return not _VALID_TRANSITIONS[OrderStatus(status)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_blank(value) -> bool:
    return value is None or not isinstance(value, str) or not value.strip()


@dataclass(frozen=True)
class OrderItem:
    """Order line item value object."""

    product_id: str
    product_name: str
    unit_price: Money
    quantity: int

    def __post_init__(self) -> None:
        if _is_blank(self.product_id):
            raise InvalidItem("Product ID cannot be blank")
        if _is_blank(self.product_name):
            raise InvalidItem("Product name cannot be blank")
        if not isinstance(self.unit_price, Money):
            raise InvalidItem("Unit price is required")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidItem(f"Quantity must be an integer: {self.quantity!r}")
        if self.quantity <= 0:
            raise InvalidItem(f"Quantity must be positive: {self.quantity}")

    @classmethod
    def of(cls, product_id: str, product_name: str, unit_price: Money, quantity: int) -> OrderItem:
        return cls(
            product_id=product_id,
            product_name=product_name,
            unit_price=unit_price,
            quantity=quantity,
        )

    def calculate_line_total(self) -> Money:
        """Calculate unit price times quantity."""
        return self.unit_price.multiply(self.quantity)

    def with_quantity(self, quantity: int) -> OrderItem:
        """Return a copy with a different quantity (re-validated)."""
        return OrderItem.of(self.product_id, self.product_name, self.unit_price, quantity)

    def __str__(self) -> str:
        return (
            f"{self.product_name} (ID: {self.product_id}) - "
            f"{self.quantity}x @ {self.unit_price} = {self.calculate_line_total()}"
        )


class Order:
    """Order aggregate root.

    The only mutators are pay(), ship() and cancel(). Each either performs the
    whole transition (status, timestamp, recorded event) or raises and leaves
    the order untouched. Recorded events leave the aggregate through
    drain_events() only.

    Orders are compared by identity (order_id), unlike the value objects they
    hold.
    """

    def __init__(
        self,
        order_id: str,
        customer_id: str,
        items: tuple[OrderItem, ...] | list[OrderItem],
        shipping_address: Address,
        status: OrderStatus = OrderStatus.CREATED,
        created_at: datetime | None = None,
        paid_at: datetime | None = None,
        shipped_at: datetime | None = None,
        version: int = 0,
    ):
        self._order_id = order_id
        self._customer_id = customer_id
        self._items = tuple(items)
        self._shipping_address = shipping_address
        self._status = OrderStatus(status)
        self._created_at = created_at or _utcnow()
        self._paid_at = paid_at
        self._shipped_at = shipped_at
        self._events: list[DomainEvent] = []
        # Concurrency token owned by the persistence layer
        self.version = version

    @classmethod
    def create(cls, customer_id: str, items, shipping_address: Address) -> Order:
        """Create a new order in CREATED status and record OrderCreated."""
        if _is_blank(customer_id):
            raise InvalidOrder("Customer ID cannot be blank")

        items = tuple(items) if items is not None else ()
        if not items:
            raise InvalidOrder("Order must have at least one item")
        if not all(isinstance(item, OrderItem) for item in items):
            raise InvalidOrder("Order items must be OrderItem values")

        if shipping_address is None:
            raise InvalidOrder("Shipping address is required")
        if not isinstance(shipping_address, Address):
            raise InvalidOrder("Shipping address must be an Address value")

        total = _sum_line_totals(items)
        if total.is_zero():
            raise EmptyOrderTotal("Order total must be greater than zero")

        order = cls(
            order_id=str(uuid4()),
            customer_id=customer_id,
            items=items,
            shipping_address=shipping_address,
        )
        order._events.append(
            OrderCreated(
                order_id=order.order_id,
                customer_id=order.customer_id,
                total_amount=total,
                item_count=len(items),
            )
        )
        return order

    @property
    def order_id(self) -> str:
        return self._order_id

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @property
    def items(self) -> tuple[OrderItem, ...]:
        """Get order items (read-only)."""
        return self._items

    @property
    def shipping_address(self) -> Address:
        return self._shipping_address

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def paid_at(self) -> datetime | None:
        return self._paid_at

    @property
    def shipped_at(self) -> datetime | None:
        return self._shipped_at

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._events)

    def calculate_total(self) -> Money:
        """Sum of all line totals, recomputed on every call."""
        return _sum_line_totals(self._items)

    def pay(self) -> None:
        """Mark order as paid. Paying a PAID or SHIPPED order is a no-op."""
        if self._status in (OrderStatus.PAID, OrderStatus.SHIPPED):
            return
        if not self._status.can_transition_to(OrderStatus.PAID):
            raise InvalidTransition(
                f"Cannot pay order in status: {self._status.value}. "
                "Order must be in CREATED status."
            )

        paid_at = _utcnow()
        event = OrderPaid(
            order_id=self._order_id,
            customer_id=self._customer_id,
            total_amount=self.calculate_total(),
            paid_at=paid_at,
        )
        self._status = OrderStatus.PAID
        self._paid_at = paid_at
        self._events.append(event)

    def ship(self) -> None:
        """Mark order as shipped. Only paid orders can ship."""
        if self._status != OrderStatus.PAID:
            raise InvalidTransition(
                f"Cannot ship order in status: {self._status.value}. "
                "Order must be paid before shipping."
            )

        shipped_at = _utcnow()
        event = OrderShipped(
            order_id=self._order_id,
            customer_id=self._customer_id,
            shipped_at=shipped_at,
        )
        self._status = OrderStatus.SHIPPED
        self._shipped_at = shipped_at
        self._events.append(event)

    def cancel(self, reason: str | None = None) -> None:
        """Cancel order. Cancelling a CANCELLED order is a no-op."""
        if self._status == OrderStatus.SHIPPED:
            raise InvalidTransition(
                "Cannot cancel order that has been shipped. "
                "Consider processing a return instead."
            )
        if self._status == OrderStatus.CANCELLED:
            return
        if not self._status.can_transition_to(OrderStatus.CANCELLED):
            raise InvalidTransition(f"Cannot cancel order in status: {self._status.value}")

        event = OrderCancelled(
            order_id=self._order_id,
            customer_id=self._customer_id,
            reason=DEFAULT_CANCELLATION_REASON if _is_blank(reason) else reason.strip(),
        )
        self._status = OrderStatus.CANCELLED
        self._events.append(event)

    def drain_events(self) -> list[DomainEvent]:
        """Return recorded events and clear the buffer."""
        events, self._events = self._events, []
        return events

    def is_paid(self) -> bool:
        return self._status in (OrderStatus.PAID, OrderStatus.SHIPPED)

    def is_modifiable(self) -> bool:
        return not self._status.is_terminal()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return self._order_id == other._order_id

    def __hash__(self) -> int:
        return hash(self._order_id)

    def __repr__(self) -> str:
        return (
            f"Order(order_id={self._order_id!r}, customer_id={self._customer_id!r}, "
            f"status={self._status.value}, item_count={len(self._items)})"
        )


def _sum_line_totals(items) -> Money:
    total = items[0].calculate_line_total()
    for item in items[1:]:
        total = total.add(item.calculate_line_total())
    return total
