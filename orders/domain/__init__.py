from orders.domain.address import Address
from orders.domain.events import (
    DomainEvent,
    OrderCancelled,
    OrderCreated,
    OrderPaid,
    OrderShipped,
)
from orders.domain.money import Money
from orders.domain.order import Order, OrderItem, OrderStatus

__all__ = [
    "Address",
    "DomainEvent",
    "Money",
    "Order",
    "OrderCancelled",
    "OrderCreated",
    "OrderItem",
    "OrderPaid",
    "OrderShipped",
    "OrderStatus",
]
