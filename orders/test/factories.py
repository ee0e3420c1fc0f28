"""
Builders for domain objects used across tests.
"""
from orders.domain.address import Address
from orders.domain.money import Money
from orders.domain.order import Order, OrderItem


def make_address(**overrides) -> Address:
    fields = {
        "street": "123 Main St",
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
    }
    fields.update(overrides)
    return Address.of(**fields)


def make_item(
    product_id: str = "SKU-001",
    product_name: str = "Widget",
    price: str = "19.99",
    currency: str = "USD",
    quantity: int = 1,
) -> OrderItem:
    return OrderItem.of(product_id, product_name, Money.of(price, currency), quantity)


def make_order(customer_id: str = "customer-1", items=None, address: Address | None = None) -> Order:
    if items is None:
        items = [make_item(quantity=3), make_item("SKU-002", "Gadget", "5.00", quantity=2)]
    return Order.create(customer_id, items, address or make_address())
