"""
GraphQL schema definition using Ariadne.
"""
from datetime import datetime
from pathlib import Path

from ariadne import (
    MutationType,
    ObjectType,
    QueryType,
    ScalarType,
    load_schema_from_path,
    make_executable_schema,
)

from orders.domain.address import Address
from orders.domain.money import Money
from orders.domain.order import OrderItem


# Load schema from .graphql files
SCHEMAS_DIR = Path(__file__).parent / "schemas"
type_defs = "\n".join([
    load_schema_from_path(SCHEMAS_DIR / "common"),
    load_schema_from_path(SCHEMAS_DIR / "query"),
    load_schema_from_path(SCHEMAS_DIR / "mutation"),
])

query = QueryType()
mutation = MutationType()
order_type = ObjectType("Order")
order_item_type = ObjectType("OrderItem")
address_type = ObjectType("Address")


def _service(info):
    return info.context["service"]


@query.field("order")
def resolve_order(_, info, id):
    return _service(info).get_order(id)


@query.field("ordersByCustomer")
def resolve_orders_by_customer(_, info, customerId):
    return _service(info).orders_for_customer(customerId)


@query.field("ordersByStatus")
def resolve_orders_by_status(_, info, status):
    return _service(info).orders_with_status(status)


@query.field("orders")
def resolve_orders(_, info):
    return _service(info).all_orders()


@mutation.field("createOrder")
def resolve_create_order(_, info, input: dict):
    """Resolve create order mutation."""
    items = [
        OrderItem.of(
            product_id=item["productId"],
            product_name=item["productName"],
            unit_price=Money.of(item["unitPrice"]["amount"], item["unitPrice"]["currency"]),
            quantity=item["quantity"],
        )
        for item in input["items"]
    ]
    address_input = input["shippingAddress"]
    shipping_address = Address.of(
        street=address_input["street"],
        city=address_input["city"],
        state=address_input["state"],
        postal_code=address_input["postalCode"],
        country=address_input["country"],
    )
    return _service(info).create_order(input["customerId"], items, shipping_address)


@mutation.field("payOrder")
def resolve_pay_order(_, info, orderId):
    return _service(info).pay_order(orderId)


@mutation.field("shipOrder")
def resolve_ship_order(_, info, orderId):
    return _service(info).ship_order(orderId)


@mutation.field("cancelOrder")
def resolve_cancel_order(_, info, orderId, reason=None):
    return _service(info).cancel_order(orderId, reason)


@order_type.field("id")
def resolve_order_id(order, info):
    return order.order_id


@order_type.field("customerId")
def resolve_order_customer_id(order, info):
    return order.customer_id


@order_type.field("status")
def resolve_order_status(order, info):
    return order.status.value


@order_type.field("shippingAddress")
def resolve_order_shipping_address(order, info):
    return order.shipping_address


@order_type.field("total")
def resolve_order_total(order, info):
    return order.calculate_total()


@order_type.field("createdAt")
def resolve_order_created_at(order, info):
    return order.created_at


@order_type.field("paidAt")
def resolve_order_paid_at(order, info):
    return order.paid_at


@order_type.field("shippedAt")
def resolve_order_shipped_at(order, info):
    return order.shipped_at


@order_item_type.field("productId")
def resolve_item_product_id(item, info):
    return item.product_id


@order_item_type.field("productName")
def resolve_item_product_name(item, info):
    return item.product_name


@order_item_type.field("unitPrice")
def resolve_item_unit_price(item, info):
    return item.unit_price


@order_item_type.field("lineTotal")
def resolve_item_line_total(item, info):
    return item.calculate_line_total()


@address_type.field("postalCode")
def resolve_address_postal_code(address, info):
    return address.postal_code


@address_type.field("formatted")
def resolve_address_formatted(address, info):
    return address.formatted()


# Define custom scalars
decimal_scalar = ScalarType("Decimal")
datetime_scalar = ScalarType("DateTime")


@decimal_scalar.serializer
def serialize_decimal(value):
    """Serialize Decimal to string."""
    return str(value)


@datetime_scalar.serializer
def serialize_datetime(value):
    """Serialize datetime to ISO-8601 string."""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


schema = make_executable_schema(
    type_defs,
    query,
    mutation,
    order_type,
    order_item_type,
    address_type,
    decimal_scalar,
    datetime_scalar,
)
