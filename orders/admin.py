from django.contrib import admin

from orders.infra.models import OrderORM, OrderItemORM
from orders.infra.read_models import OrderSummary
from orders.infra.event_store import EventStore


class OrderItemInline(admin.TabularInline):
    model = OrderItemORM
    extra = 0
    readonly_fields = ("position", "product_id", "product_name", "unit_price", "currency", "quantity")


@admin.register(OrderORM)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "customer_id", "status", "total_amount", "currency", "version", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("id", "customer_id")
    readonly_fields = ("id", "version", "created_at", "paid_at", "shipped_at")
    inlines = [OrderItemInline]


@admin.register(OrderItemORM)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "product_id", "product_name", "quantity", "unit_price", "created_at")
    search_fields = ("product_id", "product_name")


@admin.register(OrderSummary)
class OrderSummaryAdmin(admin.ModelAdmin):
    list_display = ("order_id", "customer_id", "status", "total_amount", "currency", "items_count", "created_at_read")
    list_filter = ("status", "created_at_read")
    readonly_fields = (
        "order_id", "customer_id", "status", "total_amount", "currency", "items_count",
        "cancellation_reason", "created_at_read", "paid_at", "shipped_at", "cancelled_at",
    )


@admin.register(EventStore)
class EventStoreAdmin(admin.ModelAdmin):
    list_display = ("event_id", "aggregate_id", "event_type", "sequence_number", "projected", "created_at")
    list_filter = ("aggregate_type", "event_type", "projected", "created_at")
    readonly_fields = (
        "id", "event_id", "aggregate_id", "aggregate_type", "event_type", "event_version",
        "event_data", "sequence_number", "occurred_at", "projected", "projected_at",
    )
