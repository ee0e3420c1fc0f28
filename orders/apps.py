from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Order fulfillment"

    def ready(self):
        from orders.infra.event_bus import get_event_bus
        from orders.notifications import NotificationService

        NotificationService().register(get_event_bus())
