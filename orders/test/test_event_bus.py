"""
Tests for in-process publishers and notifications.
"""
from django.test import SimpleTestCase, override_settings

from orders.domain.events import DomainEvent, OrderPaid, OrderShipped
from orders.domain.ports import EventPublisher
from orders.infra.event_bus import (
    CompositeEventPublisher,
    InProcessEventBus,
    build_event_publisher,
    get_event_bus,
)
from orders.infra.event_store import EventStorePublisher
from orders.notifications import NotificationSender, NotificationService, render
from orders.test.factories import make_order


class RecordingPublisher(EventPublisher):
    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)


class FailingPublisher(EventPublisher):
    def publish(self, event):
        raise RuntimeError("sink down")


class RecordingSender(NotificationSender):
    def __init__(self):
        self.sent = []

    def send(self, customer_id, subject, body):
        self.sent.append((customer_id, subject, body))


class FailingSender(NotificationSender):
    def send(self, customer_id, subject, body):
        raise ConnectionError("smtp unavailable")


def paid_order_events():
    order = make_order()
    order.pay()
    return order, order.drain_events()


class InProcessEventBusTest(SimpleTestCase):
    """Tests for InProcessEventBus."""

    def test_handlers_matched_by_type(self):
        """Test that handlers only receive their event types, DomainEvent gets all."""
        bus = InProcessEventBus()
        paid, everything = [], []
        bus.subscribe(OrderPaid, paid.append)
        bus.subscribe(DomainEvent, everything.append)

        _, events = paid_order_events()
        bus.publish_all(events)

        self.assertEqual([type(e) for e in paid], [OrderPaid])
        self.assertEqual(len(everything), 2)

    def test_failing_handler_does_not_block_others(self):
        """Test handler failure isolation."""
        bus = InProcessEventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(DomainEvent, broken)
        bus.subscribe(DomainEvent, received.append)

        _, events = paid_order_events()
        with self.assertLogs("orders.infra.event_bus", level="ERROR"):
            bus.publish(events[0])

        self.assertEqual(received, [events[0]])

    def test_unsubscribe(self):
        """Test that unsubscribed handlers no longer receive events."""
        bus = InProcessEventBus()
        received = []
        bus.subscribe(DomainEvent, received.append)
        bus.unsubscribe(DomainEvent, received.append)

        _, events = paid_order_events()
        bus.publish_all(events)

        self.assertEqual(received, [])


class CompositeEventPublisherTest(SimpleTestCase):
    """Tests for fan-out publishing."""

    def test_fan_out_survives_failing_sink(self):
        """Test that one failing sink does not stop the others."""
        recorder = RecordingPublisher()
        composite = CompositeEventPublisher([FailingPublisher(), recorder])

        _, events = paid_order_events()
        with self.assertLogs("orders.infra.event_bus", level="ERROR"):
            composite.publish_all(events)

        self.assertEqual(recorder.events, events)

    @override_settings(ORDERS_EVENT_PUBLISHERS=["bus"])
    def test_build_from_settings_single(self):
        """Test that a single configured sink is used directly."""
        self.assertIs(build_event_publisher(), get_event_bus())

    def test_build_composite(self):
        """Test building several sinks."""
        publisher = build_event_publisher(["bus", "store"])
        self.assertIsInstance(publisher, CompositeEventPublisher)
        self.assertIsInstance(publisher.publishers[1], EventStorePublisher)

    def test_unknown_sink_fails(self):
        """Test that unknown sink names are rejected."""
        with self.assertRaises(ValueError):
            build_event_publisher(["kafka"])


class NotificationServiceTest(SimpleTestCase):
    """Tests for NotificationService."""

    def test_sends_for_each_event(self):
        """Test that every event reaches the sender."""
        sender = RecordingSender()
        bus = InProcessEventBus()
        NotificationService(sender).register(bus)

        order, events = paid_order_events()
        bus.publish_all(events)

        self.assertEqual([s[1] for s in sender.sent], ["Order received", "Payment confirmed"])
        self.assertTrue(all(s[0] == order.customer_id for s in sender.sent))

    def test_sender_failure_is_logged(self):
        """Test that delivery failures never propagate."""
        service = NotificationService(FailingSender())
        _, events = paid_order_events()

        with self.assertLogs("orders.notifications", level="ERROR"):
            service.handle(events[0])

    def test_render_shipped(self):
        """Test shipped notification text."""
        order = make_order()
        order.pay()
        order.ship()
        shipped = [e for e in order.drain_events() if isinstance(e, OrderShipped)][0]

        subject, body = render(shipped)

        self.assertEqual(subject, "Order shipped")
        self.assertIn(order.order_id, body)
