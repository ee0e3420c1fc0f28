"""
Tests for order repositories and optimistic locking.
"""
from django.test import SimpleTestCase, TestCase

from orders.domain.exceptions import ConcurrentModificationError
from orders.domain.order import OrderStatus
from orders.infra.models import OrderItemORM, OrderORM
from orders.infra.repositories import DjangoOrderRepository, InMemoryOrderRepository
from orders.test.factories import make_address, make_item, make_order


class DjangoOrderRepositoryTest(TestCase):
    """Tests for DjangoOrderRepository."""

    def setUp(self):
        self.repo = DjangoOrderRepository()

    def test_save_and_load_round_trip(self):
        """Test that a saved order loads back with the same values."""
        order = make_order(address=make_address(country="ca", state="on"))
        self.repo.save(order)

        loaded = self.repo.find_by_id(order.order_id)

        self.assertEqual(loaded, order)
        self.assertEqual(loaded.customer_id, order.customer_id)
        self.assertEqual(loaded.items, order.items)
        self.assertEqual(loaded.shipping_address, order.shipping_address)
        self.assertEqual(loaded.status, OrderStatus.CREATED)
        self.assertEqual(loaded.calculate_total(), order.calculate_total())
        self.assertEqual(loaded.created_at, order.created_at)
        self.assertEqual(loaded.version, 1)

    def test_loaded_order_has_no_events(self):
        """Test that loading does not replay events."""
        order = make_order()
        self.repo.save(order)

        self.assertEqual(self.repo.find_by_id(order.order_id).pending_events, ())

    def test_items_keep_their_order(self):
        """Test that item positions survive persistence."""
        items = [make_item(f"SKU-{i}", quantity=i + 1) for i in range(5)]
        order = make_order(items=items)
        self.repo.save(order)

        loaded = self.repo.find_by_id(order.order_id)

        self.assertEqual([i.product_id for i in loaded.items], [f"SKU-{i}" for i in range(5)])
        self.assertEqual(OrderItemORM.objects.filter(order_id=order.order_id).count(), 5)

    def test_update_bumps_version_and_status(self):
        """Test that saving a transition updates the row."""
        order = make_order()
        self.repo.save(order)
        order.pay()
        self.repo.save(order)

        row = OrderORM.objects.get(id=order.order_id)
        self.assertEqual(row.status, "PAID")
        self.assertEqual(row.version, 2)
        self.assertIsNotNone(row.paid_at)
        self.assertEqual(order.version, 2)

    def test_stale_save_fails(self):
        """Test that a save based on an outdated version is rejected."""
        order = make_order()
        self.repo.save(order)
        first = self.repo.find_by_id(order.order_id)
        second = self.repo.find_by_id(order.order_id)

        first.pay()
        self.repo.save(first)
        second.cancel()

        with self.assertRaises(ConcurrentModificationError):
            self.repo.save(second)
        self.assertEqual(self.repo.find_by_id(order.order_id).status, OrderStatus.PAID)

    def test_queries(self):
        """Test customer, status and listing queries."""
        first = make_order("alice")
        second = make_order("alice")
        third = make_order("bob")
        for order in (first, second, third):
            self.repo.save(order)
        second.pay()
        self.repo.save(second)

        self.assertEqual(
            {o.order_id for o in self.repo.find_by_customer_id("alice")},
            {first.order_id, second.order_id},
        )
        self.assertEqual([o.order_id for o in self.repo.find_by_status(OrderStatus.PAID)], [second.order_id])
        self.assertEqual(len(self.repo.find_all()), 3)
        self.assertEqual(self.repo.find_by_customer_id("nobody"), [])

    def test_exists_and_delete(self):
        """Test existence check and deletion."""
        order = make_order()
        self.assertFalse(self.repo.exists_by_id(order.order_id))
        self.repo.save(order)
        self.assertTrue(self.repo.exists_by_id(order.order_id))

        self.repo.delete_by_id(order.order_id)

        self.assertFalse(self.repo.exists_by_id(order.order_id))
        self.assertIsNone(self.repo.find_by_id(order.order_id))
        self.assertFalse(OrderItemORM.objects.filter(order_id=order.order_id).exists())

    def test_missing_order(self):
        """Test that unknown ids load as None."""
        self.assertIsNone(self.repo.find_by_id("does-not-exist"))


class InMemoryOrderRepositoryTest(SimpleTestCase):
    """Tests for InMemoryOrderRepository."""

    def setUp(self):
        self.repo = InMemoryOrderRepository()

    def test_returns_copies(self):
        """Test that callers never share state with the store."""
        order = make_order()
        self.repo.save(order)

        loaded = self.repo.find_by_id(order.order_id)
        loaded.pay()

        self.assertEqual(self.repo.find_by_id(order.order_id).status, OrderStatus.CREATED)
        self.assertIsNot(loaded, self.repo.find_by_id(order.order_id))

    def test_stored_copy_has_no_events(self):
        """Test that events stay with the caller's instance."""
        order = make_order()
        self.repo.save(order)

        self.assertEqual(len(order.pending_events), 1)
        self.assertEqual(self.repo.find_by_id(order.order_id).pending_events, ())

    def test_stale_save_fails(self):
        """Test optimistic version check."""
        order = make_order()
        self.repo.save(order)
        first = self.repo.find_by_id(order.order_id)
        second = self.repo.find_by_id(order.order_id)
        first.pay()
        self.repo.save(first)
        second.cancel()

        with self.assertRaises(ConcurrentModificationError):
            self.repo.save(second)

    def test_queries_and_delete(self):
        """Test listing queries and deletion."""
        first = make_order("alice")
        second = make_order("bob")
        self.repo.save(first)
        self.repo.save(second)

        self.assertEqual([o.order_id for o in self.repo.find_by_customer_id("bob")], [second.order_id])
        self.assertEqual(len(self.repo.find_by_status(OrderStatus.CREATED)), 2)
        self.repo.delete_by_id(first.order_id)
        self.assertFalse(self.repo.exists_by_id(first.order_id))
        self.assertEqual(len(self.repo.find_all()), 1)
