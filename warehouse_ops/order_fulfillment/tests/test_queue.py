"""
Tests for the order queue.
"""

from datetime import timedelta
from django.test import TestCase, override_settings
from django.utils import timezone

from ..models import Order, OrderPriority, OrderStatus
from ..services import get_services
from ..exceptions import ValidationException
from .fixtures import create_product, create_user


class OrderQueueTest(TestCase):
    """Test OrderService.get_order_queue."""

    def setUp(self):
        """Set up test data."""
        self.picker = create_user('picker')
        self.services = get_services()
        create_product('SKU-001', 'A-01-01', stock=1000)

    def _create_order(self, priority=OrderPriority.NORMAL, age_minutes=0):
        order = self.services.orders.create_order(
            customer_id='CUST-1', items=[{'sku': 'SKU-001', 'quantity': 1}], priority=priority
        )
        if age_minutes:
            Order.objects.filter(pk=order.pk).update(created_at=timezone.now() - timedelta(minutes=age_minutes))
        return order

    def test_queue_sorted_by_priority_then_age(self):
        """Test urgent work comes first and older orders lead within a priority."""
        normal_new = self._create_order(OrderPriority.NORMAL, age_minutes=1)
        low_old = self._create_order(OrderPriority.LOW, age_minutes=60)
        urgent = self._create_order(OrderPriority.URGENT, age_minutes=5)
        normal_old = self._create_order(OrderPriority.NORMAL, age_minutes=30)
        high = self._create_order(OrderPriority.HIGH, age_minutes=2)

        queue = self.services.orders.get_order_queue()

        self.assertEqual(
            [order.id for order in queue['orders']],
            [urgent.id, high.id, normal_old.id, normal_new.id, low_old.id]
        )
        self.assertEqual(queue['total'], 5)
        self.assertEqual(queue['page'], 1)
        self.assertEqual(queue['limit'], 20)

    def test_pending_filter_hides_claimed_orders(self):
        claimed = self._create_order()
        waiting = self._create_order()
        self.services.claims.claim_order(str(claimed.id), self.picker)

        queue = self.services.orders.get_order_queue({'status': OrderStatus.PENDING})
        self.assertEqual([order.id for order in queue['orders']], [waiting.id])

        queue = self.services.orders.get_order_queue({'status': OrderStatus.PICKING, 'picker': self.picker.pk})
        self.assertEqual([order.id for order in queue['orders']], [claimed.id])

    def test_priority_filter(self):
        self._create_order(OrderPriority.LOW)
        high = self._create_order(OrderPriority.HIGH)

        queue = self.services.orders.get_order_queue({'priority': OrderPriority.HIGH})
        self.assertEqual([order.id for order in queue['orders']], [high.id])

    def test_invalid_filter_value(self):
        with self.assertRaises(ValidationException):
            self.services.orders.get_order_queue({'status': 'LOST'})

    def test_pagination(self):
        orders = [self._create_order(age_minutes=10 - n) for n in range(5)]

        page_one = self.services.orders.get_order_queue(page=1, limit=2)
        page_three = self.services.orders.get_order_queue(page=3, limit=2)
        past_end = self.services.orders.get_order_queue(page=4, limit=2)

        self.assertEqual([order.id for order in page_one['orders']], [orders[0].id, orders[1].id])
        self.assertEqual([order.id for order in page_three['orders']], [orders[4].id])
        self.assertEqual(past_end['orders'], [])
        self.assertEqual(past_end['total'], 5)

    def test_invalid_paging(self):
        for page, limit in ((0, 10), (1, 0), ('x', 10)):
            with self.assertRaises(ValidationException):
                self.services.orders.get_order_queue(page=page, limit=limit)

    @override_settings(FULFILLMENT={'QUEUE_MAX_PAGE_SIZE': 3})
    def test_limit_is_capped(self):
        for _ in range(4):
            self._create_order()
        queue = self.services.orders.get_order_queue(limit=50)
        self.assertEqual(queue['limit'], 3)
        self.assertEqual(len(queue['orders']), 3)
