"""
Tests for derived order progress.
"""

from django.test import SimpleTestCase, TestCase

from ..models import OrderStatus
from ..services import get_services
from ..services.progress import order_progress, percentage
from .fixtures import create_product, create_user


class PercentageTest(SimpleTestCase):

    def test_rounds_half_up(self):
        self.assertEqual(percentage(1, 3), 33)
        self.assertEqual(percentage(2, 3), 67)
        self.assertEqual(percentage(1, 8), 13)
        self.assertEqual(percentage(1, 2), 50)

    def test_bounds(self):
        self.assertEqual(percentage(0, 5), 0)
        self.assertEqual(percentage(5, 5), 100)
        self.assertEqual(percentage(0, 0), 0)


class OrderProgressTest(TestCase):
    """Test progress as tasks move."""

    def setUp(self):
        """Set up test data."""
        self.picker = create_user('picker')
        self.services = get_services()
        for index in range(1, 4):
            create_product(f'SKU-00{index}', f'A-01-0{index}', stock=20)

        order = self.services.orders.create_order(
            customer_id='CUST-1',
            items=[{'sku': f'SKU-00{index}', 'quantity': 2} for index in range(1, 4)],
        )
        self.order = self.services.claims.claim_order(str(order.id), self.picker)
        self.tasks = list(self.order.pick_tasks.order_by('sequence'))

    def _progress(self):
        return order_progress(self.services.orders.get_order(self.order.id))

    def test_progress_never_drops_while_picking_forward(self):
        """Test starting, partial picks and completions never lower progress."""
        seen = [self._progress()]
        for task in self.tasks:
            self.services.picking.start_task(str(task.id), self.picker)
            seen.append(self._progress())
            self.services.picking.update_picked_quantity(str(task.id), 1, self.picker)
            seen.append(self._progress())
            self.services.picking.complete_task(str(task.id), self.picker)
            seen.append(self._progress())

        self.assertEqual(seen, sorted(seen))
        self.assertEqual(seen[0], 0)
        self.assertEqual(seen[-1], 100)
        self.assertIn(33, seen)
        self.assertIn(67, seen)

    def test_skipped_tasks_hold_progress_below_full(self):
        self.services.picking.complete_task(str(self.tasks[0].id), self.picker)
        self.services.picking.complete_task(str(self.tasks[1].id), self.picker)
        self.services.picking.skip_task(str(self.tasks[2].id), self.picker, 'Bin empty')

        self.assertEqual(self._progress(), 67)
        summary = self.services.orders.get_picking_progress(str(self.order.id))
        self.assertEqual(summary, {
            'total': 3, 'completed': 2, 'skipped': 1,
            'in_progress': 0, 'pending': 0, 'percentage': 67,
        })

    def test_packing_counts_fully_picked_lines(self):
        self.services.picking.complete_task(str(self.tasks[0].id), self.picker)
        self.services.picking.update_picked_quantity(str(self.tasks[1].id), 1, self.picker)
        self.services.picking.skip_task(str(self.tasks[1].id), self.picker, 'Short')
        self.services.picking.skip_task(str(self.tasks[2].id), self.picker, 'Short')
        self.services.orders.update_status(self.order.id, OrderStatus.PICKED, self.picker)
        self.assertEqual(self._progress(), 100)

        self.services.orders.update_status(self.order.id, OrderStatus.PACKING, self.picker)
        self.assertEqual(self._progress(), 33)

    def test_unclaimed_and_cancelled_orders_have_no_progress(self):
        self.services.picking.complete_task(str(self.tasks[0].id), self.picker)
        self.services.claims.unclaim_order(str(self.order.id), self.picker)
        self.assertEqual(self._progress(), 0)

        self.services.orders.cancel_order(str(self.order.id), self.picker)
        self.assertEqual(self._progress(), 0)
