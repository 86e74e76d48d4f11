"""
Tests for pick task operations.
"""

from django.test import TestCase

from ..models import AuditLog, OrderItemStatus, PickTaskStatus
from ..services import get_services
from ..exceptions import ConflictException, NotFoundException, ValidationException
from .fixtures import create_product, create_user


class PickingServiceTest(TestCase):
    """Test PickingService functionality."""

    def setUp(self):
        """Set up test data."""
        self.picker = create_user('picker')
        self.other = create_user('other')
        self.services = get_services()
        self.picking = self.services.picking

        create_product('SKU-001', 'A-01-01', stock=50, barcode='9400000000011')
        create_product('SKU-002', 'B-02-01', stock=50)
        create_product('SKU-003', 'C-03-01', stock=50)

        order = self.services.orders.create_order(
            customer_id='CUST-1',
            items=[
                {'sku': 'SKU-001', 'quantity': 4},
                {'sku': 'SKU-002', 'quantity': 2},
                {'sku': 'SKU-003', 'quantity': 1},
            ],
        )
        self.order = self.services.claims.claim_order(str(order.id), self.picker)
        self.tasks = list(self.order.pick_tasks.order_by('sequence'))

    def _reload(self, task):
        task.refresh_from_db()
        task.order_item.refresh_from_db()
        return task

    def test_tasks_follow_order_lines(self):
        self.assertEqual([task.sequence for task in self.tasks], [1, 2, 3])
        self.assertEqual([task.target_bin for task in self.tasks], ['A-01-01', 'B-02-01', 'C-03-01'])
        self.assertEqual([task.quantity for task in self.tasks], [4, 2, 1])

    def test_start_task(self):
        task = self.picking.start_task(str(self.tasks[0].id), self.picker)
        self.assertEqual(task.status, PickTaskStatus.IN_PROGRESS)
        self.assertIsNotNone(task.started_at)

        with self.assertRaises(ConflictException) as ctx:
            self.picking.start_task(str(self.tasks[0].id), self.picker)
        self.assertIn('not available for starting', str(ctx.exception))

    def test_other_picker_cannot_touch_tasks(self):
        with self.assertRaises(ConflictException) as ctx:
            self.picking.start_task(str(self.tasks[0].id), self.other)
        self.assertEqual(ctx.exception.code, 'NOT_ASSIGNED_PICKER')

    def test_unknown_task(self):
        with self.assertRaises(NotFoundException):
            self.picking.start_task('00000000-0000-0000-0000-000000000000', self.picker)

    def test_update_picked_quantity(self):
        """Test absolute quantity updates move task and line together."""
        task = self.picking.update_picked_quantity(str(self.tasks[0].id), 3, self.picker)
        task = self._reload(task)
        self.assertEqual(task.status, PickTaskStatus.IN_PROGRESS)
        self.assertEqual(task.picked_quantity, 3)
        self.assertEqual(task.order_item.picked_quantity, 3)
        self.assertEqual(task.order_item.status, OrderItemStatus.PARTIAL_PICKED)

        task = self.picking.update_picked_quantity(str(self.tasks[0].id), 1, self.picker)
        self.assertEqual(self._reload(task).order_item.picked_quantity, 1)

        task = self.picking.update_picked_quantity(str(self.tasks[0].id), 4, self.picker)
        task = self._reload(task)
        self.assertEqual(task.status, PickTaskStatus.COMPLETED)
        self.assertEqual(task.order_item.status, OrderItemStatus.FULLY_PICKED)

    def test_update_picked_quantity_out_of_range(self):
        for quantity in (-1, 5):
            with self.assertRaises(ValidationException):
                self.picking.update_picked_quantity(str(self.tasks[0].id), quantity, self.picker)
        self.assertEqual(self._reload(self.tasks[0]).picked_quantity, 0)

    def test_record_pick_by_sku_and_barcode(self):
        task = self.picking.record_pick(str(self.tasks[0].id), self.picker, 'SKU-001', 'A-01-01')
        self.assertEqual(task.picked_quantity, 1)
        self.assertEqual(task.status, PickTaskStatus.IN_PROGRESS)

        task = self.picking.record_pick(str(self.tasks[0].id), self.picker, '9400000000011', 'A-01-01', quantity=3)
        self.assertEqual(task.picked_quantity, 4)
        self.assertEqual(task.status, PickTaskStatus.COMPLETED)

    def test_record_pick_rejects_wrong_item_and_bin(self):
        with self.assertRaises(ValidationException):
            self.picking.record_pick(str(self.tasks[0].id), self.picker, 'SKU-002', 'A-01-01')
        with self.assertRaises(ValidationException):
            self.picking.record_pick(str(self.tasks[0].id), self.picker, 'UNKNOWN', 'A-01-01')
        with self.assertRaises(ValidationException):
            self.picking.record_pick(str(self.tasks[0].id), self.picker, 'SKU-001', 'B-02-01')
        self.assertEqual(self._reload(self.tasks[0]).picked_quantity, 0)

    def test_record_pick_rejects_over_pick(self):
        self.picking.record_pick(str(self.tasks[1].id), self.picker, 'SKU-002', 'B-02-01', quantity=1)
        with self.assertRaises(ValidationException):
            self.picking.record_pick(str(self.tasks[1].id), self.picker, 'SKU-002', 'B-02-01', quantity=2)
        self.assertEqual(self._reload(self.tasks[1]).picked_quantity, 1)

    def test_complete_task(self):
        task = self.picking.complete_task(str(self.tasks[1].id), self.picker)
        task = self._reload(task)
        self.assertEqual(task.status, PickTaskStatus.COMPLETED)
        self.assertEqual(task.picked_quantity, 2)
        self.assertEqual(task.order_item.picked_quantity, 2)
        self.assertIsNotNone(task.completed_at)

    def test_complete_twice(self):
        self.picking.complete_task(str(self.tasks[1].id), self.picker)
        with self.assertRaises(ConflictException) as ctx:
            self.picking.complete_task(str(self.tasks[1].id), self.picker)
        self.assertEqual(ctx.exception.code, 'TASK_ALREADY_COMPLETED')

    def test_skip_requires_reason(self):
        with self.assertRaises(ValidationException):
            self.picking.skip_task(str(self.tasks[2].id), self.picker, '  ')

    def test_skip_and_revert(self):
        """Test reverting a skip resets the task and its line."""
        self.picking.update_picked_quantity(str(self.tasks[0].id), 2, self.picker)
        task = self.picking.skip_task(str(self.tasks[0].id), self.picker, 'Bin empty')
        self.assertEqual(task.status, PickTaskStatus.SKIPPED)
        self.assertEqual(task.skip_reason, 'Bin empty')

        with self.assertRaises(ConflictException):
            self.picking.record_pick(str(self.tasks[0].id), self.picker, 'SKU-001', 'A-01-01')

        task = self._reload(self.picking.revert_skip(str(self.tasks[0].id), self.picker))
        self.assertEqual(task.status, PickTaskStatus.PENDING)
        self.assertEqual(task.picked_quantity, 0)
        self.assertIsNone(task.skip_reason)
        self.assertEqual(task.order_item.picked_quantity, 0)
        self.assertEqual(task.order_item.status, OrderItemStatus.PENDING)

    def test_skip_again_records_new_reason(self):
        first = self.picking.skip_task(str(self.tasks[1].id), self.picker, 'Bin empty')

        task = self.picking.skip_task(str(self.tasks[1].id), self.picker, 'Stock damaged')

        self.assertEqual(task.status, PickTaskStatus.SKIPPED)
        self.assertEqual(task.skip_reason, 'Stock damaged')
        self.assertGreaterEqual(task.skipped_at, first.skipped_at)
        self.assertEqual(AuditLog.objects.filter(entity_id=task.id, action='skipped').count(), 2)

    def test_revert_requires_skipped_task(self):
        with self.assertRaises(ConflictException) as ctx:
            self.picking.revert_skip(str(self.tasks[0].id), self.picker)
        self.assertEqual(ctx.exception.code, 'TASK_NOT_SKIPPED')

    def test_skip_completed_task_refused(self):
        self.picking.complete_task(str(self.tasks[2].id), self.picker)
        with self.assertRaises(ConflictException):
            self.picking.skip_task(str(self.tasks[2].id), self.picker, 'Too late')

    def test_complete_skipped_task(self):
        self.picking.skip_task(str(self.tasks[2].id), self.picker, 'Later')
        task = self.picking.complete_task(str(self.tasks[2].id), self.picker)
        self.assertEqual(task.status, PickTaskStatus.COMPLETED)
        self.assertIsNone(task.skip_reason)

    def test_undo_pick(self):
        """Test undo returns a completed task and its line to nothing picked."""
        self.picking.complete_task(str(self.tasks[0].id), self.picker)

        task = self._reload(self.picking.undo_pick(str(self.tasks[0].id), self.picker, 'Damaged'))
        self.assertEqual(task.status, PickTaskStatus.PENDING)
        self.assertEqual(task.picked_quantity, 0)
        self.assertIsNone(task.completed_at)
        self.assertEqual(task.order_item.picked_quantity, 0)
        self.assertTrue(AuditLog.objects.filter(entity_id=task.id, action='pick_undone', notes='Damaged').exists())

        with self.assertRaises(ConflictException) as ctx:
            self.picking.undo_pick(str(self.tasks[0].id), self.picker)
        self.assertEqual(ctx.exception.code, 'TASK_NOT_UNDOABLE')

    def test_task_changes_need_picking_order(self):
        self.services.claims.unclaim_order(str(self.order.id), self.picker)
        with self.assertRaises(NotFoundException):
            self.picking.complete_task(str(self.tasks[0].id), self.picker)

    def test_next_task(self):
        """Test the next task is the first PENDING one in walk order."""
        self.assertEqual(self.picking.get_next_task(str(self.order.id)).id, self.tasks[0].id)

        self.picking.start_task(str(self.tasks[0].id), self.picker)
        self.assertEqual(self.picking.get_next_task(str(self.order.id)).id, self.tasks[1].id)

        self.picking.skip_task(str(self.tasks[1].id), self.picker, 'Blocked aisle')
        self.picking.complete_task(str(self.tasks[2].id), self.picker)
        self.assertIsNone(self.picking.get_next_task(str(self.order.id)))
