"""
Picking Service for Order Fulfillment.

Handles pick task generation and every change a picker makes to a task.
Each operation locks the owning order and the task, checks the order is in
PICKING and held by the acting picker, and writes the task and its order
line in the same transaction so their picked quantities always agree.
"""

import logging
from typing import Dict, Optional
from django.utils import timezone

from ..models import Order, OrderStatus, PickTask, PickTaskStatus, AuditLog
from ..exceptions import ConflictException, ValidationException
from .locking import atomic_operation, lock_pick_task, parse_id
from .workflow import validate_pick_task_workflow

logger = logging.getLogger(__name__)


class PickingService:
    """
    Service class for picking operations.

    Args:
        catalog: SkuCatalogInterface used to resolve scanned codes
    """

    def __init__(self, catalog):
        self.catalog = catalog

    @staticmethod
    def generate_task_set(order: Order, picker) -> int:
        """
        Replace the order's pick tasks with one fresh PENDING task per item.

        Must run inside the transaction that holds the order lock.

        Returns:
            Number of tasks created
        """
        stale = order.pick_tasks.all().delete()[0]
        if stale:
            logger.info(f"Discarded {stale} stale pick tasks for order {order.order_number}")

        created = 0
        for item in order.items.order_by('line_number'):
            PickTask.objects.create(
                order=order,
                order_item=item,
                sequence=item.line_number,
                sku=item.sku,
                name=item.name,
                target_bin=item.bin_location,
                quantity=item.quantity,
                picker=picker,
            )
            created += 1

        logger.info(f"Generated {created} pick tasks for order {order.order_number}")
        return created

    @staticmethod
    def _check_picker(order: Order, task: PickTask, picker) -> None:
        if order.status != OrderStatus.PICKING:
            raise ConflictException(
                f"Order {order.order_number} is not being picked (status {order.status})",
                "ORDER_NOT_PICKING",
                {'order_number': order.order_number, 'status': order.status}
            )
        if order.picker_id != picker.pk:
            raise ConflictException(
                f"Pick task {task.task_number} belongs to order {order.order_number} "
                f"which is assigned to picker {order.picker}",
                "NOT_ASSIGNED_PICKER",
                {'task_number': task.task_number, 'picker': str(order.picker)}
            )

    @staticmethod
    def _set_picked(task: PickTask, quantity: int) -> None:
        """Write the picked count to the task and its order line."""
        task.picked_quantity = quantity
        item = task.order_item
        item.set_picked_quantity(quantity)
        item.save(update_fields=['picked_quantity', 'status', 'updated_at'])

    @staticmethod
    def _audit(task: PickTask, action: str, picker, old_values: Dict, notes: str = '') -> None:
        AuditLog.log_change(
            entity=task,
            action=action,
            user=picker,
            old_values=old_values,
            new_values={'status': task.status, 'picked_quantity': task.picked_quantity},
            notes=notes,
        )

    def start_task(self, task_id: str, picker) -> PickTask:
        """
        Begin work on a PENDING task.

        Raises:
            ConflictException: If the task is not PENDING or not the picker's
        """
        with atomic_operation('start_task'):
            order, task = lock_pick_task(task_id)
            self._check_picker(order, task, picker)

            if task.status != PickTaskStatus.PENDING:
                raise ConflictException(
                    f"Pick task {task.task_number} is not available for starting (status {task.status})",
                    "TASK_NOT_STARTABLE",
                    {'task_number': task.task_number, 'status': task.status}
                )

            old_values = {'status': task.status}
            task.status = PickTaskStatus.IN_PROGRESS
            task.picker = picker
            task.started_at = timezone.now()
            task.save()
            self._audit(task, 'started', picker, old_values)

        logger.info(f"Pick task {task.task_number} started by {picker}")
        return task

    def update_picked_quantity(self, task_id: str, quantity: int, picker) -> PickTask:
        """
        Set the picked count of a task to an absolute value.

        Reaching the required quantity completes the task.

        Raises:
            ValidationException: If quantity is outside 0..required
            ConflictException: If the task is COMPLETED or SKIPPED
        """
        with atomic_operation('update_picked_quantity'):
            order, task = lock_pick_task(task_id)
            self._check_picker(order, task, picker)

            if task.status in (PickTaskStatus.COMPLETED, PickTaskStatus.SKIPPED):
                raise ConflictException(
                    f"Pick task {task.task_number} is {task.status} and cannot be updated",
                    "TASK_CLOSED",
                    {'task_number': task.task_number, 'status': task.status}
                )
            if isinstance(quantity, bool) or not isinstance(quantity, int) or not 0 <= quantity <= task.quantity:
                raise ValidationException(
                    f"Picked quantity must be between 0 and {task.quantity}",
                    {'quantity': quantity, 'required': task.quantity}
                )

            old_values = {'status': task.status, 'picked_quantity': task.picked_quantity}
            self._set_picked(task, quantity)
            self._advance(task, picker)
            task.save()
            self._audit(task, 'quantity_updated', picker, old_values)

        logger.info(f"Pick task {task.task_number} set to {quantity}/{task.quantity} by {picker}")
        return task

    def record_pick(self, task_id: str, picker, scanned_code: str, bin_location: str, quantity: int = 1) -> PickTask:
        """
        Apply a scan at the bin.

        Args:
            task_id: PickTask UUID
            picker: Acting picker
            scanned_code: SKU or barcode read by the scanner
            bin_location: Bin code the picker scanned
            quantity: Units picked with this scan

        Raises:
            ValidationException: Wrong item, wrong bin or over-pick
            ConflictException: If the task is COMPLETED or SKIPPED
        """
        with atomic_operation('record_pick'):
            order, task = lock_pick_task(task_id)
            self._check_picker(order, task, picker)

            if task.status in (PickTaskStatus.COMPLETED, PickTaskStatus.SKIPPED):
                raise ConflictException(
                    f"Pick task {task.task_number} is {task.status}",
                    "TASK_CLOSED",
                    {'task_number': task.task_number, 'status': task.status}
                )

            scanned_sku = self.catalog.resolve_code(scanned_code)
            if scanned_sku != task.sku:
                raise ValidationException(
                    f"Scanned item {scanned_code} does not match {task.sku}",
                    {'scanned': scanned_code, 'expected_sku': task.sku}
                )
            if bin_location != task.target_bin:
                raise ValidationException(
                    f"Scanned bin {bin_location} does not match {task.target_bin}",
                    {'scanned_bin': bin_location, 'expected_bin': task.target_bin}
                )
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise ValidationException("Scan quantity must be a positive integer", {'quantity': quantity})

            new_quantity = task.picked_quantity + quantity
            if new_quantity > task.quantity:
                raise ValidationException(
                    f"Cannot pick {quantity} more of {task.sku}: "
                    f"{task.picked_quantity} of {task.quantity} already picked",
                    {'picked': task.picked_quantity, 'required': task.quantity, 'quantity': quantity}
                )

            old_values = {'status': task.status, 'picked_quantity': task.picked_quantity}
            self._set_picked(task, new_quantity)
            self._advance(task, picker)
            task.save()
            self._audit(task, 'picked', picker, old_values, notes=f"Scanned {scanned_code} at {bin_location}")

        logger.info(f"Picked {quantity} x {task.sku} for task {task.task_number} ({task.picked_quantity}/{task.quantity})")
        return task

    @staticmethod
    def _advance(task: PickTask, picker) -> None:
        """Status implied by a new picked count on an open task."""
        now = timezone.now()
        if task.picked_quantity >= task.quantity:
            validate_pick_task_workflow(task, PickTaskStatus.COMPLETED)
            task.status = PickTaskStatus.COMPLETED
            task.completed_at = now
        elif task.picked_quantity > 0 and task.status == PickTaskStatus.PENDING:
            task.status = PickTaskStatus.IN_PROGRESS
            task.started_at = task.started_at or now
        task.picker = picker

    def complete_task(self, task_id: str, picker) -> PickTask:
        """
        Mark a task picked in full.

        Raises:
            ConflictException: If the task is already COMPLETED
        """
        with atomic_operation('complete_task'):
            order, task = lock_pick_task(task_id)
            self._check_picker(order, task, picker)

            if task.status == PickTaskStatus.COMPLETED:
                raise ConflictException(
                    f"Pick task {task.task_number} is already completed",
                    "TASK_ALREADY_COMPLETED",
                    {'task_number': task.task_number}
                )
            validate_pick_task_workflow(task, PickTaskStatus.COMPLETED)

            old_values = {'status': task.status, 'picked_quantity': task.picked_quantity}
            self._set_picked(task, task.quantity)
            task.status = PickTaskStatus.COMPLETED
            task.picker = picker
            task.completed_at = timezone.now()
            task.skipped_at = None
            task.skip_reason = None
            task.save()
            self._audit(task, 'completed', picker, old_values)

        logger.info(f"Pick task {task.task_number} completed by {picker}")
        return task

    def skip_task(self, task_id: str, picker, reason: str) -> PickTask:
        """
        Set a task aside, e.g. the bin is empty.

        Skipping a task that is already skipped records the new reason.

        Raises:
            ValidationException: If no reason is given
            ConflictException: If the task is COMPLETED
        """
        if not reason or not reason.strip():
            raise ValidationException("A reason is required to skip a pick task", {'reason': reason})

        with atomic_operation('skip_task'):
            order, task = lock_pick_task(task_id)
            self._check_picker(order, task, picker)

            if task.status == PickTaskStatus.COMPLETED:
                raise ConflictException(
                    f"Pick task {task.task_number} is completed and cannot be skipped",
                    "TASK_ALREADY_COMPLETED",
                    {'task_number': task.task_number}
                )
            old_values = {'status': task.status, 'skip_reason': task.skip_reason}
            task.status = PickTaskStatus.SKIPPED
            task.skipped_at = timezone.now()
            task.skip_reason = reason
            task.save()
            self._audit(task, 'skipped', picker, old_values, notes=reason)

        logger.info(f"Pick task {task.task_number} skipped by {picker}: {reason}")
        return task

    def revert_skip(self, task_id: str, picker) -> PickTask:
        """
        Put a skipped task back in the queue with nothing picked.

        Task and order line are reset together.

        Raises:
            ConflictException: If the task is not SKIPPED
        """
        with atomic_operation('revert_skip'):
            order, task = lock_pick_task(task_id)
            self._check_picker(order, task, picker)

            if task.status != PickTaskStatus.SKIPPED:
                raise ConflictException(
                    f"Pick task {task.task_number} is not skipped (status {task.status})",
                    "TASK_NOT_SKIPPED",
                    {'task_number': task.task_number, 'status': task.status}
                )

            old_values = {'status': task.status, 'picked_quantity': task.picked_quantity,
                          'skip_reason': task.skip_reason}
            self._reset(task)
            self._audit(task, 'skip_reverted', picker, old_values)

        logger.info(f"Skip of pick task {task.task_number} reverted by {picker}")
        return task

    def undo_pick(self, task_id: str, picker, reason: str = '') -> PickTask:
        """
        Return an IN_PROGRESS or COMPLETED task to PENDING with nothing picked.

        The order line is reset with the task.

        Raises:
            ConflictException: If the task is PENDING or SKIPPED
        """
        with atomic_operation('undo_pick'):
            order, task = lock_pick_task(task_id)
            self._check_picker(order, task, picker)

            if task.status not in (PickTaskStatus.IN_PROGRESS, PickTaskStatus.COMPLETED):
                raise ConflictException(
                    f"Nothing to undo on pick task {task.task_number} (status {task.status})",
                    "TASK_NOT_UNDOABLE",
                    {'task_number': task.task_number, 'status': task.status}
                )
            validate_pick_task_workflow(task, PickTaskStatus.PENDING)

            old_values = {'status': task.status, 'picked_quantity': task.picked_quantity}
            self._reset(task)
            self._audit(task, 'pick_undone', picker, old_values, notes=reason)

        logger.info(f"Pick on task {task.task_number} undone by {picker}")
        return task

    def _reset(self, task: PickTask) -> None:
        self._set_picked(task, 0)
        task.status = PickTaskStatus.PENDING
        task.started_at = None
        task.completed_at = None
        task.skipped_at = None
        task.skip_reason = None
        task.save()

    @staticmethod
    def get_next_task(order_id: str) -> Optional[PickTask]:
        """First PENDING task of an order in walk order, or None."""
        return (
            PickTask.objects.filter(order_id=parse_id('Order', order_id), status=PickTaskStatus.PENDING)
            .order_by('sequence')
            .first()
        )
