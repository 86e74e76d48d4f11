"""
Claim Service for Order Fulfillment.

Pickers claim PENDING orders to work them. At most one picker can hold an
order, and a picker can hold a limited number of PICKING orders at once.
Both rules are checked on rows read under lock.
"""

import logging
from typing import List
from django.utils import timezone

from ..conf import get_setting
from ..exceptions import ActiveOrderLimitException, ConflictException, OrderAlreadyClaimedException
from ..models import Order, OrderItemStatus, OrderStatus, AuditLog
from .locking import atomic_operation, lock_order, lock_picker
from .workflow import OrderWorkflow, validate_order_workflow

logger = logging.getLogger(__name__)


class ClaimService:
    """
    Service class for claiming and releasing orders.

    Args:
        picking: PickingService that builds the task set on claim
    """

    def __init__(self, picking):
        self.picking = picking

    def claim_order(self, order_id: str, picker) -> Order:
        """
        Claim a PENDING order for picking.

        The order row is locked first, then the picker's user row, so two
        pickers racing for one order queue on the order and one picker
        racing for several orders queues on itself.

        Args:
            order_id: Order UUID
            picker: Picker claiming the order

        Returns:
            Order in PICKING with a fresh task set

        Raises:
            NotFoundException: If the order does not exist
            ConflictException: If the order is not PENDING
            OrderAlreadyClaimedException: If another picker holds the order
            ActiveOrderLimitException: If the picker is at the active order limit
        """
        with atomic_operation('claim_order'):
            order = lock_order(order_id)

            if order.status == OrderStatus.PICKING or (
                order.status == OrderStatus.PENDING and order.picker_id is not None
            ):
                logger.warning(f"Claim of {order.order_number} by {picker} refused: held by {order.picker}")
                raise OrderAlreadyClaimedException(order.order_number, order.picker)
            if order.status != OrderStatus.PENDING:
                logger.warning(f"Claim of {order.order_number} by {picker} refused: status {order.status}")
                raise ConflictException(
                    f"Order {order.order_number} is not in a claimable state (status {order.status})",
                    "ORDER_NOT_CLAIMABLE",
                    {'order_number': order.order_number, 'status': order.status,
                     'picker': str(order.picker) if order.picker_id else None}
                )

            lock_picker(picker)
            limit = get_setting('MAX_ACTIVE_ORDERS_PER_PICKER')
            active = Order.objects.active_for_picker(picker).count()
            if active >= limit:
                logger.warning(f"Claim of {order.order_number} by {picker} refused: {active} active orders")
                raise ActiveOrderLimitException(limit, active)

            validate_order_workflow(order, OrderStatus.PICKING)
            order.status = OrderStatus.PICKING
            order.picker = picker
            order.claimed_at = timezone.now()
            order.updated_by = picker
            order.save()

            task_count = self.picking.generate_task_set(order, picker)

            AuditLog.log_change(
                entity=order,
                action='claimed',
                user=picker,
                old_values={'status': OrderStatus.PENDING, 'picker': None},
                new_values={'status': order.status, 'picker': picker.pk},
                notes=f"{task_count} pick tasks generated"
            )

        logger.info(f"Order {order.order_number} claimed by {picker}")
        return order

    def unclaim_order(self, order_id: str, picker, reason: str = '') -> Order:
        """
        Hand a PICKING order back to the queue.

        Picked counts are reset and the task set is discarded; the next claim
        builds a new one.

        Raises:
            ConflictException: If the order is not PICKING or held by someone else
        """
        with atomic_operation('unclaim_order'):
            order = lock_order(order_id)
            self._check_holder(order, OrderStatus.PICKING, order.picker_id, picker, 'picker')

            order.items.update(picked_quantity=0, status=OrderItemStatus.PENDING, updated_at=timezone.now())
            order.pick_tasks.all().delete()

            order.status = OrderWorkflow.RELEASE_TRANSITIONS[OrderStatus.PICKING]
            order.picker = None
            order.claimed_at = None
            order.updated_by = picker
            order.save()

            AuditLog.log_change(
                entity=order,
                action='unclaimed',
                user=picker,
                old_values={'status': OrderStatus.PICKING, 'picker': picker.pk},
                new_values={'status': order.status, 'picker': None},
                notes=reason
            )

        logger.info(f"Order {order.order_number} released by picker {picker}")
        return order

    def unclaim_packing(self, order_id: str, packer, reason: str = '') -> Order:
        """
        Hand a PACKING order back so another packer can take it.

        Packing checks made so far are cleared; the next packer starts over.

        Raises:
            ConflictException: If the order is not PACKING or held by someone else
        """
        with atomic_operation('unclaim_packing'):
            order = lock_order(order_id)
            self._check_holder(order, OrderStatus.PACKING, order.packer_id, packer, 'packer')

            order.items.update(verified_quantity=0, verification_skip_reason=None, updated_at=timezone.now())

            order.status = OrderWorkflow.RELEASE_TRANSITIONS[OrderStatus.PACKING]
            order.packer = None
            order.updated_by = packer
            order.save()

            AuditLog.log_change(
                entity=order,
                action='packing_released',
                user=packer,
                old_values={'status': OrderStatus.PACKING, 'packer': packer.pk},
                new_values={'status': order.status, 'packer': None},
                notes=reason
            )

        logger.info(f"Order {order.order_number} released by packer {packer}")
        return order

    @staticmethod
    def _check_holder(order: Order, status: str, holder_id, worker, role: str) -> None:
        if order.status != status:
            raise ConflictException(
                f"Order {order.order_number} is {order.status}, not {status}",
                "INVALID_ORDER_STATUS",
                {'order_number': order.order_number, 'status': order.status}
            )
        if holder_id != worker.pk:
            holder = getattr(order, role)
            raise ConflictException(
                f"Order {order.order_number} is assigned to {role} {holder}",
                f"NOT_ASSIGNED_{role.upper()}",
                {'order_number': order.order_number, role: str(holder) if holder else None}
            )

    @staticmethod
    def get_picker_active_orders(picker) -> List[Order]:
        """PICKING orders held by a picker, most urgent first."""
        return list(
            Order.objects.active_for_picker(picker)
            .in_queue_order()
            .prefetch_related('items', 'pick_tasks')
        )
