"""
Packing Service for Order Fulfillment.

The packer who took an order into PACKING checks each line against what was
picked before marking the order PACKED. Verified counts live on the order
line; a line the packer cannot verify can be set aside with a reason.
"""

import logging
from ..models import Order, OrderItem, OrderStatus, AuditLog
from ..exceptions import ConflictException, ValidationException
from .locking import atomic_operation, lock_order, lock_order_item

logger = logging.getLogger(__name__)


class PackingService:
    """Service class for packing verification."""

    @staticmethod
    def _check_packer(order: Order, packer) -> None:
        if order.status != OrderStatus.PACKING:
            raise ConflictException(
                f"Order {order.order_number} is not in PACKING status (current status: {order.status})",
                "ORDER_NOT_PACKING",
                {'order_number': order.order_number, 'status': order.status}
            )
        if order.packer_id != packer.pk:
            raise ConflictException(
                f"Order {order.order_number} is being packed by {order.packer}",
                "NOT_ASSIGNED_PACKER",
                {'order_number': order.order_number, 'packer': str(order.packer)}
            )

    @staticmethod
    def _check_quantity(quantity) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationException("Quantity must be a positive integer", {'quantity': quantity})

    @staticmethod
    def _audit(item: OrderItem, action: str, packer, old_values, notes: str = '') -> None:
        AuditLog.log_change(
            entity=item,
            action=action,
            user=packer,
            old_values=old_values,
            new_values={
                'verified_quantity': item.verified_quantity,
                'verification_skip_reason': item.verification_skip_reason,
            },
            notes=notes,
        )

    def verify_item(self, order_id: str, item_id: str, packer, quantity: int = 1) -> OrderItem:
        """
        Count ``quantity`` more units of a line as checked by the packer.

        Args:
            order_id: Order UUID
            item_id: OrderItem UUID
            packer: Packer holding the order
            quantity: Units checked with this scan

        Returns:
            Updated OrderItem

        Raises:
            NotFoundException: If the order or line does not exist
            ValidationException: If quantity is not a positive integer
            ConflictException: If the order is not PACKING for this packer,
                or the line would be verified past its ordered quantity
        """
        self._check_quantity(quantity)

        with atomic_operation('verify_item'):
            order = lock_order(order_id)
            self._check_packer(order, packer)
            item = lock_order_item(order, item_id)

            if item.verified_quantity + quantity > item.quantity:
                raise ConflictException(
                    f"Cannot verify more items than ordered (max: {item.quantity}, "
                    f"already verified: {item.verified_quantity}, trying to add: {quantity})",
                    "OVER_VERIFICATION",
                    {'quantity': item.quantity, 'verified': item.verified_quantity, 'requested': quantity}
                )

            old_values = {'verified_quantity': item.verified_quantity}
            item.verified_quantity += quantity
            item.save(update_fields=['verified_quantity', 'updated_at'])
            self._audit(item, 'verified', packer, old_values)

        logger.info(f"Verified {quantity} x {item.sku} on order {order.order_number} ({item.verified_quantity}/{item.quantity})")
        return item

    def skip_item(self, order_id: str, item_id: str, packer, reason: str) -> OrderItem:
        """
        Set a line aside during packing, e.g. the goods are damaged.

        Raises:
            ValidationException: If no reason is given
            ConflictException: If the order is not PACKING for this packer
        """
        if not reason or not reason.strip():
            raise ValidationException("A reason is required to skip a packing item", {'reason': reason})

        with atomic_operation('skip_packing_item'):
            order = lock_order(order_id)
            self._check_packer(order, packer)
            item = lock_order_item(order, item_id)

            old_values = {'verification_skip_reason': item.verification_skip_reason}
            item.verification_skip_reason = reason
            item.save(update_fields=['verification_skip_reason', 'updated_at'])
            self._audit(item, 'packing_skipped', packer, old_values, notes=reason)

        logger.info(f"Packing of {item.sku} on order {order.order_number} skipped by {packer}: {reason}")
        return item

    def undo_verification(self, order_id: str, item_id: str, packer, quantity: int = 1,
                          reason: str = '') -> OrderItem:
        """
        Take back ``quantity`` verified units of a line.

        A line that was set aside is brought back into packing.

        Raises:
            ValidationException: If quantity is not a positive integer
            ConflictException: If the order is not PACKING for this packer,
                or fewer than ``quantity`` units are verified
        """
        self._check_quantity(quantity)

        with atomic_operation('undo_verification'):
            order = lock_order(order_id)
            self._check_packer(order, packer)
            item = lock_order_item(order, item_id)

            if item.verified_quantity < quantity:
                raise ConflictException(
                    f"Cannot undo more items than verified (verified: {item.verified_quantity}, "
                    f"trying to undo: {quantity})",
                    "OVER_UNDO",
                    {'verified': item.verified_quantity, 'requested': quantity}
                )

            old_values = {
                'verified_quantity': item.verified_quantity,
                'verification_skip_reason': item.verification_skip_reason,
            }
            item.verified_quantity -= quantity
            item.verification_skip_reason = None
            item.save(update_fields=['verified_quantity', 'verification_skip_reason', 'updated_at'])
            self._audit(item, 'verification_undone', packer, old_values, notes=reason)

        logger.info(f"Undid {quantity} verified x {item.sku} on order {order.order_number}")
        return item
