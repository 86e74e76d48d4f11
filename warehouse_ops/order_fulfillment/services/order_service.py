"""
Order Service for Order Fulfillment.

Handles the order aggregate: creation with inventory reservation, the status
state machine, cancellation and the read side (detail and queue).
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, List, Optional
from django.utils import timezone

from ..conf import get_setting
from ..exceptions import ConflictException, NotFoundException, ValidationException
from ..filters import OrderQueueFilter
from ..models import Order, OrderItem, OrderStatus, OrderPriority, PickTaskStatus, AuditLog
from .locking import atomic_operation, lock_order, parse_id
from .progress import picking_summary
from .workflow import OrderWorkflow, validate_order_workflow

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def _stock_key(resolved_line):
    sku_info = resolved_line[2]
    return sku_info['sku'], sku_info['bin_location']


class OrderService:
    """
    Service class for order operations.

    Args:
        catalog: SkuCatalogInterface used to price and locate SKUs
        inventory: InventoryAdapterInterface owning stock counters
    """

    def __init__(self, catalog, inventory):
        self.catalog = catalog
        self.inventory = inventory

    def create_order(self, customer_id: str, items: List[Dict[str, Any]], created_by=None,
                     customer_name: str = '', priority: str = OrderPriority.NORMAL, notes: str = '') -> Order:
        """
        Create a PENDING order and reserve stock for every line.

        Args:
            customer_id: Customer reference
            items: [{"sku": str, "quantity": int}, ...]
            created_by: User creating the order
            customer_name: Customer display name
            priority: OrderPriority value
            notes: Free text

        Returns:
            Created Order instance

        Raises:
            ValidationException: If there are no lines or a quantity is not positive
            NotFoundException: If a SKU is unknown (SkuInactiveException if inactive)
            InventoryUnavailableException: If a bin cannot cover a line
            ConflictException: If lines are priced in different currencies
        """
        self._validate_lines(items)
        if priority not in OrderPriority.values:
            raise ValidationException(f"Unknown priority {priority}", {'priority': priority})

        with atomic_operation('create_order'):
            order = Order.objects.create(
                customer_id=customer_id,
                customer_name=customer_name,
                priority=priority,
                notes=notes,
                currency=get_setting('DEFAULT_CURRENCY'),
                created_by=created_by,
                updated_by=created_by,
            )

            currency = None
            resolved = []
            for line_number, line in enumerate(items, start=1):
                sku_info = self.catalog.lookup(line['sku'])
                line_currency = sku_info['currency'] or get_setting('DEFAULT_CURRENCY')
                if currency is None:
                    currency = line_currency
                elif line_currency != currency:
                    raise ConflictException(
                        f"SKU {sku_info['sku']} is priced in {line_currency} but the order is in {currency}",
                        "CURRENCY_MISMATCH",
                        {'sku': sku_info['sku'], 'currency': line_currency, 'order_currency': currency}
                    )
                resolved.append((line_number, line['quantity'], sku_info, line_currency))

            # Inventory rows are locked in (sku, bin) order whatever the line order
            for line_number, quantity, sku_info, line_currency in sorted(resolved, key=_stock_key):
                self.inventory.reserve(
                    sku_info['sku'], sku_info['bin_location'], quantity,
                    reference=order.order_number, user=created_by
                )

            for line_number, quantity, sku_info, line_currency in resolved:
                OrderItem.objects.create(
                    order=order,
                    line_number=line_number,
                    sku=sku_info['sku'],
                    name=sku_info['name'],
                    bin_location=sku_info['bin_location'],
                    quantity=quantity,
                    unit_price=sku_info['unit_price'],
                    currency=line_currency,
                )

            order.currency = currency
            totals = self.calculate_totals(order)
            order.subtotal = totals['subtotal']
            order.tax_amount = totals['tax_amount']
            order.shipping_amount = totals['shipping_amount']
            order.discount_amount = totals['discount_amount']
            order.total_amount = totals['total_amount']
            order.save()

            AuditLog.log_change(
                entity=order,
                action='created',
                user=created_by,
                new_values={'status': order.status, 'total_amount': order.total_amount},
                notes=f"Order created with {len(items)} items"
            )

        logger.info(f"Order {order.order_number} created for customer {customer_id} by {created_by}")
        return order

    @staticmethod
    def _validate_lines(items):
        if not items:
            raise ValidationException("Order must contain at least one item")

        errors = {}
        for index, line in enumerate(items):
            quantity = line.get('quantity')
            if not line.get('sku'):
                errors[f"items[{index}].sku"] = "SKU is required"
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                errors[f"items[{index}].quantity"] = "Quantity must be a positive integer"
        if errors:
            raise ValidationException("Invalid order lines", errors)

    @staticmethod
    def calculate_totals(order: Order) -> Dict[str, Decimal]:
        """
        Recalculate order totals from its items.

        Args:
            order: Order instance

        Returns:
            Dictionary with subtotal, tax, shipping, discount and total
        """
        subtotal = sum((item.line_total for item in order.items.all()), Decimal('0.00'))
        subtotal = subtotal.quantize(CENT, rounding=ROUND_HALF_UP)

        tax_amount = (subtotal * Decimal(str(get_setting('TAX_RATE')))).quantize(CENT, rounding=ROUND_HALF_UP)
        discount_amount = (subtotal * Decimal(str(get_setting('DISCOUNT_RATE')))).quantize(CENT, rounding=ROUND_HALF_UP)
        shipping_amount = Decimal(str(get_setting('SHIPPING_FLAT_RATE'))) if subtotal > 0 else Decimal('0.00')
        shipping_amount = shipping_amount.quantize(CENT, rounding=ROUND_HALF_UP)

        return {
            'subtotal': subtotal,
            'tax_amount': tax_amount,
            'shipping_amount': shipping_amount,
            'discount_amount': discount_amount,
            'total_amount': subtotal + tax_amount + shipping_amount - discount_amount,
        }

    def update_status(self, order_id: str, new_status: str, actor) -> Order:
        """
        Move an order to ``new_status``.

        PICKING is only reachable through a claim. CANCELLED has the same
        effects as ``cancel_order`` but, being a transition, fails on an
        order that is already cancelled.

        Raises:
            NotFoundException: If the order does not exist
            InvalidTransitionException: If the pair is not in the workflow table
            ConflictException: If a status specific guard fails
        """
        if new_status not in OrderStatus.values:
            raise ValidationException(f"Unknown order status {new_status}", {'status': new_status})

        with atomic_operation('update_status'):
            order = lock_order(order_id)
            validate_order_workflow(order, new_status)

            if new_status == OrderStatus.PICKING:
                raise ConflictException(
                    f"Order {order.order_number} enters PICKING only by being claimed",
                    "CLAIM_REQUIRED",
                    {'order_number': order.order_number}
                )

            if new_status == OrderStatus.CANCELLED:
                return self._apply_cancellation(order, actor, reason='')

            old_status = order.status

            if new_status == OrderStatus.PICKED:
                self._check_picking_finished(order, actor)
            elif new_status == OrderStatus.PACKING:
                order.packer = actor
            elif new_status == OrderStatus.PACKED:
                if order.packer_id != actor.pk:
                    raise ConflictException(
                        f"Order {order.order_number} is being packed by {order.packer}",
                        "NOT_ASSIGNED_PACKER",
                        {'order_number': order.order_number, 'packer': str(order.packer)}
                    )
            elif new_status == OrderStatus.SHIPPED:
                self._consume_reservations(order, actor)

            order.status = new_status
            self._stamp(order, new_status)
            order.updated_by = actor
            order.save()

            AuditLog.log_status_change(
                entity=order,
                old_status=old_status,
                new_status=new_status,
                user=actor,
            )

        logger.info(f"Order {order.order_number} moved from {old_status} to {new_status} by {actor}")
        return order

    @staticmethod
    def _check_picking_finished(order: Order, actor) -> None:
        if order.picker_id != actor.pk:
            raise ConflictException(
                f"Order {order.order_number} is assigned to picker {order.picker}",
                "NOT_ASSIGNED_PICKER",
                {'order_number': order.order_number, 'picker': str(order.picker)}
            )

        open_tasks = order.pick_tasks.filter(
            status__in=[PickTaskStatus.PENDING, PickTaskStatus.IN_PROGRESS]
        ).count()
        if open_tasks:
            raise ConflictException(
                f"Order {order.order_number} still has {open_tasks} open pick tasks",
                "PICKING_INCOMPLETE",
                {'order_number': order.order_number, 'open_tasks': open_tasks}
            )

    def _consume_reservations(self, order: Order, actor) -> None:
        """Deduct what was picked and release what was not."""
        for item in order.items.order_by('sku', 'bin_location'):
            if item.picked_quantity:
                self.inventory.deduct(
                    item.sku, item.bin_location, item.picked_quantity,
                    reference=order.order_number, user=actor
                )
            shortfall = item.quantity - item.picked_quantity
            if shortfall:
                self.inventory.release(
                    item.sku, item.bin_location, shortfall,
                    reference=order.order_number, user=actor, reason="Not picked before shipping"
                )

    @staticmethod
    def _stamp(order: Order, status: str) -> None:
        field = OrderWorkflow.TIMESTAMP_FIELDS.get(status)
        if field and getattr(order, field) is None:
            setattr(order, field, timezone.now())

    def cancel_order(self, order_id: str, actor, reason: str = '') -> Order:
        """
        Cancel an order and release its reservations.

        Cancelling an order that is already cancelled returns it unchanged.

        Raises:
            NotFoundException: If the order does not exist
            ConflictException: If the order has shipped
        """
        with atomic_operation('cancel_order'):
            order = lock_order(order_id)

            if order.status == OrderStatus.CANCELLED:
                logger.info(f"Order {order.order_number} is already cancelled")
                return order

            if not order.can_be_cancelled:
                raise ConflictException(
                    f"Order {order.order_number} cannot be cancelled from status {order.status}",
                    "ORDER_NOT_CANCELLABLE",
                    {'order_number': order.order_number, 'status': order.status}
                )

            return self._apply_cancellation(order, actor, reason)

    def _apply_cancellation(self, order: Order, actor, reason: str) -> Order:
        old_status = order.status

        for item in order.items.order_by('sku', 'bin_location'):
            self.inventory.release(
                item.sku, item.bin_location, item.quantity,
                reference=order.order_number, user=actor, reason=reason or "Order cancelled"
            )

        order.status = OrderStatus.CANCELLED
        self._stamp(order, OrderStatus.CANCELLED)
        order.cancel_reason = reason
        order.updated_by = actor
        order.save()

        AuditLog.log_status_change(
            entity=order,
            old_status=old_status,
            new_status=OrderStatus.CANCELLED,
            user=actor,
            notes=reason
        )

        logger.info(f"Order {order.order_number} cancelled from {old_status} by {actor}")
        return order

    @staticmethod
    def get_order(order_id: str) -> Order:
        """
        Order with its items and pick tasks loaded.

        Raises:
            NotFoundException: If the order does not exist
        """
        pk = parse_id('Order', order_id)
        try:
            return Order.objects.prefetch_related('items', 'pick_tasks').get(pk=pk)
        except Order.DoesNotExist:
            raise NotFoundException('Order', order_id)

    def get_picking_progress(self, order_id: str) -> Dict[str, int]:
        return picking_summary(self.get_order(order_id))

    @staticmethod
    def get_order_queue(filters: Optional[Dict[str, Any]] = None, page: int = 1, limit: Optional[int] = None) -> Dict[str, Any]:
        """
        Orders waiting for work, most urgent and oldest first.

        Args:
            filters: status, priority and picker query values
            page: 1-based page number
            limit: Page size, defaults to QUEUE_PAGE_SIZE

        Returns:
            {"orders": [Order, ...], "total": int, "page": int, "limit": int}

        Raises:
            ValidationException: If a filter or paging value is invalid
        """
        limit = get_setting('QUEUE_PAGE_SIZE') if limit is None else limit
        try:
            page, limit = int(page), int(limit)
        except (TypeError, ValueError):
            raise ValidationException("page and limit must be integers", {'page': page, 'limit': limit})
        if page < 1 or limit < 1:
            raise ValidationException("page and limit must be positive", {'page': page, 'limit': limit})
        limit = min(limit, get_setting('QUEUE_MAX_PAGE_SIZE'))

        filterset = OrderQueueFilter(filters or {}, queryset=Order.objects.all())
        if not filterset.is_valid():
            raise ValidationException("Invalid queue filters", filterset.errors.get_json_data())

        queryset = filterset.qs.in_queue_order()
        total = queryset.count()
        offset = (page - 1) * limit
        orders = list(queryset.prefetch_related('items', 'pick_tasks')[offset:offset + limit])

        return {'orders': orders, 'total': total, 'page': page, 'limit': limit}
