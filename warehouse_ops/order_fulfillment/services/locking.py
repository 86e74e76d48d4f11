"""
Lock-then-validate primitives shared by the fulfillment services.

Rows are always locked in the same order: order, picker, pick task or
items, inventory units. Every check that decides a write is made on a row
read after its lock was taken.
"""

import logging
import uuid
from contextlib import contextmanager

from django.contrib.auth import get_user_model
from django.db import OperationalError, transaction

from ..exceptions import NotFoundException, TransientStoreException
from ..models import Order, OrderItem, PickTask

logger = logging.getLogger(__name__)


def parse_id(entity_type, value):
    try:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise NotFoundException(entity_type, value)


@contextmanager
def atomic_operation(name):
    """
    Run a block in one transaction.

    Lock timeouts, deadlocks and serialization failures surface as
    TransientStoreException so callers can retry.
    """
    try:
        with transaction.atomic():
            yield
    except OperationalError as exc:
        logger.warning(f"{name} aborted by the database: {exc}")
        raise TransientStoreException(details={'operation': name}) from exc


def lock_order(order_id) -> Order:
    """Lock an order row and return it re-read under the lock."""
    pk = parse_id('Order', order_id)
    try:
        return Order.objects.select_for_update().get(pk=pk)
    except Order.DoesNotExist:
        raise NotFoundException('Order', order_id)


def lock_picker(picker):
    """Lock the user row of a picker so claims by the same picker queue up."""
    return get_user_model().objects.select_for_update().get(pk=picker.pk)


def lock_pick_task(task_id):
    """
    Lock a pick task and the order that owns it.

    Returns:
        (order, task) tuple, both re-read under their locks
    """
    pk = parse_id('PickTask', task_id)
    order_id = PickTask.objects.filter(pk=pk).values_list('order_id', flat=True).first()
    if order_id is None:
        raise NotFoundException('PickTask', task_id)

    order = lock_order(order_id)
    try:
        task = PickTask.objects.select_for_update().get(pk=pk, order_id=order.pk)
    except PickTask.DoesNotExist:
        # Deleted by an unclaim that committed while we waited on the order.
        raise NotFoundException('PickTask', task_id)
    return order, task


def lock_order_item(order: Order, item_id) -> OrderItem:
    """Lock one line of an already locked order."""
    pk = parse_id('OrderItem', item_id)
    try:
        return OrderItem.objects.select_for_update().get(pk=pk, order_id=order.pk)
    except OrderItem.DoesNotExist:
        raise NotFoundException('OrderItem', item_id)
