"""
Derived progress for orders.

Nothing here is stored; every read recomputes from tasks and items.
"""

from typing import Dict

from ..models import Order, OrderStatus, PickTaskStatus

NO_PROGRESS_STATUSES = (OrderStatus.PENDING, OrderStatus.BACKORDER, OrderStatus.CANCELLED)
DONE_STATUSES = (OrderStatus.PICKED, OrderStatus.PACKED, OrderStatus.SHIPPED)


def percentage(part: int, whole: int) -> int:
    """Integer percentage rounded half up; 0 for an empty whole."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def order_progress(order: Order) -> int:
    """
    Progress of an order as an integer 0..100.

    PICKING counts completed tasks over all tasks, so skipped tasks hold the
    figure below 100. PACKING counts fully picked items over all items.
    """
    if order.status in NO_PROGRESS_STATUSES:
        return 0
    if order.status in DONE_STATUSES:
        return 100

    if order.status == OrderStatus.PICKING:
        statuses = [task.status for task in order.pick_tasks.all()]
        completed = sum(1 for status in statuses if status == PickTaskStatus.COMPLETED)
        return percentage(completed, len(statuses))

    # PACKING
    items = list(order.items.all())
    picked = sum(1 for item in items if item.picked_quantity >= item.quantity)
    return percentage(picked, len(items))


def picking_summary(order: Order) -> Dict[str, int]:
    """Task counts by status plus the picking percentage."""
    counts = {status: 0 for status in PickTaskStatus.values}
    for task in order.pick_tasks.all():
        counts[task.status] += 1

    total = sum(counts.values())
    return {
        'total': total,
        'completed': counts[PickTaskStatus.COMPLETED],
        'skipped': counts[PickTaskStatus.SKIPPED],
        'in_progress': counts[PickTaskStatus.IN_PROGRESS],
        'pending': counts[PickTaskStatus.PENDING],
        'percentage': percentage(counts[PickTaskStatus.COMPLETED], total),
    }
