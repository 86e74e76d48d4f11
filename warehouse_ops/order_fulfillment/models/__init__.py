"""
Order Fulfillment Models
"""

from .order import Order, OrderStatus, OrderPriority, PRIORITY_RANK
from .order_item import OrderItem, OrderItemStatus
from .picking import PickTask, PickTaskStatus
from .audit import AuditLog

__all__ = [
    # Order models
    'Order', 'OrderStatus', 'OrderPriority', 'PRIORITY_RANK',
    'OrderItem', 'OrderItemStatus',

    # Picking models
    'PickTask', 'PickTaskStatus',

    # Audit
    'AuditLog',
]
