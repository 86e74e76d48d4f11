"""
Order Fulfillment Serializers
"""

from .order_serializers import (
    OrderItemSerializer, OrderLineSerializer, OrderCreateSerializer,
    OrderListSerializer, OrderDetailSerializer, OrderTransitionSerializer,
    ReasonSerializer
)
from .packing_serializers import (
    PackingVerifySerializer, PackingSkipSerializer, PackingUndoSerializer
)
from .picking_serializers import (
    PickTaskSerializer, PickQuantitySerializer, PickScanSerializer,
    SkipTaskSerializer, UndoPickSerializer
)

__all__ = [
    'OrderItemSerializer', 'OrderLineSerializer', 'OrderCreateSerializer',
    'OrderListSerializer', 'OrderDetailSerializer', 'OrderTransitionSerializer',
    'ReasonSerializer',
    'PickTaskSerializer', 'PickQuantitySerializer', 'PickScanSerializer',
    'SkipTaskSerializer', 'UndoPickSerializer',
    'PackingVerifySerializer', 'PackingSkipSerializer', 'PackingUndoSerializer',
]
