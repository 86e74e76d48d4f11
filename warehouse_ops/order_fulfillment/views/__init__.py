"""
Order Fulfillment Views
"""

from .order_views import OrderViewSet
from .picking_views import PickTaskViewSet

__all__ = [
    'OrderViewSet',
    'PickTaskViewSet',
]
