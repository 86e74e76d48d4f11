"""
Order Fulfillment Services
"""

from .workflow import (
    OrderWorkflow, PickTaskWorkflow,
    validate_order_workflow, validate_pick_task_workflow
)
from .order_service import OrderService
from .picking_service import PickingService
from .claim_service import ClaimService
from .packing_service import PackingService
from .registry import FulfillmentServices, get_services

__all__ = [
    # Workflow rules
    'OrderWorkflow', 'PickTaskWorkflow',
    'validate_order_workflow', 'validate_pick_task_workflow',

    # Services
    'OrderService', 'PickingService', 'ClaimService', 'PackingService',
    'FulfillmentServices', 'get_services',
]
