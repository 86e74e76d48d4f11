"""
Workflow rules for Order Fulfillment.

Manages allowed state transitions for orders and pick tasks. Staying in the
same status is not a transition and is rejected like any other pair that is
missing from the tables.
"""

from ..exceptions import InvalidTransitionException
from ..models import Order, OrderStatus, PickTask, PickTaskStatus


class OrderWorkflow:
    """Workflow rules for Order state transitions."""

    ALLOWED_TRANSITIONS = {
        OrderStatus.PENDING: [OrderStatus.PICKING, OrderStatus.CANCELLED, OrderStatus.BACKORDER],
        OrderStatus.PICKING: [OrderStatus.PICKED, OrderStatus.CANCELLED],
        OrderStatus.PICKED: [OrderStatus.PACKING, OrderStatus.CANCELLED],
        OrderStatus.PACKING: [OrderStatus.PACKED],
        OrderStatus.PACKED: [OrderStatus.SHIPPED],
        OrderStatus.SHIPPED: [],  # Final state
        OrderStatus.CANCELLED: [],  # Final state
        OrderStatus.BACKORDER: [OrderStatus.PENDING],
    }

    # A worker handing an order back moves it one step back, outside the table.
    RELEASE_TRANSITIONS = {
        OrderStatus.PICKING: OrderStatus.PENDING,
        OrderStatus.PACKING: OrderStatus.PICKED,
    }

    # Stamped the first time the order enters the status.
    TIMESTAMP_FIELDS = {
        OrderStatus.PICKED: 'picked_at',
        OrderStatus.PACKED: 'packed_at',
        OrderStatus.SHIPPED: 'shipped_at',
        OrderStatus.CANCELLED: 'cancelled_at',
    }

    @classmethod
    def validate_transition(cls, order: Order, new_status: str) -> None:
        """
        Validate if a status transition is allowed.

        Args:
            order: Order instance
            new_status: New status to transition to

        Raises:
            InvalidTransitionException: If transition is not allowed
        """
        allowed_transitions = cls.ALLOWED_TRANSITIONS.get(order.status, [])

        if new_status not in allowed_transitions:
            raise InvalidTransitionException(
                current_status=order.status,
                attempted_status=new_status,
                entity_type="Order"
            )

    @classmethod
    def can_transition_to(cls, order: Order, new_status: str) -> bool:
        """Check if transition is allowed without raising exception."""
        return new_status in cls.ALLOWED_TRANSITIONS.get(order.status, [])


class PickTaskWorkflow:
    """Workflow rules for PickTask state transitions."""

    ALLOWED_TRANSITIONS = {
        PickTaskStatus.PENDING: [PickTaskStatus.IN_PROGRESS, PickTaskStatus.COMPLETED, PickTaskStatus.SKIPPED],
        PickTaskStatus.IN_PROGRESS: [PickTaskStatus.COMPLETED, PickTaskStatus.SKIPPED, PickTaskStatus.PENDING],
        PickTaskStatus.SKIPPED: [PickTaskStatus.PENDING, PickTaskStatus.COMPLETED],
        PickTaskStatus.COMPLETED: [PickTaskStatus.PENDING],
    }

    @classmethod
    def validate_transition(cls, task: PickTask, new_status: str) -> None:
        """
        Validate if a status transition is allowed.

        Raises:
            InvalidTransitionException: If transition is not allowed
        """
        allowed_transitions = cls.ALLOWED_TRANSITIONS.get(task.status, [])

        if new_status not in allowed_transitions:
            raise InvalidTransitionException(
                current_status=task.status,
                attempted_status=new_status,
                entity_type="PickTask"
            )


def validate_order_workflow(order: Order, new_status: str) -> None:
    """Validate order workflow transition."""
    OrderWorkflow.validate_transition(order, new_status)


def validate_pick_task_workflow(task: PickTask, new_status: str) -> None:
    """Validate pick task workflow transition."""
    PickTaskWorkflow.validate_transition(task, new_status)
