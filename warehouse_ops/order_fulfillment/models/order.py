"""
Order model for Order Fulfillment.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.db.models import Case, IntegerField, Q, Value, When
from django.conf import settings
from django.utils import timezone


class OrderStatus(models.TextChoices):
    """Order status enumeration with workflow states."""
    PENDING = 'PENDING', 'Pending'
    PICKING = 'PICKING', 'Picking'
    PICKED = 'PICKED', 'Picked'
    PACKING = 'PACKING', 'Packing'
    PACKED = 'PACKED', 'Packed'
    SHIPPED = 'SHIPPED', 'Shipped'
    CANCELLED = 'CANCELLED', 'Cancelled'
    BACKORDER = 'BACKORDER', 'Backorder'


class OrderPriority(models.TextChoices):
    """Order priority levels, lowest first."""
    LOW = 'LOW', 'Low'
    NORMAL = 'NORMAL', 'Normal'
    HIGH = 'HIGH', 'High'
    URGENT = 'URGENT', 'Urgent'


PRIORITY_RANK = {
    OrderPriority.LOW: 1,
    OrderPriority.NORMAL: 2,
    OrderPriority.HIGH: 3,
    OrderPriority.URGENT: 4,
}

# Statuses in which an order is held by a picker.
CLAIMED_STATUSES = [
    OrderStatus.PICKING, OrderStatus.PICKED, OrderStatus.PACKING,
    OrderStatus.PACKED, OrderStatus.SHIPPED,
]
UNCLAIMED_STATUSES = [OrderStatus.PENDING, OrderStatus.BACKORDER]


class OrderQuerySet(models.QuerySet):

    def with_priority_rank(self):
        return self.annotate(queue_rank=Case(
            *[When(priority=priority, then=Value(rank)) for priority, rank in PRIORITY_RANK.items()],
            default=Value(0),
            output_field=IntegerField(),
        ))

    def in_queue_order(self):
        """Most urgent first, oldest first within a priority."""
        return self.with_priority_rank().order_by('-queue_rank', 'created_at', 'order_number')

    def active_for_picker(self, picker):
        return self.filter(picker=picker, status=OrderStatus.PICKING)


class Order(models.Model):
    """
    Customer order moving through claim, pick, pack and ship.

    Money is Decimal throughout. Totals are computed from catalog prices by
    ``OrderService`` when the order is created.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(
        max_length=50,
        unique=True,
        help_text="Unique order identifier (auto-generated)"
    )

    customer_id = models.CharField(
        max_length=100,
        help_text="Customer reference in the sales system"
    )
    customer_name = models.CharField(max_length=200, blank=True)

    # Status and priority
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        help_text="Current order status in the fulfillment workflow"
    )
    priority = models.CharField(
        max_length=10,
        choices=OrderPriority.choices,
        default=OrderPriority.NORMAL,
        help_text="Order priority level"
    )

    # Financial information
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Sum of line totals"
    )
    tax_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Tax amount"
    )
    shipping_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Shipping cost"
    )
    discount_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Discount applied"
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="subtotal + tax + shipping - discount"
    )
    currency = models.CharField(max_length=3, default='NZD', help_text="ISO 4217 currency code")

    # Workers
    picker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='picking_orders',
        help_text="Picker holding the order"
    )
    packer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='packing_orders',
        help_text="Packer holding the order"
    )

    # Lifecycle timestamps
    claimed_at = models.DateTimeField(null=True, blank=True)
    picked_at = models.DateTimeField(null=True, blank=True)
    packed_at = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    cancel_reason = models.TextField(blank=True)
    notes = models.TextField(
        blank=True,
        help_text="Order notes or special instructions"
    )

    # Audit fields
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_orders',
        help_text="User who created the order"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='updated_orders',
        help_text="User who last updated the order"
    )

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'priority'], name='order_status_priority_idx'),
            models.Index(fields=['picker', 'status'], name='order_picker_status_idx'),
            models.Index(fields=['created_at'], name='order_created_at_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status__in=CLAIMED_STATUSES, picker__isnull=False)
                    | Q(status__in=UNCLAIMED_STATUSES, picker__isnull=True)
                    | Q(status=OrderStatus.CANCELLED)
                ),
                name='order_picker_matches_status',
            ),
        ]

    def __str__(self):
        return f"Order {self.order_number} ({self.status})"

    def save(self, *args, **kwargs):
        """Override save to auto-generate order number if not provided."""
        if not self.order_number:
            timestamp = timezone.now().strftime('%Y%m%d%H%M%S')
            self.order_number = f"ORD-{timestamp}-{str(self.id)[:8].upper()}"
        super().save(*args, **kwargs)

    @property
    def priority_rank(self):
        return PRIORITY_RANK.get(self.priority, 0)

    @property
    def is_terminal(self):
        return self.status in (OrderStatus.SHIPPED, OrderStatus.CANCELLED)

    @property
    def can_be_cancelled(self):
        """Check if order can still be cancelled."""
        return self.status not in (OrderStatus.SHIPPED, OrderStatus.CANCELLED)

    @property
    def is_claimed(self):
        return self.picker_id is not None
