"""
OrderItem model for Order Fulfillment.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.db.models import F, Q


class OrderItemStatus(models.TextChoices):
    """Pick state of an order line, derived from picked quantity."""
    PENDING = 'PENDING', 'Pending'
    PARTIAL_PICKED = 'PARTIAL_PICKED', 'Partially Picked'
    FULLY_PICKED = 'FULLY_PICKED', 'Fully Picked'


class OrderItem(models.Model):
    """
    One line of an order.

    SKU name, bin and price are copied from the catalog when the order is
    created so later catalog edits do not change existing orders.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(
        'Order',
        on_delete=models.CASCADE,
        related_name='items',
        help_text="Order this item belongs to"
    )
    line_number = models.PositiveSmallIntegerField(help_text="Position of the line within the order")

    sku = models.CharField(
        max_length=100,
        help_text="Product SKU for inventory tracking"
    )
    name = models.CharField(
        max_length=255,
        help_text="Product name at time of order"
    )
    bin_location = models.CharField(
        max_length=50,
        help_text="Bin the line is reserved and picked from"
    )

    quantity = models.PositiveIntegerField(help_text="Quantity ordered")
    picked_quantity = models.PositiveIntegerField(default=0, help_text="Quantity picked so far")
    verified_quantity = models.PositiveIntegerField(default=0, help_text="Quantity checked by the packer")
    verification_skip_reason = models.CharField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Why the packer set the line aside"
    )
    status = models.CharField(
        max_length=20,
        choices=OrderItemStatus.choices,
        default=OrderItemStatus.PENDING
    )

    # Pricing
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Price per unit"
    )
    line_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="quantity * unit_price"
    )
    currency = models.CharField(max_length=3)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', 'line_number']
        constraints = [
            models.UniqueConstraint(fields=['order', 'line_number'], name='order_item_line_uniq'),
            models.CheckConstraint(condition=Q(quantity__gt=0), name='order_item_quantity_positive'),
            models.CheckConstraint(
                condition=Q(picked_quantity__lte=F('quantity')),
                name='order_item_picked_lte_quantity'
            ),
            models.CheckConstraint(
                condition=Q(verified_quantity__lte=F('quantity')),
                name='order_item_verified_lte_quantity'
            ),
        ]

    def __str__(self):
        return f"{self.sku} x {self.quantity} ({self.order_id})"

    def save(self, *args, **kwargs):
        """Recompute the line total before saving."""
        self.line_total = (self.unit_price or Decimal('0.00')) * self.quantity
        super().save(*args, **kwargs)

    @property
    def remaining_to_pick(self):
        return max(self.quantity - self.picked_quantity, 0)

    @property
    def is_fully_picked(self):
        return self.picked_quantity >= self.quantity

    def set_picked_quantity(self, quantity):
        """Set the picked count and the status it implies; caller saves."""
        self.picked_quantity = quantity
        if quantity <= 0:
            self.status = OrderItemStatus.PENDING
        elif quantity >= self.quantity:
            self.status = OrderItemStatus.FULLY_PICKED
        else:
            self.status = OrderItemStatus.PARTIAL_PICKED

    @property
    def is_verified(self):
        return self.verified_quantity >= self.quantity

    def reset_verification(self):
        """Clear packing checks on the line; caller saves."""
        self.verified_quantity = 0
        self.verification_skip_reason = None
