"""
Pick task model for Order Fulfillment.
"""

import uuid
from django.db import models
from django.db.models import F, Q
from django.conf import settings
from django.utils import timezone


class PickTaskStatus(models.TextChoices):
    """Pick task status enumeration."""
    PENDING = 'PENDING', 'Pending'
    IN_PROGRESS = 'IN_PROGRESS', 'In Progress'
    COMPLETED = 'COMPLETED', 'Completed'
    SKIPPED = 'SKIPPED', 'Skipped'


class PickTask(models.Model):
    """
    Instruction to pick one order line from its bin.

    A claimed order has exactly one task per item. The set is deleted and
    regenerated with fresh ids every time the order is claimed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    task_number = models.CharField(
        max_length=50,
        unique=True,
        help_text="Unique pick task identifier"
    )
    order = models.ForeignKey(
        'Order',
        on_delete=models.CASCADE,
        related_name='pick_tasks',
        help_text="Order this pick task belongs to"
    )
    order_item = models.OneToOneField(
        'OrderItem',
        on_delete=models.CASCADE,
        related_name='pick_task',
        help_text="Order line this task picks"
    )
    sequence = models.PositiveSmallIntegerField(help_text="Walk order within the order")

    sku = models.CharField(max_length=100)
    name = models.CharField(max_length=255)
    target_bin = models.CharField(max_length=50, help_text="Bin to pick from")

    quantity = models.PositiveIntegerField(help_text="Quantity to pick")
    picked_quantity = models.PositiveIntegerField(default=0)

    status = models.CharField(
        max_length=20,
        choices=PickTaskStatus.choices,
        default=PickTaskStatus.PENDING,
        help_text="Current pick task status"
    )
    picker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='pick_tasks',
        help_text="Picker working the task"
    )

    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    skipped_at = models.DateTimeField(null=True, blank=True)
    skip_reason = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', 'sequence']
        indexes = [
            models.Index(fields=['order', 'status'], name='pick_task_order_status_idx'),
            models.Index(fields=['picker', 'status'], name='pick_task_picker_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(picked_quantity__lte=F('quantity')),
                name='pick_task_picked_lte_quantity'
            ),
        ]

    def __str__(self):
        return f"Pick Task {self.task_number} - {self.status}"

    def save(self, *args, **kwargs):
        if not self.task_number:
            timestamp = timezone.now().strftime('%Y%m%d%H%M%S')
            self.task_number = f"PT-{timestamp}-{str(self.id)[:8].upper()}"
        super().save(*args, **kwargs)

    @property
    def is_open(self):
        """Still counts as outstanding work for the picker."""
        return self.status in (PickTaskStatus.PENDING, PickTaskStatus.IN_PROGRESS)

    @property
    def progress_percentage(self):
        if self.quantity == 0:
            return 0
        return (200 * self.picked_quantity + self.quantity) // (2 * self.quantity)
