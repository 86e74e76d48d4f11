"""
Audit log model for Order Fulfillment.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from django.db import models
from django.conf import settings
from django.utils import timezone


def _jsonable(obj):
    if isinstance(obj, dict):
        return {k: _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(item) for item in obj]
    if isinstance(obj, (Decimal, uuid.UUID)):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


class AuditLog(models.Model):
    """
    Append-only trail of order and pick task changes.

    One row is written in the same transaction as every status change,
    claim, release and task mutation.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    entity_type = models.CharField(
        max_length=50,
        help_text="Type of entity (Order, PickTask)"
    )
    entity_id = models.UUIDField(
        help_text="UUID of the entity being audited"
    )
    action = models.CharField(
        max_length=50,
        help_text="Action performed (created, claimed, status_changed, ...)"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='fulfillment_audit_logs',
        help_text="User who performed the action"
    )

    old_values = models.JSONField(default=dict, blank=True)
    new_values = models.JSONField(default=dict, blank=True)

    timestamp = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id', '-timestamp'], name='audit_entity_idx'),
            models.Index(fields=['action', '-timestamp'], name='audit_action_idx'),
        ]

    def __str__(self):
        return f"{self.entity_type} {self.entity_id} - {self.action} by {self.user} at {self.timestamp}"

    @classmethod
    def log_change(cls, entity, action: str, user=None, old_values=None, new_values=None, notes=""):
        """
        Create an audit log entry for an entity change.

        Args:
            entity: The model instance being audited
            action: The action performed
            user: User who performed the action
            old_values: Previous state
            new_values: New state
            notes: Additional notes
        """
        return cls.objects.create(
            entity_type=entity.__class__.__name__,
            entity_id=entity.id,
            action=action,
            user=user,
            old_values=_jsonable(old_values or {}),
            new_values=_jsonable(new_values or {}),
            notes=notes,
        )

    @classmethod
    def log_status_change(cls, entity, old_status: str, new_status: str, user=None, notes=""):
        """Log a status change for an entity."""
        return cls.log_change(
            entity=entity,
            action='status_changed',
            user=user,
            old_values={'status': old_status},
            new_values={'status': new_status},
            notes=notes
        )
