import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('order_number', models.CharField(help_text='Unique order identifier (auto-generated)', max_length=50, unique=True)),
                ('customer_id', models.CharField(help_text='Customer reference in the sales system', max_length=100)),
                ('customer_name', models.CharField(blank=True, max_length=200)),
                ('status', models.CharField(
                    choices=[
                        ('PENDING', 'Pending'), ('PICKING', 'Picking'), ('PICKED', 'Picked'),
                        ('PACKING', 'Packing'), ('PACKED', 'Packed'), ('SHIPPED', 'Shipped'),
                        ('CANCELLED', 'Cancelled'), ('BACKORDER', 'Backorder'),
                    ],
                    default='PENDING',
                    help_text='Current order status in the fulfillment workflow',
                    max_length=20,
                )),
                ('priority', models.CharField(
                    choices=[('LOW', 'Low'), ('NORMAL', 'Normal'), ('HIGH', 'High'), ('URGENT', 'Urgent')],
                    default='NORMAL',
                    help_text='Order priority level',
                    max_length=10,
                )),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Sum of line totals', max_digits=12)),
                ('tax_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Tax amount', max_digits=12)),
                ('shipping_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Shipping cost', max_digits=12)),
                ('discount_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Discount applied', max_digits=12)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='subtotal + tax + shipping - discount', max_digits=12)),
                ('currency', models.CharField(default='NZD', help_text='ISO 4217 currency code', max_length=3)),
                ('claimed_at', models.DateTimeField(blank=True, null=True)),
                ('picked_at', models.DateTimeField(blank=True, null=True)),
                ('packed_at', models.DateTimeField(blank=True, null=True)),
                ('shipped_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('cancel_reason', models.TextField(blank=True)),
                ('notes', models.TextField(blank=True, help_text='Order notes or special instructions')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(
                    help_text='User who created the order', null=True,
                    on_delete=django.db.models.deletion.SET_NULL, related_name='created_orders',
                    to=settings.AUTH_USER_MODEL,
                )),
                ('updated_by', models.ForeignKey(
                    help_text='User who last updated the order', null=True,
                    on_delete=django.db.models.deletion.SET_NULL, related_name='updated_orders',
                    to=settings.AUTH_USER_MODEL,
                )),
                ('picker', models.ForeignKey(
                    blank=True, help_text='Picker holding the order', null=True,
                    on_delete=django.db.models.deletion.PROTECT, related_name='picking_orders',
                    to=settings.AUTH_USER_MODEL,
                )),
                ('packer', models.ForeignKey(
                    blank=True, help_text='Packer holding the order', null=True,
                    on_delete=django.db.models.deletion.PROTECT, related_name='packing_orders',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'priority'], name='order_status_priority_idx'),
                    models.Index(fields=['picker', 'status'], name='order_picker_status_idx'),
                    models.Index(fields=['created_at'], name='order_created_at_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=(
                            models.Q(('status__in', ['PICKING', 'PICKED', 'PACKING', 'PACKED', 'SHIPPED']), ('picker__isnull', False))
                            | models.Q(('status__in', ['PENDING', 'BACKORDER']), ('picker__isnull', True))
                            | models.Q(('status', 'CANCELLED'))
                        ),
                        name='order_picker_matches_status',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('line_number', models.PositiveSmallIntegerField(help_text='Position of the line within the order')),
                ('sku', models.CharField(help_text='Product SKU for inventory tracking', max_length=100)),
                ('name', models.CharField(help_text='Product name at time of order', max_length=255)),
                ('bin_location', models.CharField(help_text='Bin the line is reserved and picked from', max_length=50)),
                ('quantity', models.PositiveIntegerField(help_text='Quantity ordered')),
                ('picked_quantity', models.PositiveIntegerField(default=0, help_text='Quantity picked so far')),
                ('status', models.CharField(
                    choices=[
                        ('PENDING', 'Pending'), ('PARTIAL_PICKED', 'Partially Picked'),
                        ('FULLY_PICKED', 'Fully Picked'),
                    ],
                    default='PENDING',
                    max_length=20,
                )),
                ('unit_price', models.DecimalField(decimal_places=2, help_text='Price per unit', max_digits=12)),
                ('line_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='quantity * unit_price', max_digits=12)),
                ('currency', models.CharField(max_length=3)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(
                    help_text='Order this item belongs to',
                    on_delete=django.db.models.deletion.CASCADE, related_name='items',
                    to='order_fulfillment.order',
                )),
            ],
            options={
                'ordering': ['order', 'line_number'],
                'constraints': [
                    models.UniqueConstraint(fields=('order', 'line_number'), name='order_item_line_uniq'),
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='order_item_quantity_positive'),
                    models.CheckConstraint(
                        condition=models.Q(('picked_quantity__lte', models.F('quantity'))),
                        name='order_item_picked_lte_quantity',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='PickTask',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('task_number', models.CharField(help_text='Unique pick task identifier', max_length=50, unique=True)),
                ('sequence', models.PositiveSmallIntegerField(help_text='Walk order within the order')),
                ('sku', models.CharField(max_length=100)),
                ('name', models.CharField(max_length=255)),
                ('target_bin', models.CharField(help_text='Bin to pick from', max_length=50)),
                ('quantity', models.PositiveIntegerField(help_text='Quantity to pick')),
                ('picked_quantity', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(
                    choices=[
                        ('PENDING', 'Pending'), ('IN_PROGRESS', 'In Progress'),
                        ('COMPLETED', 'Completed'), ('SKIPPED', 'Skipped'),
                    ],
                    default='PENDING',
                    help_text='Current pick task status',
                    max_length=20,
                )),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('skipped_at', models.DateTimeField(blank=True, null=True)),
                ('skip_reason', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(
                    help_text='Order this pick task belongs to',
                    on_delete=django.db.models.deletion.CASCADE, related_name='pick_tasks',
                    to='order_fulfillment.order',
                )),
                ('order_item', models.OneToOneField(
                    help_text='Order line this task picks',
                    on_delete=django.db.models.deletion.CASCADE, related_name='pick_task',
                    to='order_fulfillment.orderitem',
                )),
                ('picker', models.ForeignKey(
                    blank=True, help_text='Picker working the task', null=True,
                    on_delete=django.db.models.deletion.SET_NULL, related_name='pick_tasks',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'ordering': ['order', 'sequence'],
                'indexes': [
                    models.Index(fields=['order', 'status'], name='pick_task_order_status_idx'),
                    models.Index(fields=['picker', 'status'], name='pick_task_picker_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('picked_quantity__lte', models.F('quantity'))),
                        name='pick_task_picked_lte_quantity',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('entity_type', models.CharField(help_text='Type of entity (Order, PickTask)', max_length=50)),
                ('entity_id', models.UUIDField(help_text='UUID of the entity being audited')),
                ('action', models.CharField(help_text='Action performed (created, claimed, status_changed, ...)', max_length=50)),
                ('old_values', models.JSONField(blank=True, default=dict)),
                ('new_values', models.JSONField(blank=True, default=dict)),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True)),
                ('user', models.ForeignKey(
                    help_text='User who performed the action', null=True,
                    on_delete=django.db.models.deletion.SET_NULL, related_name='fulfillment_audit_logs',
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['entity_type', 'entity_id', '-timestamp'], name='audit_entity_idx'),
                    models.Index(fields=['action', '-timestamp'], name='audit_action_idx'),
                ],
            },
        ),
    ]
