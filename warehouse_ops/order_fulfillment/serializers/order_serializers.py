"""
Order serializers for Order Fulfillment.
"""

from rest_framework import serializers

from ..models import Order, OrderItem, OrderPriority, OrderStatus
from ..services.progress import order_progress
from .picking_serializers import PickTaskSerializer


class OrderItemSerializer(serializers.ModelSerializer):
    """Serializer for OrderItem model."""

    remaining_to_pick = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = [
            'id', 'line_number', 'sku', 'name', 'bin_location',
            'quantity', 'picked_quantity', 'remaining_to_pick', 'status',
            'verified_quantity', 'verification_skip_reason',
            'unit_price', 'line_total', 'currency', 'created_at'
        ]
        read_only_fields = fields

    def get_remaining_to_pick(self, obj):
        return obj.remaining_to_pick


class OrderLineSerializer(serializers.Serializer):
    """One requested line of a new order."""

    sku = serializers.CharField(max_length=100)
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    """Serializer for creating orders."""

    customer_id = serializers.CharField(max_length=100)
    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    priority = serializers.ChoiceField(choices=OrderPriority.choices, default=OrderPriority.NORMAL)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    items = OrderLineSerializer(many=True)

    def validate_items(self, value):
        """Validate order items."""
        if not value:
            raise serializers.ValidationError("Order must contain at least one item")
        return value

    def create(self, validated_data):
        """Create order with items."""
        from ..services import get_services

        return get_services().orders.create_order(
            customer_id=validated_data['customer_id'],
            customer_name=validated_data['customer_name'],
            priority=validated_data['priority'],
            notes=validated_data['notes'],
            items=[dict(line) for line in validated_data['items']],
            created_by=self.context['request'].user,
        )


class OrderListSerializer(serializers.ModelSerializer):
    """Serializer for the order queue."""

    picker_name = serializers.CharField(source='picker.username', read_only=True, default=None)
    items_count = serializers.SerializerMethodField()
    progress = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer_id', 'customer_name', 'status', 'priority',
            'total_amount', 'currency', 'picker', 'picker_name', 'items_count', 'progress',
            'claimed_at', 'created_at'
        ]

    def get_items_count(self, obj):
        return len(obj.items.all())

    def get_progress(self, obj):
        return order_progress(obj)


class OrderDetailSerializer(serializers.ModelSerializer):
    """Serializer for order details."""

    picker_name = serializers.CharField(source='picker.username', read_only=True, default=None)
    packer_name = serializers.CharField(source='packer.username', read_only=True, default=None)
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, default=None)

    items = OrderItemSerializer(many=True, read_only=True)
    pick_tasks = PickTaskSerializer(many=True, read_only=True)
    progress = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer_id', 'customer_name', 'status', 'priority',
            'subtotal', 'tax_amount', 'shipping_amount', 'discount_amount', 'total_amount',
            'currency', 'progress', 'picker', 'picker_name', 'packer', 'packer_name',
            'claimed_at', 'picked_at', 'packed_at', 'shipped_at', 'cancelled_at',
            'cancel_reason', 'notes', 'created_by_name', 'created_at', 'updated_at',
            'items', 'pick_tasks'
        ]

    def get_progress(self, obj):
        return order_progress(obj)


class OrderTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
