"""
Pick task serializers for Order Fulfillment.
"""

from rest_framework import serializers

from ..models import PickTask


class PickTaskSerializer(serializers.ModelSerializer):
    """Serializer for PickTask model."""

    order_number = serializers.CharField(source='order.order_number', read_only=True)
    picker_name = serializers.CharField(source='picker.username', read_only=True, default=None)
    progress_percentage = serializers.SerializerMethodField()

    class Meta:
        model = PickTask
        fields = [
            'id', 'task_number', 'order', 'order_number', 'order_item', 'sequence',
            'sku', 'name', 'target_bin', 'quantity', 'picked_quantity',
            'progress_percentage', 'status', 'picker', 'picker_name',
            'started_at', 'completed_at', 'skipped_at', 'skip_reason',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_progress_percentage(self, obj):
        return obj.progress_percentage


class PickQuantitySerializer(serializers.Serializer):
    """Absolute picked quantity for a manual correction."""

    quantity = serializers.IntegerField(min_value=0)


class PickScanSerializer(serializers.Serializer):
    """A scan at the bin."""

    scanned_code = serializers.CharField(max_length=100)
    bin_location = serializers.CharField(max_length=50)
    quantity = serializers.IntegerField(min_value=1, default=1)


class SkipTaskSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)


class UndoPickSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
