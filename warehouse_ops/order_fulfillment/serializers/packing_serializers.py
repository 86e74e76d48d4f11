"""
Packing verification serializers for Order Fulfillment.
"""

from rest_framework import serializers


class PackingVerifySerializer(serializers.Serializer):
    """Units of one line checked by the packer."""

    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class PackingSkipSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    reason = serializers.CharField(max_length=500)


class PackingUndoSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
