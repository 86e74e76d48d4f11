from rest_framework import serializers

from .models import InventoryTransaction, InventoryUnit, StorageLocation


class StorageLocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = StorageLocation
        fields = ["id", "code", "name", "zone", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class InventoryUnitSerializer(serializers.ModelSerializer):
    sku = serializers.CharField(source="product.sku", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    location_code = serializers.CharField(source="location.code", read_only=True)
    available_quantity = serializers.IntegerField(read_only=True)

    class Meta:
        model = InventoryUnit
        fields = [
            "id",
            "product",
            "sku",
            "product_name",
            "location",
            "location_code",
            "quantity",
            "reserved_quantity",
            "available_quantity",
            "last_movement_date",
        ]
        read_only_fields = fields


class InventoryTransactionSerializer(serializers.ModelSerializer):
    sku = serializers.CharField(source="product.sku", read_only=True)
    location_code = serializers.CharField(source="location.code", read_only=True)
    user_name = serializers.CharField(source="user.username", read_only=True, default=None)

    class Meta:
        model = InventoryTransaction
        fields = [
            "id",
            "transaction_type",
            "sku",
            "location_code",
            "quantity",
            "reference",
            "user",
            "user_name",
            "reason",
            "created_at",
        ]
        read_only_fields = fields


class AvailabilityQuerySerializer(serializers.Serializer):
    sku = serializers.CharField(max_length=100)
    bin = serializers.CharField(max_length=50)
