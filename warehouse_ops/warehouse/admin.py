from django.contrib import admin
from .models import StorageLocation, InventoryUnit, InventoryTransaction


@admin.register(StorageLocation)
class StorageLocationAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "zone", "is_active", "created_at"]
    list_filter = ["zone", "is_active", "created_at"]
    search_fields = ["code", "name"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(InventoryUnit)
class InventoryUnitAdmin(admin.ModelAdmin):
    list_display = ["product", "location", "quantity", "reserved_quantity", "last_movement_date"]
    list_filter = ["location", "last_movement_date"]
    search_fields = ["product__name", "product__sku", "location__code"]
    readonly_fields = ["created_at", "last_movement_date"]


@admin.register(InventoryTransaction)
class InventoryTransactionAdmin(admin.ModelAdmin):
    list_display = ["transaction_type", "product", "location", "quantity", "reference", "user", "created_at"]
    list_filter = ["transaction_type", "created_at", "user"]
    search_fields = ["product__sku", "reference", "reason"]
    readonly_fields = ["created_at"]
    date_hierarchy = "created_at"
