"""
Adapters to the systems order fulfillment depends on.
"""

from .catalog_adapter import SkuCatalogInterface, ProductCatalogAdapter
from .inventory_adapter import InventoryAdapterInterface, WarehouseInventoryAdapter

__all__ = [
    'SkuCatalogInterface', 'ProductCatalogAdapter',
    'InventoryAdapterInterface', 'WarehouseInventoryAdapter',
]
