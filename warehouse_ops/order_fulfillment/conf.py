"""
Settings for the order fulfillment app.

Read from the ``FULFILLMENT`` dict in Django settings, falling back to
``DEFAULTS`` per key. Values are looked up on every call so
``override_settings`` applies in tests.
"""

from decimal import Decimal

from django.conf import settings

DEFAULTS = {
    'MAX_ACTIVE_ORDERS_PER_PICKER': 5,
    'DEFAULT_CURRENCY': 'NZD',
    'TAX_RATE': Decimal('0'),
    'DISCOUNT_RATE': Decimal('0'),
    'SHIPPING_FLAT_RATE': Decimal('0.00'),
    'QUEUE_PAGE_SIZE': 20,
    'QUEUE_MAX_PAGE_SIZE': 100,
    'INVENTORY_ADAPTER': 'order_fulfillment.adapters.inventory_adapter.WarehouseInventoryAdapter',
    'CATALOG_ADAPTER': 'order_fulfillment.adapters.catalog_adapter.ProductCatalogAdapter',
}


def get_setting(name):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown fulfillment setting: {name}")
    return getattr(settings, 'FULFILLMENT', {}).get(name, DEFAULTS[name])
