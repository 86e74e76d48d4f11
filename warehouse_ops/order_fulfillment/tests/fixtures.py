"""
Shared test data builders for Order Fulfillment tests.
"""

from decimal import Decimal
from django.contrib.auth import get_user_model

from products.models import Product
from warehouse.models import InventoryUnit, StorageLocation
from warehouse.services.stock_service import StockService


def create_user(username):
    return get_user_model().objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='testpass123'
    )


def create_product(sku, bin_code, unit_price='10.00', stock=100, barcode=None, is_active=True, currency='NZD'):
    """Create a product stocked at its primary bin."""
    location, _ = StorageLocation.objects.get_or_create(
        code=bin_code,
        defaults={'name': f'Bin {bin_code}', 'zone': bin_code.split('-')[0]}
    )
    product = Product.objects.create(
        name=f'Product {sku}',
        sku=sku,
        barcode=barcode,
        unit_price=Decimal(unit_price),
        currency=currency,
        primary_bin=bin_code,
        is_active=is_active,
    )
    if stock:
        StockService().receive_stock(location, product, stock, reason='Opening stock')
    return product


def stock_of(sku, bin_code):
    """(on hand, reserved) for a SKU at a bin."""
    unit = InventoryUnit.objects.get(product__sku=sku, location__code=bin_code)
    return unit.quantity, unit.reserved_quantity
