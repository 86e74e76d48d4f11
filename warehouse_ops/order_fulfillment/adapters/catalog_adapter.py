"""
SKU catalog adapter for Order Fulfillment.

Orders copy name, bin and price from the catalog at creation time; picking
resolves scanned barcodes back to SKUs through the same interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from django.db.models import Q

from products.models import Product

from ..exceptions import NotFoundException, SkuInactiveException


class SkuCatalogInterface(ABC):
    """Contract for SKU lookups."""

    @abstractmethod
    def lookup(self, sku: str) -> Dict[str, Any]:
        """
        Look up an orderable SKU.

        Args:
            sku: Product SKU

        Returns:
            {"sku": str, "name": str, "bin_location": str,
             "unit_price": Decimal, "currency": str, "is_active": bool}

        Raises:
            NotFoundException: If the SKU does not exist
            SkuInactiveException: If the SKU exists but is inactive
        """

    @abstractmethod
    def resolve_code(self, code: str) -> Optional[str]:
        """Return the SKU a scanned SKU or barcode refers to, or None."""


class ProductCatalogAdapter(SkuCatalogInterface):
    """Catalog backed by the ``products`` app."""

    def lookup(self, sku: str) -> Dict[str, Any]:
        try:
            product = Product.objects.get(sku=sku)
        except Product.DoesNotExist:
            raise NotFoundException('SKU', sku)

        if not product.is_active:
            raise SkuInactiveException(sku)

        return {
            'sku': product.sku,
            'name': product.name,
            'bin_location': product.primary_bin,
            'unit_price': product.unit_price,
            'currency': product.currency,
            'is_active': product.is_active,
        }

    def resolve_code(self, code: str) -> Optional[str]:
        return (
            Product.objects.filter(Q(sku=code) | Q(barcode=code))
            .values_list('sku', flat=True)
            .first()
        )
