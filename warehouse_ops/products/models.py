from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    name = models.CharField(max_length=200)
    sku = models.CharField(max_length=100, unique=True, db_index=True)
    barcode = models.CharField(max_length=64, unique=True, null=True, blank=True, help_text="EAN/UPC scanned at the bin")
    description = models.TextField(blank=True)
    unit_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)]
    )
    currency = models.CharField(max_length=3, default="NZD", help_text="ISO 4217 currency code")
    primary_bin = models.CharField(max_length=50, help_text="Bin location code the SKU is picked from")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        verbose_name = "Product"
        verbose_name_plural = "Products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="products_is_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"
