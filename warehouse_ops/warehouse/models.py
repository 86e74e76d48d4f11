from django.conf import settings
from django.db import models
from django.db.models import F, Q

from products.models import Product


class StorageLocation(models.Model):
    code = models.CharField(max_length=50, unique=True, db_index=True, help_text="Bin code, e.g. A-01-03")
    name = models.CharField(max_length=200, blank=True)
    zone = models.CharField(max_length=50, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "storage_locations"
        verbose_name = "Storage Location"
        verbose_name_plural = "Storage Locations"
        ordering = ["code"]

    def __str__(self):
        return self.code


class InventoryUnit(models.Model):
    """On-hand and reserved stock of one SKU in one bin."""

    location = models.ForeignKey(StorageLocation, on_delete=models.CASCADE, related_name="inventory_units")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="inventory_units")
    quantity = models.PositiveIntegerField(default=0)
    reserved_quantity = models.PositiveIntegerField(default=0)
    last_movement_date = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "inventory_units"
        verbose_name = "Inventory Unit"
        verbose_name_plural = "Inventory Units"
        constraints = [
            models.UniqueConstraint(fields=["location", "product"], name="inventory_unit_location_product_uniq"),
            models.CheckConstraint(
                condition=Q(reserved_quantity__lte=F("quantity")), name="inventory_unit_reserved_lte_quantity"
            ),
        ]

    def __str__(self):
        return f"{self.product.sku} at {self.location.code} - {self.quantity} ({self.reserved_quantity} reserved)"

    @property
    def available_quantity(self):
        return self.quantity - self.reserved_quantity


class InventoryTransaction(models.Model):
    RESERVATION = "RESERVATION"
    RELEASE = "RELEASE"
    DEDUCTION = "DEDUCTION"
    ADJUSTMENT = "ADJUSTMENT"

    TRANSACTION_TYPE_CHOICES = [
        (RESERVATION, "Reservation"),
        (RELEASE, "Release"),
        (DEDUCTION, "Deduction"),
        (ADJUSTMENT, "Adjustment"),
    ]

    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPE_CHOICES)
    location = models.ForeignKey(StorageLocation, on_delete=models.PROTECT, related_name="inventory_transactions")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="inventory_transactions")
    quantity = models.IntegerField(help_text="Signed change applied to the counter named by the type")
    reference = models.CharField(max_length=50, blank=True, help_text="Order number the movement belongs to")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="inventory_transactions",
    )
    reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "inventory_transactions"
        verbose_name = "Inventory Transaction"
        verbose_name_plural = "Inventory Transactions"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["reference"], name="inv_txn_reference_idx"),
            models.Index(fields=["product", "location"], name="inv_txn_product_location_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.quantity} x {self.product.sku} at {self.location.code}"
