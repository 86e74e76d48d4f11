import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("products", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StorageLocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(db_index=True, help_text="Bin code, e.g. A-01-03", max_length=50, unique=True)),
                ("name", models.CharField(blank=True, max_length=200)),
                ("zone", models.CharField(blank=True, max_length=50)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Storage Location",
                "verbose_name_plural": "Storage Locations",
                "db_table": "storage_locations",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="InventoryUnit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField(default=0)),
                ("reserved_quantity", models.PositiveIntegerField(default=0)),
                ("last_movement_date", models.DateTimeField(auto_now=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="inventory_units",
                        to="warehouse.storagelocation",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="inventory_units",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "verbose_name": "Inventory Unit",
                "verbose_name_plural": "Inventory Units",
                "db_table": "inventory_units",
                "constraints": [
                    models.UniqueConstraint(fields=("location", "product"), name="inventory_unit_location_product_uniq"),
                    models.CheckConstraint(
                        condition=models.Q(("reserved_quantity__lte", models.F("quantity"))),
                        name="inventory_unit_reserved_lte_quantity",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InventoryTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[
                            ("RESERVATION", "Reservation"),
                            ("RELEASE", "Release"),
                            ("DEDUCTION", "Deduction"),
                            ("ADJUSTMENT", "Adjustment"),
                        ],
                        max_length=20,
                    ),
                ),
                ("quantity", models.IntegerField(help_text="Signed change applied to the counter named by the type")),
                (
                    "reference",
                    models.CharField(blank=True, help_text="Order number the movement belongs to", max_length=50),
                ),
                ("reason", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inventory_transactions",
                        to="warehouse.storagelocation",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inventory_transactions",
                        to="products.product",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="inventory_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Inventory Transaction",
                "verbose_name_plural": "Inventory Transactions",
                "db_table": "inventory_transactions",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["reference"], name="inv_txn_reference_idx"),
                    models.Index(fields=["product", "location"], name="inv_txn_product_location_idx"),
                ],
            },
        ),
    ]
