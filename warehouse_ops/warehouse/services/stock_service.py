import logging

from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest

from warehouse.models import InventoryTransaction, InventoryUnit

logger = logging.getLogger(__name__)


class StockService:
    """
    Service for managing per-bin stock counters and the inventory ledger.

    Every counter change writes one InventoryTransaction row in the same
    transaction. Callers that need the row locked for a read-then-write
    decision must already be inside ``transaction.atomic()``.
    """

    def get_unit(self, sku, location_code, lock=False):
        """
        Fetch the inventory unit for a SKU at a bin.

        Args:
            sku: Product SKU
            location_code: StorageLocation code
            lock: Take a row lock on the unit (SELECT ... FOR UPDATE)

        Returns:
            InventoryUnit instance or None if the SKU is not stocked at the bin
        """
        queryset = InventoryUnit.objects.select_related("product", "location")
        if lock:
            queryset = queryset.select_for_update(of=("self",))
        try:
            return queryset.get(product__sku=sku, location__code=location_code)
        except InventoryUnit.DoesNotExist:
            return None

    def get_available(self, sku, location_code):
        unit = self.get_unit(sku, location_code)
        return unit.available_quantity if unit else 0

    @transaction.atomic
    def receive_stock(self, location, product, quantity, user=None, reason=""):
        """
        Add on-hand stock at a location, creating the unit if needed.

        Args:
            location: StorageLocation instance
            product: Product instance
            quantity: Quantity received (positive) or written off (negative)
            user: User recording the adjustment
            reason: Free text reason

        Returns:
            InventoryUnit instance

        Raises:
            ValueError: If the adjustment would drop on-hand below reserved
        """
        unit, created = InventoryUnit.objects.select_for_update().get_or_create(
            location=location, product=product, defaults={"quantity": max(quantity, 0)}
        )

        if not created:
            if unit.quantity + quantity < unit.reserved_quantity:
                raise ValueError(
                    f"Adjustment would leave {product.sku} at {location.code} below its reserved quantity. "
                    f"On hand: {unit.quantity}, reserved: {unit.reserved_quantity}, change: {quantity}"
                )
            unit.quantity = F("quantity") + quantity
            unit.save(update_fields=["quantity", "last_movement_date"])
            unit.refresh_from_db()
        elif quantity < 0:
            raise ValueError(f"No stock of {product.sku} at {location.code} to write off")

        self._record(InventoryTransaction.ADJUSTMENT, unit, quantity, user=user, reason=reason)
        return unit

    @transaction.atomic
    def reserve_stock(self, sku, location_code, quantity, reference="", user=None):
        """
        Reserve stock for an order line.

        Args:
            sku: Product SKU
            location_code: StorageLocation code
            quantity: Quantity to reserve
            reference: Order number
            user: User triggering the reservation

        Returns:
            InventoryUnit instance or None if insufficient stock
        """
        unit = self.get_unit(sku, location_code, lock=True)
        if unit is None or unit.available_quantity < quantity:
            return None

        unit.reserved_quantity = F("reserved_quantity") + quantity
        unit.save(update_fields=["reserved_quantity", "last_movement_date"])
        unit.refresh_from_db()

        self._record(InventoryTransaction.RESERVATION, unit, quantity, reference=reference, user=user)
        return unit

    @transaction.atomic
    def release_reservation(self, sku, location_code, quantity, reference="", user=None, reason=""):
        """
        Release reserved stock quantity.

        Args:
            sku: Product SKU
            location_code: StorageLocation code
            quantity: Quantity to release
            reference: Order number
            user: User triggering the release
            reason: Why the reservation is released

        Returns:
            InventoryUnit instance

        Raises:
            InventoryUnit.DoesNotExist: If the SKU is not stocked at the bin
        """
        unit = self.get_unit(sku, location_code, lock=True)
        if unit is None:
            raise InventoryUnit.DoesNotExist(f"No inventory unit for {sku} at {location_code}")

        if unit.reserved_quantity < quantity:
            logger.warning(
                f"Releasing {quantity} of {sku} at {location_code} for {reference} "
                f"but only {unit.reserved_quantity} is reserved"
            )

        unit.reserved_quantity = Greatest(F("reserved_quantity") - quantity, 0)
        unit.save(update_fields=["reserved_quantity", "last_movement_date"])
        unit.refresh_from_db()

        self._record(InventoryTransaction.RELEASE, unit, -quantity, reference=reference, user=user, reason=reason)
        return unit

    @transaction.atomic
    def deduct_stock(self, sku, location_code, quantity, reference="", user=None):
        """
        Consume a reservation when goods leave the building.

        Both on-hand and reserved drop by ``quantity``.

        Raises:
            ValueError: If the unit is missing or less than ``quantity`` is reserved
        """
        unit = self.get_unit(sku, location_code, lock=True)
        if unit is None:
            raise ValueError(f"No stock found for {sku} at {location_code}")
        if unit.reserved_quantity < quantity:
            raise ValueError(
                f"Cannot deduct {quantity} of {sku} at {location_code}: only {unit.reserved_quantity} reserved"
            )

        unit.quantity = F("quantity") - quantity
        unit.reserved_quantity = F("reserved_quantity") - quantity
        unit.save(update_fields=["quantity", "reserved_quantity", "last_movement_date"])
        unit.refresh_from_db()

        self._record(InventoryTransaction.DEDUCTION, unit, -quantity, reference=reference, user=user)
        return unit

    def _record(self, transaction_type, unit, quantity, reference="", user=None, reason=""):
        return InventoryTransaction.objects.create(
            transaction_type=transaction_type,
            location=unit.location,
            product=unit.product,
            quantity=quantity,
            reference=reference,
            user=user,
            reason=reason,
        )

