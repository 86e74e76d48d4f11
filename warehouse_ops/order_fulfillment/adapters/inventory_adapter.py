"""
Inventory adapter for Order Fulfillment.

The fulfillment services never touch stock counters directly; they go
through this interface so the warehouse ledger stays the single owner of
on-hand and reserved quantities.
"""

import logging
from abc import ABC, abstractmethod

from warehouse.models import InventoryUnit
from warehouse.services.stock_service import StockService

from ..exceptions import ConflictException, InventoryUnavailableException

logger = logging.getLogger(__name__)


class InventoryAdapterInterface(ABC):
    """
    Interface for inventory management system integration.

    All methods must be called inside the caller's transaction so the stock
    change commits or rolls back together with the order change.
    """

    @abstractmethod
    def available(self, sku: str, bin_location: str) -> int:
        """Quantity on hand minus reserved at a bin; 0 if not stocked."""

    @abstractmethod
    def reserve(self, sku: str, bin_location: str, qty: int, reference: str, user=None) -> None:
        """
        Reserve inventory at a specific bin.

        Args:
            sku: Product SKU to reserve
            bin_location: Bin code
            qty: Quantity to reserve
            reference: Reference for the reservation (order number)
            user: User triggering the reservation

        Raises:
            InventoryUnavailableException: If inventory cannot be reserved
        """

    @abstractmethod
    def release(self, sku: str, bin_location: str, qty: int, reference: str, user=None, reason: str = "") -> None:
        """
        Release a reservation.

        Raises:
            ConflictException: If there is no stock record to release against
        """

    @abstractmethod
    def deduct(self, sku: str, bin_location: str, qty: int, reference: str, user=None) -> None:
        """
        Consume a reservation and the matching on-hand stock.

        Raises:
            ConflictException: If the reservation does not cover ``qty``
        """


class WarehouseInventoryAdapter(InventoryAdapterInterface):
    """Inventory backed by the ``warehouse`` app's StockService."""

    def __init__(self, stock_service: StockService = None):
        self.stock_service = stock_service or StockService()

    def available(self, sku, bin_location):
        return self.stock_service.get_available(sku, bin_location)

    def reserve(self, sku, bin_location, qty, reference, user=None):
        unit = self.stock_service.reserve_stock(sku, bin_location, qty, reference=reference, user=user)
        if unit is None:
            raise InventoryUnavailableException(
                sku, bin_location, qty, self.stock_service.get_available(sku, bin_location)
            )
        logger.info(f"Reserved {qty} x {sku} at {bin_location} for {reference}")

    def release(self, sku, bin_location, qty, reference, user=None, reason=""):
        try:
            self.stock_service.release_reservation(
                sku, bin_location, qty, reference=reference, user=user, reason=reason
            )
        except InventoryUnit.DoesNotExist:
            raise ConflictException(
                f"No inventory record for SKU {sku} at {bin_location} to release {qty} for {reference}",
                "INVENTORY_RECORD_MISSING",
                {'sku': sku, 'bin_location': bin_location, 'quantity': qty},
            )
        logger.info(f"Released {qty} x {sku} at {bin_location} for {reference}")

    def deduct(self, sku, bin_location, qty, reference, user=None):
        try:
            self.stock_service.deduct_stock(sku, bin_location, qty, reference=reference, user=user)
        except ValueError as exc:
            raise ConflictException(str(exc), "INVENTORY_DEDUCTION_FAILED", {
                'sku': sku, 'bin_location': bin_location, 'quantity': qty,
            })
        logger.info(f"Deducted {qty} x {sku} at {bin_location} for {reference}")
