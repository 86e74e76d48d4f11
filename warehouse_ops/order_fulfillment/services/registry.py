"""
Wiring of the fulfillment services.

One FulfillmentServices instance is built when the app is ready and shared
by every request; tests build their own with whatever adapters they need.
"""

from django.apps import apps
from django.utils.module_loading import import_string

from ..conf import get_setting
from .claim_service import ClaimService
from .order_service import OrderService
from .packing_service import PackingService
from .picking_service import PickingService


class FulfillmentServices:
    """Order, picking, claim and packing services sharing one catalog and inventory."""

    def __init__(self, catalog, inventory):
        self.catalog = catalog
        self.inventory = inventory
        self.orders = OrderService(catalog=catalog, inventory=inventory)
        self.picking = PickingService(catalog=catalog)
        self.claims = ClaimService(picking=self.picking)
        self.packing = PackingService()

    @classmethod
    def from_settings(cls):
        catalog = import_string(get_setting('CATALOG_ADAPTER'))()
        inventory = import_string(get_setting('INVENTORY_ADAPTER'))()
        return cls(catalog=catalog, inventory=inventory)


def get_services() -> FulfillmentServices:
    return apps.get_app_config('order_fulfillment').services
