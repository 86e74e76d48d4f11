from rest_framework.routers import SimpleRouter

from .views import InventoryTransactionViewSet, InventoryUnitViewSet, StorageLocationViewSet

router = SimpleRouter()
router.register(r"locations", StorageLocationViewSet, basename="location")
router.register(r"inventory", InventoryUnitViewSet, basename="inventory")
router.register(r"inventory-transactions", InventoryTransactionViewSet, basename="inventory-transaction")

urlpatterns = router.urls
