"""
URL configuration for Order Fulfillment.

Provides API endpoints for the order queue, claiming, status changes and
pick tasks.
"""

from rest_framework.routers import SimpleRouter

from .views import OrderViewSet, PickTaskViewSet

router = SimpleRouter()
router.register(r'orders', OrderViewSet, basename='order')
router.register(r'pick-tasks', PickTaskViewSet, basename='pick-task')

urlpatterns = router.urls
