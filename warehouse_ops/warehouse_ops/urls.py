"""
URL configuration for warehouse_ops project.

Every API endpoint lives under /api/; the app routers are mounted there and
/api/ itself lists what is available. The Django admin is at /admin/.
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods


@csrf_exempt
@require_http_methods(["GET"])
def api_root(request):
    """API root view with available endpoints."""
    return JsonResponse({
        'message': 'Warehouse Fulfillment API',
        'version': '1.0.0',
        'endpoints': {
            'order_fulfillment': {
                'orders': '/api/orders/',
                'my_orders': '/api/orders/mine/',
                'pick_tasks': '/api/pick-tasks/'
            },
            'warehouse': {
                'locations': '/api/locations/',
                'inventory': '/api/inventory/',
                'availability': '/api/inventory/availability/',
                'inventory_transactions': '/api/inventory-transactions/'
            },
            'documentation': '/api/docs/'
        }
    })


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api_root, name='api-root'),  # Exact match for /api/ (must be first)
    path('api/', include('order_fulfillment.urls')),
    path('api/', include('warehouse.urls')),

    # Browsable API login
    path('api/docs/', include('rest_framework.urls')),
]
