from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from warehouse.services.stock_service import StockService
from .models import InventoryTransaction, InventoryUnit, StorageLocation
from .serializers import (
    AvailabilityQuerySerializer,
    InventoryTransactionSerializer,
    InventoryUnitSerializer,
    StorageLocationSerializer,
)


class StorageLocationViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = StorageLocation.objects.all()
    serializer_class = StorageLocationSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["code", "name"]
    filterset_fields = ["zone", "is_active"]
    ordering = ["code"]


class InventoryUnitViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = InventoryUnit.objects.select_related("product", "location").all()
    serializer_class = InventoryUnitSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["product__sku", "product__name", "location__code"]
    filterset_fields = ["location", "product"]
    ordering_fields = ["quantity", "reserved_quantity", "last_movement_date"]
    ordering = ["location__code", "product__sku"]

    @action(detail=False, methods=["get"])
    def availability(self, request):
        """Available quantity of a SKU at a bin."""
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        sku = query.validated_data["sku"]
        location_code = query.validated_data["bin"]
        available = StockService().get_available(sku, location_code)
        return Response({"success": True, "data": {"sku": sku, "bin": location_code, "available": available}})


class InventoryTransactionViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = InventoryTransaction.objects.select_related("product", "location", "user").all()
    serializer_class = InventoryTransactionSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["transaction_type", "reference", "product", "location"]
    ordering = ["-created_at", "-id"]
