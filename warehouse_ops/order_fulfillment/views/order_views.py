"""
Order views for Order Fulfillment.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Order
from ..services import get_services
from ..serializers import (
    OrderCreateSerializer, OrderListSerializer, OrderDetailSerializer,
    OrderTransitionSerializer, PackingSkipSerializer, PackingUndoSerializer,
    PackingVerifySerializer, PickTaskSerializer, ReasonSerializer
)


class OrderViewSet(viewsets.GenericViewSet):
    """
    ViewSet for orders.

    Listing is the work queue; every state change goes through the
    fulfillment services, which raise typed errors rendered by the project
    exception handler.
    """

    queryset = Order.objects.all()
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == 'create':
            return OrderCreateSerializer
        elif self.action in ['list', 'mine']:
            return OrderListSerializer
        elif self.action == 'transition':
            return OrderTransitionSerializer
        elif self.action in ['unclaim', 'unclaim_packing', 'cancel']:
            return ReasonSerializer
        elif self.action == 'verify_item':
            return PackingVerifySerializer
        elif self.action == 'skip_item':
            return PackingSkipSerializer
        elif self.action == 'undo_verification':
            return PackingUndoSerializer
        else:
            return OrderDetailSerializer

    @property
    def services(self):
        return get_services()

    def _detail(self, order, status_code=status.HTTP_200_OK):
        order = self.services.orders.get_order(order.pk)
        return Response({
            'success': True,
            'data': OrderDetailSerializer(order, context=self.get_serializer_context()).data
        }, status=status_code)

    def _payload(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def list(self, request):
        """Order queue filtered by status, priority and picker."""
        params = request.query_params
        queue = self.services.orders.get_order_queue(
            filters=params,
            page=params.get('page', 1),
            limit=params.get('limit'),
        )
        serializer = OrderListSerializer(queue['orders'], many=True, context=self.get_serializer_context())
        return Response({
            'success': True,
            'data': {
                'orders': serializer.data,
                'total': queue['total'],
                'page': queue['page'],
                'limit': queue['limit'],
            }
        })

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = serializer.save()
        return self._detail(order, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        order = self.services.orders.get_order(pk)
        return Response({
            'success': True,
            'data': OrderDetailSerializer(order, context=self.get_serializer_context()).data
        })

    @action(detail=True, methods=['post'])
    def claim(self, request, pk=None):
        """Claim a PENDING order for picking."""
        order = self.services.claims.claim_order(pk, request.user)
        return self._detail(order)

    @action(detail=True, methods=['post'])
    def unclaim(self, request, pk=None):
        """Hand a PICKING order back to the queue."""
        data = self._payload(request)
        order = self.services.claims.unclaim_order(pk, request.user, data['reason'])
        return self._detail(order)

    @action(detail=True, methods=['post'], url_path='unclaim-packing')
    def unclaim_packing(self, request, pk=None):
        """Hand a PACKING order back to the packing queue."""
        data = self._payload(request)
        order = self.services.claims.unclaim_packing(pk, request.user, data['reason'])
        return self._detail(order)

    @action(detail=True, methods=['post'])
    def transition(self, request, pk=None):
        """Move the order to another status."""
        data = self._payload(request)
        order = self.services.orders.update_status(pk, data['status'], request.user)
        return self._detail(order)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Cancel the order and release its reservations."""
        data = self._payload(request)
        order = self.services.orders.cancel_order(pk, request.user, data['reason'])
        return self._detail(order)

    @action(detail=True, methods=['get'])
    def progress(self, request, pk=None):
        """Pick task counts and picking percentage."""
        return Response({
            'success': True,
            'data': self.services.orders.get_picking_progress(pk)
        })

    @action(detail=True, methods=['get'], url_path='next-task')
    def next_task(self, request, pk=None):
        """Next PENDING pick task, or null when none is left."""
        self.services.orders.get_order(pk)
        task = self.services.picking.get_next_task(pk)
        return Response({
            'success': True,
            'data': PickTaskSerializer(task).data if task else None
        })

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """Orders the current user is picking."""
        orders = self.services.claims.get_picker_active_orders(request.user)
        serializer = OrderListSerializer(orders, many=True, context=self.get_serializer_context())
        return Response({
            'success': True,
            'data': serializer.data
        })

    @action(detail=True, methods=['post'], url_path='verify-item')
    def verify_item(self, request, pk=None):
        """Packer checks units of one line."""
        data = self._payload(request)
        item = self.services.packing.verify_item(pk, data['item_id'], request.user, data['quantity'])
        return self._detail(item.order)

    @action(detail=True, methods=['post'], url_path='skip-item')
    def skip_item(self, request, pk=None):
        """Packer sets a line aside with a reason."""
        data = self._payload(request)
        item = self.services.packing.skip_item(pk, data['item_id'], request.user, data['reason'])
        return self._detail(item.order)

    @action(detail=True, methods=['post'], url_path='undo-verification')
    def undo_verification(self, request, pk=None):
        """Packer takes back verified units of a line."""
        data = self._payload(request)
        item = self.services.packing.undo_verification(
            pk, data['item_id'], request.user, data['quantity'], data['reason']
        )
        return self._detail(item.order)
