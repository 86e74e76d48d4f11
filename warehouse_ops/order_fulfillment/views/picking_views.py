"""
Pick task views for Order Fulfillment.
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import PickTask
from ..services import get_services
from ..serializers import (
    PickTaskSerializer, PickQuantitySerializer, PickScanSerializer,
    SkipTaskSerializer, UndoPickSerializer
)


class PickTaskViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for pick tasks.

    Reads are plain; every write is made by the acting picker through
    PickingService.
    """

    queryset = PickTask.objects.select_related('order', 'picker').all()
    permission_classes = [IsAuthenticated]
    filterset_fields = ['order', 'status', 'picker']

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == 'quantity':
            return PickQuantitySerializer
        elif self.action == 'pick':
            return PickScanSerializer
        elif self.action == 'skip':
            return SkipTaskSerializer
        elif self.action == 'undo':
            return UndoPickSerializer
        else:
            return PickTaskSerializer

    @property
    def picking(self):
        return get_services().picking

    def _payload(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def _task(self, task):
        return Response({
            'success': True,
            'data': PickTaskSerializer(task, context=self.get_serializer_context()).data
        })

    @action(detail=True, methods=['post'])
    def start(self, request, pk=None):
        return self._task(self.picking.start_task(pk, request.user))

    @action(detail=True, methods=['post'])
    def quantity(self, request, pk=None):
        """Set the picked quantity to an absolute value."""
        data = self._payload(request)
        return self._task(self.picking.update_picked_quantity(pk, data['quantity'], request.user))

    @action(detail=True, methods=['post'])
    def pick(self, request, pk=None):
        """Record a scan at the bin."""
        data = self._payload(request)
        task = self.picking.record_pick(
            pk, request.user,
            scanned_code=data['scanned_code'],
            bin_location=data['bin_location'],
            quantity=data['quantity'],
        )
        return self._task(task)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        return self._task(self.picking.complete_task(pk, request.user))

    @action(detail=True, methods=['post'])
    def skip(self, request, pk=None):
        data = self._payload(request)
        return self._task(self.picking.skip_task(pk, request.user, data['reason']))

    @action(detail=True, methods=['post'], url_path='revert-skip')
    def revert_skip(self, request, pk=None):
        return self._task(self.picking.revert_skip(pk, request.user))

    @action(detail=True, methods=['post'])
    def undo(self, request, pk=None):
        data = self._payload(request)
        return self._task(self.picking.undo_pick(pk, request.user, data['reason']))
