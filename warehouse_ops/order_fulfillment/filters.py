"""
Query filters for the order queue.
"""

import django_filters
from django.contrib.auth import get_user_model

from .models import Order, OrderStatus, OrderPriority


def _workers(request):
    return get_user_model().objects.all()


class OrderQueueFilter(django_filters.FilterSet):
    """
    Filters accepted by the order queue.

    Asking for PENDING orders without naming a picker returns only orders
    nobody has claimed.
    """

    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    priority = django_filters.ChoiceFilter(choices=OrderPriority.choices)
    picker = django_filters.ModelChoiceFilter(queryset=_workers)

    class Meta:
        model = Order
        fields = ['status', 'priority', 'picker']

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        data = self.form.cleaned_data
        if data.get('status') == OrderStatus.PENDING and not data.get('picker'):
            queryset = queryset.filter(picker__isnull=True)
        return queryset
