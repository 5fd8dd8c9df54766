import django_filters
from django.db.models import IntegerField, Q
from django.db.models.functions import Cast, Substr
from .models import Order, ORDER_ID_PREFIX


class OrderOrderingFilter(django_filters.OrderingFilter):
    """?ordering=order_id sorts by the numeric part so ORD-100 follows ORD-99"""

    def filter(self, qs, value):
        if value and any(param.lstrip('-') == 'order_id' for param in value):
            qs = qs.annotate(order_number=Cast(Substr('order_id', len(ORDER_ID_PREFIX) + 1), IntegerField()))
        return super().filter(qs, value)


class OrderFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    start_date = django_filters.DateFilter(field_name='arrival_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='arrival_date', lookup_expr='lte')
    style_no = django_filters.CharFilter(field_name='style_no', lookup_expr='icontains')
    po_number = django_filters.CharFilter(field_name='po_number', lookup_expr='icontains')
    status = django_filters.CharFilter(method='filter_status')
    ordering = OrderOrderingFilter(
        fields=(
            ('created_at', 'created_at'),
            ('arrival_date', 'arrival_date'),
            ('delivery_date', 'delivery_date'),
            ('order_number', 'order_id'),
            ('party__name', 'party'),
        )
    )

    class Meta:
        model = Order
        fields = ['party', 'order_type']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(order_id__icontains=value) |
            Q(po_number__icontains=value) |
            Q(style_no__icontains=value) |
            Q(party__name__icontains=value)
        )

    def filter_status(self, queryset, name, value):
        """?status=not_set selects orders without a status"""
        if value == 'not_set':
            return queryset.filter(Q(status__isnull=True) | Q(status=''))
        return queryset.filter(status=value)
