import django_filters
from django.db.models import Q
from .models import Lab


class LabFilter(django_filters.FilterSet):
    q = django_filters.CharFilter(method='filter_search')
    order_id = django_filters.CharFilter(field_name='order__order_id', lookup_expr='iexact')
    ordering = django_filters.OrderingFilter(
        fields=(
            ('created_at', 'created_at'),
            ('lab_send_date', 'lab_send_date'),
            ('status', 'status'),
        )
    )

    class Meta:
        model = Lab
        fields = ['order', 'order_item', 'status']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(sample_number__icontains=value) |
            Q(lab_send_number__icontains=value) |
            Q(remarks__icontains=value) |
            Q(order__order_id__icontains=value)
        )
