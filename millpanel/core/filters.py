import django_filters
from django.db.models import Q

from .models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    start_date = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    end_date = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = AuditLog
        fields = ['action', 'resource', 'resource_id', 'user', 'success', 'severity']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(username__icontains=value) |
            Q(object_name__icontains=value) |
            Q(resource_id__icontains=value)
        )
