import django_filters
from django.db.models import Q
from .models import Fabric


class FabricFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    quality_name = django_filters.CharFilter(field_name='quality_name', lookup_expr='iexact')
    weaver = django_filters.CharFilter(field_name='weaver', lookup_expr='iexact')
    weaver_quality_name = django_filters.CharFilter(field_name='weaver_quality_name', lookup_expr='iexact')
    ordering = django_filters.OrderingFilter(
        fields=(
            ('quality_code', 'quality_code'),
            ('quality_name', 'quality_name'),
            ('weaver', 'weaver'),
            ('created_at', 'created_at'),
        )
    )

    class Meta:
        model = Fabric
        fields = []

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(quality_code__icontains=value) |
            Q(quality_name__icontains=value) |
            Q(weaver__icontains=value) |
            Q(weaver_quality_name__icontains=value) |
            Q(danier__icontains=value)
        )
