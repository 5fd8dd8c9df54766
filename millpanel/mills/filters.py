import django_filters
from django.db.models import Q
from .models import Mill, MillInput, MillOutput, Dispatch


class MillFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Mill
        fields = ['is_active']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(contact_person__icontains=value) |
            Q(contact_phone__icontains=value)
        )


class MillInputFilter(django_filters.FilterSet):
    order_id = django_filters.CharFilter(field_name='order__order_id', lookup_expr='iexact')
    start_date = django_filters.DateFilter(field_name='mill_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='mill_date', lookup_expr='lte')
    chalan_no = django_filters.CharFilter(field_name='chalan_no', lookup_expr='icontains')

    class Meta:
        model = MillInput
        fields = ['mill', 'quality']


class MillOutputFilter(django_filters.FilterSet):
    order_id = django_filters.CharFilter(field_name='order__order_id', lookup_expr='iexact')
    start_date = django_filters.DateFilter(field_name='recd_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='recd_date', lookup_expr='lte')
    mill_bill_no = django_filters.CharFilter(field_name='mill_bill_no', lookup_expr='icontains')

    class Meta:
        model = MillOutput
        fields = ['quality']


class DispatchFilter(django_filters.FilterSet):
    order_id = django_filters.CharFilter(field_name='order__order_id', lookup_expr='iexact')
    start_date = django_filters.DateFilter(field_name='dispatch_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='dispatch_date', lookup_expr='lte')
    bill_no = django_filters.CharFilter(field_name='bill_no', lookup_expr='icontains')

    class Meta:
        model = Dispatch
        fields = []
