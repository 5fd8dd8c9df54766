import django_filters
from django.db.models import Q
from .models import Party


class PartyFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    ordering = django_filters.OrderingFilter(fields=(('name', 'name'), ('created_at', 'created_at')))

    class Meta:
        model = Party
        fields = []

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(contact_name__icontains=value) |
            Q(contact_phone__icontains=value)
        )
