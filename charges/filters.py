import django_filters

from .models import DispatchCharge, PackingAmount
from .serializers import normalize_source_type


class LinkedChargeFilter(django_filters.FilterSet):
    """``?source_type=&source_record_id=`` on rows linked to a loading."""

    source_type = django_filters.CharFilter(method='filter_source_type')
    source_record_id = django_filters.UUIDFilter()

    def filter_source_type(self, queryset, name, value):
        normalized = normalize_source_type(value)
        if normalized is None:
            return queryset
        return queryset.filter(source_type=normalized)


class DispatchChargeFilter(LinkedChargeFilter):
    class Meta:
        model = DispatchCharge
        fields = ['source_type', 'source_record_id', 'type']


class PackingAmountFilter(LinkedChargeFilter):
    class Meta:
        model = PackingAmount
        fields = ['source_type', 'source_record_id', 'mode', 'payment_mode']
