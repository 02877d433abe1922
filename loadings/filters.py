import django_filters

from .models import ClientLoading


class ClientLoadingFilter(django_filters.FilterSet):
    client = django_filters.UUIDFilter(field_name='client_id')

    class Meta:
        model = ClientLoading
        fields = ['client']
