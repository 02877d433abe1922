from decimal import Decimal

from rest_framework import serializers

from loadings.serializers import LoadingItemSerializer
from parties.models import FishVariety

MISSING = 'Missing required fields'


class VarietyCodeField(serializers.SlugRelatedField):
    def __init__(self, **kwargs):
        kwargs.setdefault('slug_field', 'code')
        kwargs.setdefault('queryset', FishVariety.objects.all())
        kwargs.setdefault('error_messages', {
            'required': 'variety_code is required',
            'null': 'variety_code is required',
            'does_not_exist': 'Unknown fish variety: {value}',
        })
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = data.strip().upper()
        return super().to_internal_value(data)


class VendorItemAddSerializer(serializers.Serializer):
    source = serializers.ChoiceField(
        choices=['farmer', 'agent'],
        error_messages={'required': MISSING, 'invalid_choice': "source must be 'farmer' or 'agent'"},
    )
    loading_id = serializers.UUIDField(error_messages={'required': MISSING})
    variety_code = VarietyCodeField(source='variety')
    no_trays = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, default=0)
    loose = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    price_per_kg = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)


class VendorItemUpdateSerializer(serializers.Serializer):
    no_trays = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    loose = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    price_per_kg = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class ClientItemAddSerializer(serializers.Serializer):
    loading_id = serializers.UUIDField(error_messages={'required': 'loading_id is required'})
    variety_code = VarietyCodeField(source='variety')
    no_trays = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, default=0)
    loose = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)


class ClientItemUpdateSerializer(serializers.Serializer):
    price_per_kg = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, min_value=Decimal('0')
    )
    total_price = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, min_value=Decimal('0')
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("price_per_kg or total_price is required")
        return attrs


class UpdateTotalSerializer(serializers.Serializer):
    loading_id = serializers.UUIDField(error_messages={'required': 'loading_id required'})


class BillItemSerializer(LoadingItemSerializer):
    loading_id = serializers.UUIDField(read_only=True)
    bill_no = serializers.CharField(source='loading.bill_no', read_only=True)
