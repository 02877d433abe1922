"""
Serializers for loadings.

Create serializers validate the request shape only; weights, prices and
totals are computed by ``LoadingService``.
"""

from rest_framework import serializers

from fleet.models import Vehicle
from parties.models import Client, FishVariety

from .models import (
    AgentLoading,
    ClientLoading,
    FarmerLoading,
    TripStatus,
)
from .services import agent_display_grand_total, dispatch_breakdown


def _required(message):
    return {'required': message, 'blank': message, 'null': message}


# =============================================================================
# INPUT SERIALIZERS
# =============================================================================

class LoadingItemInputSerializer(serializers.Serializer):
    variety_code = serializers.SlugRelatedField(
        source='variety',
        slug_field='code',
        queryset=FishVariety.objects.all(),
        error_messages={
            **_required('varietyCode is required'),
            'does_not_exist': 'Unknown fish variety: {value}',
        },
    )
    no_trays = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, default=0)
    loose = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    price_per_kg = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        default=0,
        min_value=0,
    )

    def to_internal_value(self, data):
        if isinstance(data, dict) and isinstance(data.get('variety_code'), str):
            data = {**data, 'variety_code': data['variety_code'].strip().upper()}
        return super().to_internal_value(data)


class LoadingCreateSerializer(serializers.Serializer):
    """Fields every loading kind accepts."""
    bill_no = serializers.CharField(max_length=50, error_messages=_required('Bill number is required'))
    fish_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    village = serializers.CharField(max_length=150, required=False, allow_blank=True)
    date = serializers.DateTimeField(
        error_messages={
            **_required('Invalid date provided'),
            'invalid': 'Invalid date provided',
        }
    )
    vehicle = serializers.PrimaryKeyRelatedField(
        queryset=Vehicle.objects.all(),
        required=False,
        allow_null=True,
    )
    vehicle_no = serializers.CharField(max_length=20, required=False, allow_blank=True)
    items = LoadingItemInputSerializer(many=True, allow_empty=False, error_messages={
        **_required('At least one item is required'),
        'empty': 'At least one item is required',
    })

    model = None

    def validate_bill_no(self, value):
        value = value.strip()
        if self.model is not None and self.model.objects.filter(bill_no=value).exists():
            raise serializers.ValidationError("Bill number already exists")
        return value


class FarmerLoadingCreateSerializer(LoadingCreateSerializer):
    model = FarmerLoading

    farmer_name = serializers.CharField(max_length=150, error_messages=_required('Farmer name is required'))
    use_vehicle = serializers.BooleanField(required=False, default=False)


class AgentLoadingCreateSerializer(LoadingCreateSerializer):
    model = AgentLoading

    agent_name = serializers.CharField(max_length=150, error_messages=_required('Agent name is required'))


class ClientLoadingCreateSerializer(LoadingCreateSerializer):
    model = ClientLoading

    client_name = serializers.CharField(max_length=150, error_messages=_required('Client name is required'))
    client = serializers.PrimaryKeyRelatedField(
        queryset=Client.objects.all(),
        required=False,
        allow_null=True,
    )


class TripStatusSerializer(serializers.Serializer):
    trip_status = serializers.ChoiceField(choices=TripStatus.choices)


# =============================================================================
# OUTPUT SERIALIZERS
# =============================================================================

class LoadingItemSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    variety_code = serializers.CharField(source='variety_id', read_only=True)
    variety_name = serializers.CharField(source='variety.name', read_only=True)
    no_trays = serializers.IntegerField(read_only=True)
    tray_kgs = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    loose = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    total_kgs = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    price_per_kg = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


LOADING_FIELDS = [
    'id', 'bill_no', 'fish_code', 'village', 'date',
    'vehicle', 'vehicle_no', 'vehicle_number',
    'trip_status', 'started_at', 'completed_at',
    'total_trays', 'total_loose_kgs', 'total_tray_kgs', 'total_kgs',
    'total_price', 'dispatch_charges_total', 'packing_amount_total', 'grand_total',
    'dispatch_breakdown', 'items', 'created_by', 'created_at', 'updated_at',
]


class LoadingSerializer(serializers.ModelSerializer):
    vehicle_number = serializers.CharField(read_only=True)
    dispatch_breakdown = serializers.SerializerMethodField()
    items = LoadingItemSerializer(many=True, read_only=True)

    def get_dispatch_breakdown(self, obj):
        return dispatch_breakdown(obj)


class FarmerLoadingSerializer(LoadingSerializer):
    class Meta:
        model = FarmerLoading
        fields = ['farmer_name'] + LOADING_FIELDS
        read_only_fields = fields


class AgentLoadingSerializer(LoadingSerializer):
    """Grand total shown with dispatch charges and packing amounts added."""

    grand_total = serializers.SerializerMethodField()

    class Meta:
        model = AgentLoading
        fields = ['agent_name'] + LOADING_FIELDS
        read_only_fields = fields

    def get_grand_total(self, obj):
        return str(agent_display_grand_total(obj))


class ClientLoadingSerializer(LoadingSerializer):
    client_party_name = serializers.CharField(source='client.party_name', read_only=True, allow_null=True)

    class Meta:
        model = ClientLoading
        fields = ['client_name', 'client', 'client_party_name'] + LOADING_FIELDS
        read_only_fields = fields
