from decimal import Decimal

from rest_framework import serializers

from loadings.models import get_loading_model

from .models import DispatchCharge, DispatchChargeType, PackingAmount, PackingMode, PaymentMode

SOURCE_TYPE_ERROR = "source_type is required and must be FARMER, AGENT, or CLIENT"
POSITIVE_ERROR = "workers, temperature, and total_amount must be positive numbers"


def normalize_source_type(value):
    """Canonical source type; ``FORMER`` is accepted for farmer."""
    model = get_loading_model(value)
    if model is None:
        return None
    return model.LOAD_TYPE.value


class SourceTypeField(serializers.CharField):
    def to_internal_value(self, data):
        value = normalize_source_type(super().to_internal_value(data))
        if value is None:
            self.fail('invalid')
        return value


class DispatchChargeCreateSerializer(serializers.Serializer):
    source_type = SourceTypeField(error_messages={
        'required': SOURCE_TYPE_ERROR, 'blank': SOURCE_TYPE_ERROR,
        'null': SOURCE_TYPE_ERROR, 'invalid': SOURCE_TYPE_ERROR,
    })
    source_record_id = serializers.UUIDField(error_messages={
        'required': 'source_record_id is required',
        'null': 'source_record_id is required',
    })
    type = serializers.ChoiceField(
        choices=DispatchChargeType.choices,
        error_messages={
            'required': 'Invalid type. Allowed: ICE_COOLING, TRANSPORT, OTHER, PACKING',
            'invalid_choice': 'Invalid type. Allowed: ICE_COOLING, TRANSPORT, OTHER, PACKING',
        }
    )
    amount = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal('0.01'),
        error_messages={
            'required': 'Valid positive amount is required',
            'invalid': 'Valid positive amount is required',
            'min_value': 'Valid positive amount is required',
        }
    )
    label = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        attrs['label'] = (attrs.get('label') or '').strip()
        if attrs['type'] in (DispatchChargeType.OTHER, DispatchChargeType.PACKING) and not attrs['label']:
            raise serializers.ValidationError({'label': 'label is required when type is OTHER or PACKING'})
        return attrs


class DispatchChargeSerializer(serializers.ModelSerializer):
    created_by_name = serializers.CharField(source='created_by.display_name', read_only=True, allow_null=True)

    class Meta:
        model = DispatchCharge
        fields = [
            'id', 'source_type', 'source_record_id', 'type', 'amount',
            'label', 'notes', 'created_by', 'created_by_name', 'created_at',
        ]
        read_only_fields = fields


class PackingAmountCreateSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(
        choices=PackingMode.choices,
        error_messages={
            'required': "Invalid or missing mode. Must be 'loading' or 'unloading'",
            'invalid_choice': "Invalid or missing mode. Must be 'loading' or 'unloading'",
        }
    )
    workers = serializers.IntegerField(min_value=1, error_messages={
        'required': POSITIVE_ERROR, 'invalid': POSITIVE_ERROR, 'min_value': POSITIVE_ERROR,
    })
    temperature = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=Decimal('0.01'), error_messages={
        'required': POSITIVE_ERROR, 'invalid': POSITIVE_ERROR, 'min_value': POSITIVE_ERROR,
    })
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'), error_messages={
        'required': POSITIVE_ERROR, 'invalid': POSITIVE_ERROR, 'min_value': POSITIVE_ERROR,
    })
    payment_mode = serializers.CharField(required=False, default=PaymentMode.CASH)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    source_type = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    source_record_id = serializers.UUIDField(required=False, allow_null=True)

    def validate_payment_mode(self, value):
        value = (value or '').strip().upper()
        if value not in PaymentMode.values:
            raise serializers.ValidationError("Invalid payment_mode. Allowed: CASH, AC, UPI, CHEQUE")
        return value

    def validate(self, attrs):
        attrs['reference'] = (attrs.get('reference') or '').strip()
        if attrs['payment_mode'] != PaymentMode.CASH and not attrs['reference']:
            raise serializers.ValidationError({'reference': 'reference is required for non-CASH payments'})

        source_type = attrs.get('source_type')
        source_record_id = attrs.get('source_record_id')
        if source_type or source_record_id:
            normalized = normalize_source_type(source_type)
            if normalized is None:
                raise serializers.ValidationError(
                    {'source_type': 'Invalid source_type. Must be FARMER, AGENT, or CLIENT'}
                )
            if not source_record_id:
                raise serializers.ValidationError(
                    {'source_record_id': 'source_record_id required when source_type is provided'}
                )
            attrs['source_type'] = normalized
        else:
            attrs['source_type'] = ''
        return attrs


class PackingAmountSerializer(serializers.ModelSerializer):
    """Packing payment with the party and vehicle of its linked loading."""

    party_name = serializers.SerializerMethodField()
    vehicle_no = serializers.SerializerMethodField()
    created_by_name = serializers.CharField(source='created_by.display_name', read_only=True, allow_null=True)

    class Meta:
        model = PackingAmount
        fields = [
            'id', 'bill_no', 'mode', 'workers', 'temperature', 'total_amount',
            'payment_mode', 'reference', 'source_type', 'source_record_id',
            'party_name', 'vehicle_no', 'created_by', 'created_by_name', 'created_at',
        ]
        read_only_fields = fields

    def get_party_name(self, obj):
        loading = obj.loading
        return loading.party_name if loading is not None else None

    def get_vehicle_no(self, obj):
        loading = obj.loading
        if loading is None:
            return None
        return loading.vehicle_number or None
