from rest_framework import serializers

from .models import Client, FishVariety


class FishVarietySerializer(serializers.ModelSerializer):
    class Meta:
        model = FishVariety
        fields = ['id', 'code', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_code(self, value):
        code = value.strip().upper()
        if not code:
            raise serializers.ValidationError("Code is required")
        queryset = FishVariety.objects.filter(code=code)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("Variety code already exists")
        return code


class ClientSerializer(serializers.ModelSerializer):
    """Client party master record."""
    gst_type_display = serializers.CharField(source='get_gst_type_display', read_only=True)
    balance_type_display = serializers.CharField(source='get_balance_type_display', read_only=True)

    class Meta:
        model = Client
        fields = [
            'id', 'party_name', 'party_group', 'phone', 'email',
            'gst_type', 'gst_type_display', 'gstin', 'state', 'billing_address',
            'opening_balance', 'balance_type', 'balance_type_display', 'credit_limit',
            'reference_no', 'account_number', 'ifsc', 'bank_name', 'bank_address',
            'payment_details', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'opening_balance': {
                'required': True,
                'error_messages': {'invalid': 'openingBalance must be a valid number'},
            },
        }

    def validate_ifsc(self, value):
        return (value or '').strip().upper()

    def validate_gstin(self, value):
        return (value or '').strip().upper()
