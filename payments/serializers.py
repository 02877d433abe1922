import re
from decimal import Decimal

from rest_framework import serializers

from charges.models import PaymentMode
from core.uploads import validate_document
from loadings.models import ClientLoading

from .models import ClientPayment, EmployeePayment, VendorPayment, VendorSource

SALARY_MONTH_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


class PaymentModeField(serializers.CharField):
    default_error_messages = {
        'invalid_mode': 'Invalid payment mode',
    }

    def to_internal_value(self, data):
        value = super().to_internal_value(data).strip().upper()
        if value not in PaymentMode.values:
            self.fail('invalid_mode')
        return value


def _amount_field():
    return serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal('0.01'),
        error_messages={
            'required': 'Valid positive amount is required',
            'invalid': 'Invalid amount',
            'min_value': 'Invalid amount',
        }
    )


def _date_field():
    return serializers.DateTimeField(error_messages={
        'required': 'date is required',
        'invalid': 'Invalid date',
    })


# =============================================================================
# CLIENT PAYMENTS
# =============================================================================

class ClientPaymentCreateSerializer(serializers.Serializer):
    client_loading = serializers.PrimaryKeyRelatedField(
        queryset=ClientLoading.objects.all(),
        error_messages={'required': 'Missing required fields', 'does_not_exist': 'Client loading not found'},
    )
    client_name = serializers.CharField(max_length=150, error_messages={'required': 'Missing required fields'})
    date = _date_field()
    amount = _amount_field()
    payment_mode = PaymentModeField(required=False, default=PaymentMode.CASH)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True)
    image = serializers.FileField(required=False, allow_null=True, validators=[validate_document])
    is_installment = serializers.BooleanField(required=False, default=False)
    installments = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    installment_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class ClientPaymentSerializer(serializers.ModelSerializer):
    loading_client_name = serializers.CharField(source='client_loading.client_name', read_only=True, allow_null=True)
    village = serializers.CharField(source='client_loading.village', read_only=True, allow_null=True)
    bill_no = serializers.CharField(source='client_loading.bill_no', read_only=True, allow_null=True)
    invoice_no = serializers.SerializerMethodField()

    class Meta:
        model = ClientPayment
        fields = [
            'id', 'client_loading', 'client_name', 'date', 'amount', 'payment_mode',
            'reference', 'image', 'is_installment', 'installments', 'installment_number',
            'loading_client_name', 'village', 'bill_no', 'invoice_no', 'created_at',
        ]
        read_only_fields = fields

    def get_invoice_no(self, obj):
        invoice = getattr(obj, 'invoice', None)
        return invoice.invoice_no if invoice is not None else None


# =============================================================================
# VENDOR PAYMENTS
# =============================================================================

class VendorPaymentCreateSerializer(serializers.Serializer):
    source = serializers.ChoiceField(
        choices=VendorSource.choices,
        error_messages={
            'required': "source is required and must be 'farmer' or 'agent'",
            'invalid_choice': "source is required and must be 'farmer' or 'agent'",
        }
    )
    source_record_id = serializers.UUIDField(required=False, allow_null=True)
    bill_no = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    vendor_name = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True)
    date = serializers.DateTimeField(error_messages={
        'required': 'date is required',
        'invalid': 'Invalid date format',
    })
    amount = _amount_field()
    payment_mode = PaymentModeField(required=False, default=PaymentMode.CASH)
    reference_no = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    payment_ref = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    account_number = serializers.CharField(max_length=30, required=False, allow_blank=True, allow_null=True)
    ifsc = serializers.CharField(max_length=11, required=False, allow_blank=True, allow_null=True)
    bank_name = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    bank_address = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    payment_details = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    is_installment = serializers.BooleanField(required=False, default=False)
    installments = serializers.IntegerField(required=False, allow_null=True)
    installment_number = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):
        for field in ('vendor_name', 'reference_no', 'payment_ref', 'account_number',
                      'ifsc', 'bank_name', 'bank_address', 'payment_details', 'bill_no'):
            attrs[field] = (attrs.get(field) or '').strip()
        attrs['ifsc'] = attrs['ifsc'].upper()

        if attrs['is_installment']:
            installments = attrs.get('installments') or 0
            installment_number = attrs.get('installment_number') or 0
            if installments <= 0 or installment_number <= 0:
                raise serializers.ValidationError(
                    "installments and installment_number are required when is_installment=true"
                )
            if installment_number > installments:
                raise serializers.ValidationError("installment_number cannot exceed total installments")
        else:
            attrs['installments'] = None
            attrs['installment_number'] = None
        return attrs


class VendorInvoiceSummarySerializer(serializers.Serializer):
    invoice_no = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    is_finalized = serializers.BooleanField()


class VendorPaymentSerializer(serializers.ModelSerializer):
    vendor_invoice = serializers.SerializerMethodField()

    class Meta:
        model = VendorPayment
        fields = [
            'id', 'vendor_id', 'vendor_key', 'vendor_name', 'source', 'source_record_id',
            'date', 'amount', 'payment_mode', 'reference_no', 'payment_ref',
            'account_number', 'ifsc', 'bank_name', 'bank_address', 'payment_details',
            'is_installment', 'installments', 'installment_number', 'vendor_invoice', 'created_at',
        ]
        read_only_fields = fields

    def get_vendor_invoice(self, obj):
        invoice = getattr(obj, 'invoice', None)
        if invoice is None:
            return None
        return VendorInvoiceSummarySerializer(invoice).data


# =============================================================================
# EMPLOYEE PAYMENTS
# =============================================================================

class EmployeePaymentCreateSerializer(serializers.Serializer):
    employee = serializers.UUIDField(error_messages={'required': 'Missing required fields'})
    employee_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    salary_month = serializers.CharField(error_messages={'required': 'Missing required fields'})
    date = serializers.DateTimeField(error_messages={
        'required': 'Missing required fields',
        'invalid': 'Invalid payment date',
    })
    amount = _amount_field()
    payment_mode = PaymentModeField(error_messages={'required': 'Missing required fields'})
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)

    def validate_salary_month(self, value):
        value = value.strip()
        if not SALARY_MONTH_RE.match(value):
            raise serializers.ValidationError("Invalid salary month format. Expected YYYY-MM")
        return value

    def validate(self, attrs):
        attrs['reference'] = (attrs.get('reference') or '').strip()
        if attrs['payment_mode'] != PaymentMode.CASH and not attrs['reference']:
            raise serializers.ValidationError({'reference': 'Reference is required for non-cash payments'})
        return attrs


class EmployeePaymentSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='employee.full_name', read_only=True)
    designation = serializers.CharField(source='employee.designation', read_only=True)

    class Meta:
        model = EmployeePayment
        fields = [
            'id', 'employee', 'employee_name', 'full_name', 'designation', 'salary_month',
            'date', 'amount', 'payment_mode', 'reference', 'created_at',
        ]
        read_only_fields = fields
