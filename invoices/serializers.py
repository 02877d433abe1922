from rest_framework import serializers

from .models import ClientInvoice, VendorInvoice


class ClientInvoiceSerializer(serializers.ModelSerializer):
    payment_id = serializers.UUIDField(source='payment.id', read_only=True)

    class Meta:
        model = ClientInvoice
        fields = [
            'id', 'payment_id', 'invoice_no', 'invoice_date',
            'client_id_ref', 'client_name', 'bill_to',
            'hsn', 'description', 'gst_percent', 'taxable_value',
            'gst_amount', 'total_amount', 'is_finalized',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class VendorInvoiceSerializer(serializers.ModelSerializer):
    payment_id = serializers.UUIDField(source='payment.id', read_only=True)

    class Meta:
        model = VendorInvoice
        fields = [
            'id', 'payment_id', 'invoice_no', 'invoice_date',
            'vendor_id_ref', 'vendor_name', 'source', 'vendor_address',
            'source_record_id', 'hsn', 'description', 'gst_percent',
            'taxable_value', 'gst_amount', 'total_amount', 'is_finalized',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


def payment_summary(payment):
    return {
        'id': str(payment.pk),
        'amount': payment.amount,
        'date': payment.date,
        'payment_mode': payment.payment_mode,
    }
