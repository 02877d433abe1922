"""
Document numbering and invoice services.

Invoice numbers run per financial year (April to March):

- Client invoices: RS-INV-{25-26}-0001
- Vendor invoices: RS-V-{25-26}-0001

Packing bills run per calendar year (RS-PACKING-{yy}-0001) and employee
codes never reset (RS-EMP-0001). A previewed number is not reserved; only
``reserve`` advances a counter, and a reserved number is never reused.
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .models import ClientInvoice, DocumentCounter, InvoiceType, VendorInvoice

logger = logging.getLogger(__name__)

CLIENT_INVOICE_COUNTER = 'invoice.client'
VENDOR_INVOICE_COUNTER = 'invoice.vendor'
PACKING_COUNTER = 'packing'
EMPLOYEE_COUNTER = 'employee'

INVOICE_PREFIXES = {
    InvoiceType.CLIENT: 'RS-INV',
    InvoiceType.VENDOR: 'RS-V',
}
INVOICE_COUNTERS = {
    InvoiceType.CLIENT: CLIENT_INVOICE_COUNTER,
    InvoiceType.VENDOR: VENDOR_INVOICE_COUNTER,
}


class InvoiceError(ValueError):
    """Raised when an invoice cannot be saved."""
    pass


def financial_year(on=None):
    """``2025-2026`` for any date from April 2025 to March 2026."""
    on = on or timezone.localdate()
    if on.month >= 4:
        return f"{on.year}-{on.year + 1}"
    return f"{on.year - 1}-{on.year}"


def short_financial_year(fy):
    """``2025-2026`` -> ``25-26``."""
    return fy[2:]


# =============================================================================
# COUNTERS
# =============================================================================

class DocumentCounterService:

    @staticmethod
    def peek(key, period=''):
        """Value the next ``reserve`` call would return, without writing."""
        counter = DocumentCounter.objects.filter(key=key).first()
        if counter is None or counter.period != period:
            return 1
        return counter.value + 1

    @staticmethod
    @transaction.atomic
    def reserve(key, period=''):
        """Advance the counter and return the new value; restarts at 1 in a new period."""
        counter, _ = DocumentCounter.objects.select_for_update().get_or_create(
            key=key,
            defaults={'value': 0, 'period': period},
        )
        if counter.period != period:
            counter.value = 0
            counter.period = period
        counter.value += 1
        counter.save(update_fields=['value', 'period', 'updated_at'])
        return counter.value


def _invoice_number(invoice_type, seq, fy):
    return f"{INVOICE_PREFIXES[invoice_type]}-{short_financial_year(fy)}-{seq:04d}"


def next_invoice_number(invoice_type, reserve=False):
    """
    Preview (or reserve) the next invoice number for ``client`` or ``vendor``.

    Returns a dict with ``invoice_number``, ``type``, ``next_count`` and
    ``financial_year``.
    """
    fy = financial_year()
    key = INVOICE_COUNTERS[invoice_type]
    if reserve:
        seq = DocumentCounterService.reserve(key, fy)
        logger.info(f"Reserved {invoice_type} invoice number {seq} for FY {fy}")
    else:
        seq = DocumentCounterService.peek(key, fy)

    return {
        'invoice_number': _invoice_number(invoice_type, seq, fy),
        'type': invoice_type,
        'next_count': seq,
        'financial_year': fy,
    }


def next_packing_bill_number():
    """Reserve ``RS-PACKING-{yy}-{seq:04d}``; the sequence restarts each calendar year."""
    yy = f"{timezone.localdate().year % 100:02d}"
    seq = DocumentCounterService.reserve(PACKING_COUNTER, yy)
    return f"RS-PACKING-{yy}-{seq:04d}"


def next_employee_code():
    seq = DocumentCounterService.reserve(EMPLOYEE_COUNTER)
    return f"RS-EMP-{seq:04d}"


# =============================================================================
# INVOICES
# =============================================================================

class InvoiceService:
    """Upserts invoices against payments. GST is fixed at 0%."""

    @staticmethod
    def _amounts(payment):
        taxable = payment.amount
        gst_amount = Decimal('0.00')
        return {
            'gst_percent': Decimal('0.00'),
            'taxable_value': taxable,
            'gst_amount': gst_amount,
            'total_amount': taxable + gst_amount,
        }

    @classmethod
    @transaction.atomic
    def save_client_invoice(cls, payment, data):
        hsn = (data.get('hsn') or '').strip()
        description = (data.get('description') or '').strip()
        if not hsn:
            raise InvoiceError("HSN is required")
        if not description:
            raise InvoiceError("Description is required")

        defaults = {
            'client_id_ref': data['client_id'],
            'client_name': data['client_name'],
            'invoice_no': data['invoice_no'],
            'bill_to': data['bill_to'].strip(),
            'hsn': hsn,
            'description': description,
            'is_finalized': True,
            **cls._amounts(payment),
        }
        invoice, created = ClientInvoice.objects.update_or_create(
            payment=payment,
            defaults=defaults,
            create_defaults={**defaults, 'invoice_date': payment.date},
        )
        logger.info(f"Client invoice {invoice.invoice_no} {'created' if created else 'updated'}")
        return invoice

    @classmethod
    @transaction.atomic
    def save_vendor_invoice(cls, payment, data):
        loading = payment.loading
        vendor_address = (loading.village or '') if loading is not None else ''

        defaults = {
            'vendor_id_ref': data['vendor_id'],
            'vendor_name': data['vendor_name'],
            'source': data['source'],
            'invoice_no': data['invoice_no'],
            'hsn': settings.DEFAULT_VENDOR_HSN,
            'description': (data.get('description') or '').strip(),
            'vendor_address': vendor_address,
            'source_record_id': payment.source_record_id,
            'is_finalized': True,
            **cls._amounts(payment),
        }
        invoice, created = VendorInvoice.objects.update_or_create(
            payment=payment,
            defaults=defaults,
            create_defaults={**defaults, 'invoice_date': payment.date},
        )
        logger.info(f"Vendor invoice {invoice.invoice_no} {'created' if created else 'updated'}")
        return invoice
