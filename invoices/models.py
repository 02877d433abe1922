"""
Invoice Models

- DocumentCounter: sequence behind every generated document number
  (invoice numbers per financial year, packing bills per calendar year,
  employee codes)
- ClientInvoice: tax invoice raised against one client payment
- VendorInvoice: purchase invoice raised against one vendor payment
"""

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone


class DocumentCounter(models.Model):
    """
    A named sequence. ``period`` identifies the year the sequence belongs to;
    when a new period starts the sequence restarts at 1.
    """

    key = models.CharField(max_length=50, unique=True)
    value = models.PositiveIntegerField(default=0)
    period = models.CharField(max_length=20, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'document_counters'
        verbose_name = 'Document Counter'
        verbose_name_plural = 'Document Counters'

    def __str__(self):
        return f"{self.key} [{self.period}] = {self.value}"


class InvoiceType(models.TextChoices):
    CLIENT = 'client', 'Client'
    VENDOR = 'vendor', 'Vendor'


class BaseInvoice(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_no = models.CharField(max_length=30, db_index=True)
    invoice_date = models.DateTimeField(default=timezone.now)
    hsn = models.CharField(max_length=10)
    description = models.TextField(blank=True)

    gst_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    taxable_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    gst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    is_finalized = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-invoice_date']


class ClientInvoice(BaseInvoice):
    payment = models.OneToOneField(
        'payments.ClientPayment',
        on_delete=models.CASCADE,
        related_name='invoice'
    )
    client_id_ref = models.CharField(
        max_length=64,
        help_text="Client identifier as chosen on the invoice form"
    )
    client_name = models.CharField(max_length=150)
    bill_to = models.TextField()

    class Meta(BaseInvoice.Meta):
        db_table = 'client_invoices'
        verbose_name = 'Client Invoice'
        verbose_name_plural = 'Client Invoices'

    def __str__(self):
        return f"{self.invoice_no} - {self.client_name}"


class VendorInvoice(BaseInvoice):
    payment = models.OneToOneField(
        'payments.VendorPayment',
        on_delete=models.CASCADE,
        related_name='invoice'
    )
    vendor_id_ref = models.CharField(max_length=100, help_text="``{source}:{loading id}``")
    vendor_name = models.CharField(max_length=150)
    source = models.CharField(max_length=10)
    vendor_address = models.CharField(max_length=255, blank=True)
    source_record_id = models.UUIDField(null=True, blank=True)

    class Meta(BaseInvoice.Meta):
        db_table = 'vendor_invoices'
        verbose_name = 'Vendor Invoice'
        verbose_name_plural = 'Vendor Invoices'

    def __str__(self):
        return f"{self.invoice_no} - {self.vendor_name}"
