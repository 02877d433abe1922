from django.contrib import admin

from .models import ClientInvoice, DocumentCounter, VendorInvoice


@admin.register(DocumentCounter)
class DocumentCounterAdmin(admin.ModelAdmin):
    list_display = ('key', 'period', 'value', 'updated_at')


@admin.register(ClientInvoice)
class ClientInvoiceAdmin(admin.ModelAdmin):
    list_display = ('invoice_no', 'client_name', 'invoice_date', 'total_amount', 'is_finalized')
    search_fields = ('invoice_no', 'client_name')
    raw_id_fields = ('payment',)


@admin.register(VendorInvoice)
class VendorInvoiceAdmin(admin.ModelAdmin):
    list_display = ('invoice_no', 'vendor_name', 'source', 'invoice_date', 'total_amount', 'is_finalized')
    list_filter = ('source',)
    search_fields = ('invoice_no', 'vendor_name')
    raw_id_fields = ('payment',)
