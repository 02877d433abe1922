from django.urls import path

from .views import ClientInvoiceView, InvoicePDFView, NextInvoiceNumberView, VendorInvoiceView

app_name = 'invoices'

urlpatterns = [
    path('next-number/', NextInvoiceNumberView.as_view(), name='next-number'),
    path('client/', ClientInvoiceView.as_view(), name='client-invoice'),
    path('vendor/', VendorInvoiceView.as_view(), name='vendor-invoice'),
    path('pdf/', InvoicePDFView.as_view(), name='invoice-pdf'),
]
