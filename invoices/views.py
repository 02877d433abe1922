"""
Views for invoice numbering, invoices and invoice PDFs.

API Endpoints:
- /api/invoices/next-number/ - Preview (GET) or reserve (POST) the next number
- /api/invoices/client/ - Save (POST) or fetch (GET ?payment_id=) a client invoice
- /api/invoices/vendor/ - Save (POST) or fetch (GET ?payment_id=) a vendor invoice
- /api/invoices/pdf/ - Render an invoice PDF (?payment_id=&type=client|vendor)
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import HttpResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAppPermission
from payments.models import ClientPayment, VendorPayment

from .models import ClientInvoice, InvoiceType, VendorInvoice
from .pdf import render_client_invoice, render_vendor_invoice
from .serializers import ClientInvoiceSerializer, VendorInvoiceSerializer, payment_summary
from .services import InvoiceError, InvoiceService, next_invoice_number

logger = logging.getLogger(__name__)


def _find(model, **lookup):
    """``first()`` that treats a malformed UUID as not found."""
    try:
        return model.objects.filter(**lookup).first()
    except DjangoValidationError:
        return None


def _missing(data, fields):
    return any(not data.get(field) for field in fields)


class InvoicesView(APIView):
    permission_classes = [HasAppPermission]
    required_permission = 'receipts.view'


class NextInvoiceNumberView(InvoicesView):
    """
    GET /api/invoices/next-number/?type=client|vendor - Preview, nothing is written
    POST /api/invoices/next-number/ {"type": "client"|"vendor"} - Reserve
    """

    @staticmethod
    def _invoice_type(value):
        value = (value or '').lower()
        return InvoiceType.VENDOR if value == InvoiceType.VENDOR else InvoiceType.CLIENT

    def get(self, request):
        invoice_type = self._invoice_type(request.query_params.get('type'))
        return Response(next_invoice_number(invoice_type))

    def post(self, request):
        invoice_type = self._invoice_type(request.data.get('type'))
        return Response(next_invoice_number(invoice_type, reserve=True))


class ClientInvoiceView(InvoicesView):
    """
    POST /api/invoices/client/
    Body: {"payment_id", "client_id", "client_name", "invoice_no", "bill_to",
           "hsn", "description"}

    GET /api/invoices/client/?payment_id=<uuid>
    """

    REQUIRED = ('payment_id', 'client_id', 'client_name', 'invoice_no', 'bill_to')

    def post(self, request):
        data = request.data
        if _missing(data, self.REQUIRED):
            return Response({'error': 'Missing required fields'}, status=status.HTTP_400_BAD_REQUEST)

        payment = _find(ClientPayment, pk=data['payment_id'])
        if payment is None:
            return Response({'error': 'Payment not found'}, status=status.HTTP_404_NOT_FOUND)

        try:
            invoice = InvoiceService.save_client_invoice(payment, data)
        except InvoiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'success': True,
            'invoice': ClientInvoiceSerializer(invoice).data,
            'payment': {**payment_summary(payment), 'client_name': payment.client_name},
        })

    def get(self, request):
        payment_id = request.query_params.get('payment_id')
        if not payment_id:
            return Response({'error': 'Missing payment_id'}, status=status.HTTP_400_BAD_REQUEST)

        invoice = _find(ClientInvoice, payment_id=payment_id)
        if invoice is None:
            return Response({'error': 'Invoice not found'}, status=status.HTTP_404_NOT_FOUND)

        payment = invoice.payment
        return Response({
            'invoice': ClientInvoiceSerializer(invoice).data,
            'payment': {**payment_summary(payment), 'client_name': payment.client_name},
        })


class VendorInvoiceView(InvoicesView):
    """
    POST /api/invoices/vendor/
    Body: {"payment_id", "vendor_id", "vendor_name", "source", "invoice_no", "description"}

    GET /api/invoices/vendor/?payment_id=<uuid>
    """

    REQUIRED = ('payment_id', 'invoice_no', 'vendor_id', 'vendor_name', 'source')

    def post(self, request):
        data = request.data
        if _missing(data, self.REQUIRED):
            return Response({'error': 'Missing required fields'}, status=status.HTTP_400_BAD_REQUEST)

        payment = _find(VendorPayment, pk=data['payment_id'])
        if payment is None:
            return Response({'error': 'Payment not found'}, status=status.HTTP_404_NOT_FOUND)

        invoice = InvoiceService.save_vendor_invoice(payment, data)
        return Response({'success': True, 'invoice': VendorInvoiceSerializer(invoice).data})

    def get(self, request):
        payment_id = request.query_params.get('payment_id')
        if not payment_id:
            return Response({'error': 'Missing payment_id'}, status=status.HTTP_400_BAD_REQUEST)

        invoice = _find(VendorInvoice, payment_id=payment_id)
        if invoice is None:
            return Response({'error': 'Invoice not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response({'invoice': VendorInvoiceSerializer(invoice).data})


class InvoicePDFView(InvoicesView):
    """
    GET /api/invoices/pdf/?payment_id=<uuid>&type=client|vendor
    """

    def get(self, request):
        payment_id = request.query_params.get('payment_id')
        if not payment_id:
            return Response({'error': 'Missing payment_id'}, status=status.HTTP_400_BAD_REQUEST)

        if request.query_params.get('type', InvoiceType.CLIENT).lower() == InvoiceType.VENDOR:
            invoice = _find(VendorInvoice, payment_id=payment_id)
            renderer = render_vendor_invoice
        else:
            invoice = _find(ClientInvoice, payment_id=payment_id)
            renderer = render_client_invoice

        if invoice is None:
            return Response({'error': 'Invoice not found'}, status=status.HTTP_404_NOT_FOUND)

        content = renderer(invoice)
        logger.info(f"Rendered invoice PDF {invoice.invoice_no}")

        response = HttpResponse(content, content_type='application/pdf')
        response['Content-Disposition'] = f'inline; filename="Invoice_{invoice.invoice_no}.pdf"'
        response['Cache-Control'] = 'no-store, max-age=0'
        return response
