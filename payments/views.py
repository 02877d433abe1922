"""
Views for client, vendor and employee payments.

API Endpoints:
- /api/payments/client/ - List/create client payments (multipart with image)
- /api/payments/vendor/ - List/create vendor payments
- /api/payments/employee/ - List/create salary payments
"""

import logging

from rest_framework import generics, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from accounts.permissions import HasAppPermission
from audit.services import AuditLogger

from .models import ClientPayment, EmployeePayment, VendorPayment
from .serializers import (
    ClientPaymentCreateSerializer,
    ClientPaymentSerializer,
    EmployeePaymentCreateSerializer,
    EmployeePaymentSerializer,
    VendorPaymentCreateSerializer,
    VendorPaymentSerializer,
)
from .services import PaymentError, PaymentService, PaymentTargetNotFoundError

logger = logging.getLogger(__name__)


class PaymentListCreateView(generics.ListCreateAPIView):
    permission_classes = [HasAppPermission]
    required_permission = 'payments.view'
    create_serializer_class = None

    def perform_payment_create(self, validated_data):
        raise NotImplementedError

    def create(self, request, *args, **kwargs):
        serializer = self.create_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = self.perform_payment_create(serializer.validated_data)
        except PaymentTargetNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PaymentError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(payment).data, status=status.HTTP_201_CREATED)


class ClientPaymentListCreateView(PaymentListCreateView):
    """
    GET /api/payments/client/[?client_loading=<uuid>]
    POST /api/payments/client/
    """
    serializer_class = ClientPaymentSerializer
    create_serializer_class = ClientPaymentCreateSerializer
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    filterset_fields = ['client_loading', 'payment_mode']
    search_fields = ['client_name', 'reference', 'client_loading__bill_no']

    def get_queryset(self):
        return ClientPayment.objects.select_related('client_loading', 'invoice').order_by('-date')

    def perform_payment_create(self, validated_data):
        return PaymentService.create_client_payment(validated_data, user=self.request.user)


class VendorPaymentListCreateView(PaymentListCreateView):
    """
    GET /api/payments/vendor/[?source=farmer|agent&source_record_id=<uuid>]
    POST /api/payments/vendor/
    """
    serializer_class = VendorPaymentSerializer
    create_serializer_class = VendorPaymentCreateSerializer
    filterset_fields = ['source', 'source_record_id']
    search_fields = ['vendor_name', 'reference_no', 'payment_ref']

    def get_queryset(self):
        return VendorPayment.objects.select_related('invoice').order_by('-date')

    def perform_payment_create(self, validated_data):
        return PaymentService.create_vendor_payment(validated_data, user=self.request.user)


class EmployeePaymentListCreateView(PaymentListCreateView):
    """
    GET /api/payments/employee/[?employee=<uuid>]
    POST /api/payments/employee/
    """
    serializer_class = EmployeePaymentSerializer
    create_serializer_class = EmployeePaymentCreateSerializer
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    filterset_fields = ['employee', 'salary_month']

    def get_queryset(self):
        return EmployeePayment.objects.select_related('employee').order_by('-date')

    def perform_payment_create(self, validated_data):
        return PaymentService.create_employee_payment(
            validated_data,
            user=self.request.user,
            audit=AuditLogger.from_request(self.request),
        )
