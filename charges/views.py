"""
Views for dispatch charges and packing amounts.

API Endpoints:
- /api/payments/dispatch/ - List (by loading) and create dispatch charges
- /api/payments/packing-amount/ - List and create packing payments
"""

import logging

from django_filters.utils import translate_validation
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAppPermission

from .filters import DispatchChargeFilter, PackingAmountFilter
from .models import DispatchCharge, PackingAmount
from .serializers import (
    DispatchChargeCreateSerializer,
    DispatchChargeSerializer,
    PackingAmountCreateSerializer,
    PackingAmountSerializer,
    normalize_source_type,
)
from .services import ChargeService, LoadingNotFoundError

logger = logging.getLogger(__name__)


class DispatchChargeView(APIView):
    """
    GET /api/payments/dispatch/?source_record_id=<uuid>[&source_type=AGENT]
    POST /api/payments/dispatch/
    """
    permission_classes = [HasAppPermission]
    required_permission = 'payments.view'

    def get(self, request):
        source_record_id = request.query_params.get('source_record_id')
        if not source_record_id:
            return Response(
                {'error': 'source_record_id query parameter is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        source_type = request.query_params.get('source_type')
        if source_type and normalize_source_type(source_type) is None:
            return Response({'error': 'Invalid source_type'}, status=status.HTTP_400_BAD_REQUEST)

        filterset = DispatchChargeFilter(
            request.query_params,
            queryset=DispatchCharge.objects.select_related('created_by'),
        )
        if not filterset.is_valid():
            raise translate_validation(filterset.errors)

        return Response(DispatchChargeSerializer(filterset.qs.order_by('-created_at'), many=True).data)

    def post(self, request):
        serializer = DispatchChargeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            charge = ChargeService.create_dispatch_charge(serializer.validated_data, user=request.user)
        except LoadingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(DispatchChargeSerializer(charge).data, status=status.HTTP_201_CREATED)


class PackingAmountListCreateView(generics.ListCreateAPIView):
    """
    GET /api/payments/packing-amount/[?source_type=&source_record_id=]
    POST /api/payments/packing-amount/
    """
    permission_classes = [HasAppPermission]
    required_permission = 'payments.view'
    serializer_class = PackingAmountSerializer
    filterset_class = PackingAmountFilter

    def get_queryset(self):
        return PackingAmount.objects.select_related(
            'created_by',
            'farmer_loading__vehicle',
            'agent_loading__vehicle',
            'client_loading__vehicle',
        ).order_by('-created_at')

    def create(self, request, *args, **kwargs):
        serializer = PackingAmountCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            packing = ChargeService.create_packing_amount(serializer.validated_data, user=request.user)
        except LoadingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(PackingAmountSerializer(packing).data, status=status.HTTP_201_CREATED)
