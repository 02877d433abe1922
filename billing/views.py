"""
Views for vendor and client bills.

API Endpoints:
- /api/vendor-bills/add-item/ - Add a line to a farmer or agent bill
- /api/vendor-bills/item/{id}/ - Update/delete a vendor bill line
- /api/vendor-bills/export/ - Excel export of farmer and agent bills
- /api/client-bills/item/ - Add a line to a client bill
- /api/client-bills/item/{id}/ - Update/delete a client bill line
- /api/client-bills/update-total/ - Recompute a client bill's total price
- /api/client-bills/export/ - Excel export of client bills
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAppPermission
from audit.services import AuditLogger
from core.filters import filter_date_range
from loadings.models import AgentLoading, ClientLoading, ClientLoadingItem, FarmerLoading
from loadings.services import StockExceededError

from .exports import build_client_bills_workbook, build_vendor_bills_workbook, workbook_response
from .serializers import (
    BillItemSerializer,
    ClientItemAddSerializer,
    ClientItemUpdateSerializer,
    UpdateTotalSerializer,
    VendorItemAddSerializer,
    VendorItemUpdateSerializer,
)
from .services import BillingError, BillNotFoundError, ClientBillService, VendorBillService

logger = logging.getLogger(__name__)


class BillsView(APIView):
    permission_classes = [HasAppPermission]
    required_permission = 'partyBills.view'


# =============================================================================
# VENDOR BILLS
# =============================================================================

class VendorBillAddItemView(BillsView):
    """
    POST /api/vendor-bills/add-item/

    Body: {"source": "farmer"|"agent", "loading_id", "variety_code",
           "no_trays", "loose", "price_per_kg"}
    """

    def post(self, request):
        serializer = VendorItemAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            item = VendorBillService.add_item(
                data['source'],
                data['loading_id'],
                data,
                audit=AuditLogger.from_request(request),
            )
        except BillNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(
            {'source': data['source'], 'item': BillItemSerializer(item).data},
            status=status.HTTP_201_CREATED
        )


class VendorBillItemView(BillsView):
    """
    PATCH /api/vendor-bills/item/{id}/ - Partial update of trays, loose, price
    DELETE /api/vendor-bills/item/{id}/
    """

    def patch(self, request, pk):
        source, item = VendorBillService.find_item(pk)
        if item is None:
            return Response({'error': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = VendorItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = VendorBillService.update_item(
            item,
            serializer.validated_data,
            audit=AuditLogger.from_request(request),
        )
        return Response({'source': source, 'item': BillItemSerializer(item).data})

    def delete(self, request, pk):
        source, item = VendorBillService.find_item(pk)
        if item is None:
            return Response({'error': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)

        result = VendorBillService.delete_item(item, audit=AuditLogger.from_request(request))
        return Response({
            'message': "Item deleted, bill removed (last item)" if result['deleted_bill'] else "Item deleted",
            'source': source,
            **result,
        })


class VendorBillExportView(BillsView):
    """
    GET /api/vendor-bills/export/?from=YYYY-MM-DD&to=YYYY-MM-DD
    """

    def get(self, request):
        farmer_loadings = filter_date_range(
            FarmerLoading.objects.select_related('vehicle').prefetch_related('items').order_by('date'),
            request,
        )
        agent_loadings = filter_date_range(
            AgentLoading.objects.select_related('vehicle').prefetch_related('items').order_by('date'),
            request,
        )
        wb = build_vendor_bills_workbook(farmer_loadings, agent_loadings)
        return workbook_response(wb, 'vendor_bills')


# =============================================================================
# CLIENT BILLS
# =============================================================================

class ClientBillAddItemView(BillsView):
    """
    POST /api/client-bills/item/

    Body: {"loading_id", "variety_code", "no_trays", "loose"}
    """

    def post(self, request):
        serializer = ClientItemAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        loading = ClientLoading.objects.select_related('vehicle').filter(pk=data['loading_id']).first()
        if loading is None:
            return Response({'error': 'Bill not found'}, status=status.HTTP_404_NOT_FOUND)

        try:
            item = ClientBillService.add_item(
                loading,
                data['variety'],
                data.get('no_trays'),
                data.get('loose'),
                audit=AuditLogger.from_request(request),
            )
        except (BillingError, StockExceededError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        item.refresh_from_db()
        return Response({'item': BillItemSerializer(item).data}, status=status.HTTP_201_CREATED)


class ClientBillItemView(BillsView):
    """
    PATCH /api/client-bills/item/{id}/ - Update price_per_kg and/or total_price
    DELETE /api/client-bills/item/{id}/
    """

    def get_item(self, pk):
        return ClientLoadingItem.objects.select_related('loading').filter(pk=pk).first()

    def patch(self, request, pk):
        item = self.get_item(pk)
        if item is None:
            return Response({'error': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = ClientItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = ClientBillService.update_item(
            item,
            serializer.validated_data,
            audit=AuditLogger.from_request(request),
        )
        return Response({'item': BillItemSerializer(item).data})

    def delete(self, request, pk):
        item = self.get_item(pk)
        if item is None:
            return Response({'error': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)

        result = ClientBillService.delete_item(item, audit=AuditLogger.from_request(request))
        return Response({
            'message': "Item deleted, bill removed (last item)" if result['deleted_bill'] else "Item deleted",
            **result,
        })


class ClientBillUpdateTotalView(BillsView):
    """
    POST /api/client-bills/update-total/

    Body: {"loading_id"}
    """

    def post(self, request):
        serializer = UpdateTotalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        loading = ClientLoading.objects.filter(pk=serializer.validated_data['loading_id']).first()
        if loading is None:
            return Response({'error': 'Bill not found'}, status=status.HTTP_404_NOT_FOUND)

        total_price = ClientBillService.update_total(loading)
        return Response({'loading_id': str(loading.pk), 'total_price': total_price})


class ClientBillExportView(BillsView):
    """
    GET /api/client-bills/export/?from=YYYY-MM-DD&to=YYYY-MM-DD
    """

    def get(self, request):
        loadings = filter_date_range(
            ClientLoading.objects.select_related('vehicle').prefetch_related('items').order_by('date'),
            request,
        )
        return workbook_response(build_client_bills_workbook(loadings), 'client_bills')
