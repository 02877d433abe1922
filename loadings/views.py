"""
Views for loadings and stock.

API Endpoints:
- /api/loadings/farmer/ - List/create farmer loadings
- /api/loadings/farmer/{id}/ - Retrieve/delete a farmer loading
- /api/loadings/agent/ - List/create agent loadings
- /api/loadings/agent/{id}/ - Retrieve/delete an agent loading
- /api/loadings/client/ - List/create client loadings
- /api/loadings/client/{id}/ - Retrieve/delete a client loading
- /api/loadings/{type}/{id}/trip/ - Update the trip status of a loading
- /api/stocks/available-varieties/ - Varieties with stock on hand
"""

import logging

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAppPermission
from core.filters import filter_date_range

from .filters import ClientLoadingFilter
from .models import AgentLoading, ClientLoading, FarmerLoading, get_loading_model
from .serializers import (
    AgentLoadingCreateSerializer,
    AgentLoadingSerializer,
    ClientLoadingCreateSerializer,
    ClientLoadingSerializer,
    FarmerLoadingCreateSerializer,
    FarmerLoadingSerializer,
    TripStatusSerializer,
)
from .services import LoadingError, LoadingService, StockLedger

logger = logging.getLogger(__name__)


class LoadingListCreateMixin:
    """
    Shared list/create behaviour. Subclasses name the create serializer and
    the service method that records the loading.
    """
    permission_classes = [HasAppPermission]
    create_serializer_class = None
    create_method = None
    search_fields = ['bill_no', 'village', 'fish_code']

    def get_queryset(self):
        queryset = super().get_queryset().select_related('vehicle').prefetch_related(
            'items__variety', 'dispatch_charges'
        )

        queryset = filter_date_range(queryset, self.request)

        trip_status = self.request.query_params.get('trip_status')
        if trip_status:
            queryset = queryset.filter(trip_status=trip_status.upper())

        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.create_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            loading = getattr(LoadingService, self.create_method)(
                serializer.validated_data,
                user=request.user,
            )
        except LoadingError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        loading = self.get_queryset().get(pk=loading.pk)
        return Response(self.get_serializer(loading).data, status=status.HTTP_201_CREATED)


class LoadingDetailMixin:
    """GET a loading; DELETE removes it with its lines."""
    permission_classes = [HasAppPermission]

    def get_queryset(self):
        return super().get_queryset().select_related('vehicle').prefetch_related(
            'items__variety', 'dispatch_charges'
        )

    def destroy(self, request, *args, **kwargs):
        loading = self.get_queryset().filter(pk=kwargs['pk']).first()
        if loading is None:
            return Response({'error': 'Bill not found'}, status=status.HTTP_404_NOT_FOUND)

        bill_no = LoadingService.delete_loading(loading)
        return Response({
            'message': f"{loading.LOAD_TYPE.label} bill deleted (cascade applied)",
            'bill_no': bill_no,
        })


# =============================================================================
# FARMER LOADINGS
# =============================================================================

class FarmerLoadingListCreateView(LoadingListCreateMixin, generics.ListCreateAPIView):
    """
    GET /api/loadings/farmer/
    POST /api/loadings/farmer/
    """
    queryset = FarmerLoading.objects.order_by('-created_at')
    serializer_class = FarmerLoadingSerializer
    create_serializer_class = FarmerLoadingCreateSerializer
    create_method = 'create_farmer_loading'
    required_permission = 'loadings.view'
    search_fields = LoadingListCreateMixin.search_fields + ['farmer_name']


class FarmerLoadingDetailView(LoadingDetailMixin, generics.RetrieveDestroyAPIView):
    """
    GET/DELETE /api/loadings/farmer/{id}/
    """
    queryset = FarmerLoading.objects.all()
    serializer_class = FarmerLoadingSerializer
    required_permission = 'loadings.view'


# =============================================================================
# AGENT LOADINGS
# =============================================================================

class AgentLoadingListCreateView(LoadingListCreateMixin, generics.ListCreateAPIView):
    """
    GET /api/loadings/agent/
    POST /api/loadings/agent/
    """
    queryset = AgentLoading.objects.order_by('-created_at')
    serializer_class = AgentLoadingSerializer
    create_serializer_class = AgentLoadingCreateSerializer
    create_method = 'create_agent_loading'
    required_permission = 'loadings.view'
    search_fields = LoadingListCreateMixin.search_fields + ['agent_name']


class AgentLoadingDetailView(LoadingDetailMixin, generics.RetrieveDestroyAPIView):
    """
    GET/DELETE /api/loadings/agent/{id}/
    """
    queryset = AgentLoading.objects.all()
    serializer_class = AgentLoadingSerializer
    required_permission = 'loadings.view'


# =============================================================================
# CLIENT LOADINGS
# =============================================================================

class ClientLoadingListCreateView(LoadingListCreateMixin, generics.ListCreateAPIView):
    """
    GET /api/loadings/client/
    POST /api/loadings/client/

    Creation is refused when any requested variety exceeds net stock.
    """
    queryset = ClientLoading.objects.order_by('-date')
    serializer_class = ClientLoadingSerializer
    create_serializer_class = ClientLoadingCreateSerializer
    create_method = 'create_client_loading'
    required_permission = {
        'GET': 'loadings.client.view',
        'POST': 'loadings.client.edit',
    }
    filterset_class = ClientLoadingFilter
    search_fields = LoadingListCreateMixin.search_fields + ['client_name']

    def get_queryset(self):
        return super().get_queryset().select_related('client')


class ClientLoadingDetailView(LoadingDetailMixin, generics.RetrieveDestroyAPIView):
    """
    GET/DELETE /api/loadings/client/{id}/
    """
    queryset = ClientLoading.objects.select_related('client')
    serializer_class = ClientLoadingSerializer
    required_permission = {
        'GET': 'loadings.client.view',
        'DELETE': 'loadings.client.edit',
    }


# =============================================================================
# TRIP STATUS
# =============================================================================

class TripStatusView(APIView):
    """
    PATCH /api/loadings/{type}/{id}/trip/

    Body: {"trip_status": "RUNNING" | "COMPLETED" | "CANCELLED"}
    """
    permission_classes = [HasAppPermission]
    required_permission = 'loadings.view'

    def patch(self, request, load_type, pk):
        model = get_loading_model(load_type)
        if model is None:
            return Response({'error': 'Invalid loading type'}, status=status.HTTP_400_BAD_REQUEST)

        loading = model.objects.filter(pk=pk).first()
        if loading is None:
            return Response({'error': 'Bill not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = TripStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        LoadingService.set_trip_status(loading, serializer.validated_data['trip_status'])

        return Response({
            'id': str(loading.id),
            'bill_no': loading.bill_no,
            'trip_status': loading.trip_status,
            'started_at': loading.started_at,
            'completed_at': loading.completed_at,
        })


# =============================================================================
# STOCK
# =============================================================================

class AvailableVarietiesView(APIView):
    """
    GET /api/stocks/available-varieties/

    Net kilograms and whole trays in stock per variety.
    """
    permission_classes = [HasAppPermission]
    required_permission = 'stock.view'

    def get(self, request):
        return Response(StockLedger.available_varieties())
