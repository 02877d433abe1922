"""
Views for party master data.

API Endpoints:
- /api/clients/ - List/create clients
- /api/clients/{id}/ - Retrieve/update/delete a client
- /api/fish-varieties/ - List/create fish varieties
- /api/fish-varieties/{code}/ - Delete a fish variety
"""

import logging

from django.db.models import ProtectedError
from rest_framework import generics, status
from rest_framework.response import Response

from accounts.permissions import HasAppPermission
from audit.services import AuditLogger

from .models import Client, FishVariety
from .serializers import ClientSerializer, FishVarietySerializer

logger = logging.getLogger(__name__)


# =============================================================================
# CLIENT VIEWS
# =============================================================================

class ClientListCreateView(generics.ListCreateAPIView):
    """
    GET /api/clients/
    POST /api/clients/
    """
    queryset = Client.objects.all()
    serializer_class = ClientSerializer
    permission_classes = [HasAppPermission]
    required_permission = 'clients.view'
    filterset_fields = ['gst_type', 'balance_type', 'is_active', 'state']
    search_fields = ['party_name', 'phone', 'gstin', 'party_group']
    ordering_fields = ['party_name', 'created_at']

    def perform_create(self, serializer):
        client = serializer.save()
        AuditLogger.from_request(self.request).log(
            module='Client',
            action='CREATE',
            record_id=client.id,
            new_values=ClientSerializer(client).data,
            label=f"Client created: {client.party_name}",
        )
        logger.info(f"Client {client.party_name} created")


class ClientDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/clients/{id}/
    """
    queryset = Client.objects.all()
    serializer_class = ClientSerializer
    permission_classes = [HasAppPermission]
    required_permission = 'clients.view'

    def update(self, request, *args, **kwargs):
        if not request.data:
            return Response(
                {'error': 'No fields provided for update'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return super().update(request, *args, **kwargs)

    def perform_update(self, serializer):
        before = ClientSerializer(serializer.instance).data
        client = serializer.save()
        AuditLogger.from_request(self.request).log_change(
            module='Client',
            record_id=client.id,
            old_values=before,
            new_values=ClientSerializer(client).data,
            label=f"Client updated: {client.party_name}",
        )

    def perform_destroy(self, instance):
        snapshot = ClientSerializer(instance).data
        record_id = instance.id
        instance.delete()
        AuditLogger.from_request(self.request).log(
            module='Client',
            action='DELETE',
            record_id=record_id,
            old_values=snapshot,
            label=f"Client deleted: {snapshot['party_name']}",
        )


# =============================================================================
# FISH VARIETY VIEWS
# =============================================================================

class FishVarietyListCreateView(generics.ListCreateAPIView):
    """
    GET /api/fish-varieties/ - every variety, ordered by name
    POST /api/fish-varieties/
    """
    queryset = FishVariety.objects.order_by('name')
    serializer_class = FishVarietySerializer
    pagination_class = None
    search_fields = ['code', 'name']
    permission_classes = [HasAppPermission]
    required_permission = {'POST': 'stock.view'}


class FishVarietyDeleteView(generics.GenericAPIView):
    """
    DELETE /api/fish-varieties/{code}/

    Varieties referenced by any loading line cannot be deleted.
    """
    permission_classes = [HasAppPermission]
    required_permission = 'stock.view'

    def delete(self, request, code):
        code = (code or '').strip().upper()
        if not code:
            return Response({'error': 'Code is required'}, status=status.HTTP_400_BAD_REQUEST)

        variety = FishVariety.objects.filter(code=code).first()
        if variety is None:
            return Response({'error': 'Variety not found'}, status=status.HTTP_404_NOT_FOUND)

        try:
            variety.delete()
        except ProtectedError:
            return Response(
                {'error': 'Cannot delete: Variety is used in transactions'},
                status=status.HTTP_400_BAD_REQUEST
            )

        logger.info(f"Fish variety {code} deleted")
        return Response({'message': 'Variety deleted successfully', 'code': code})
