"""
Audit log browsing.

API Endpoints:
- /api/audit-logs/ - List audit entries (filter: module, action, user, record_id, from, to)
- /api/audit-logs/{id}/ - Single entry
"""

from rest_framework import generics

from accounts.permissions import HasAppPermission
from core.filters import filter_date_range

from .models import AuditLog
from .serializers import AuditLogSerializer


class AuditLogListView(generics.ListAPIView):
    """
    GET /api/audit-logs/
    """
    queryset = AuditLog.objects.select_related('user')
    serializer_class = AuditLogSerializer
    permission_classes = [HasAppPermission]
    required_permission = 'audit.view'
    filterset_fields = ['module', 'action', 'user', 'record_id']
    search_fields = ['label', 'module', 'user__email']
    ordering_fields = ['created_at', 'module', 'action']
    ordering = ['-created_at']

    def get_queryset(self):
        return filter_date_range(super().get_queryset(), self.request, field='created_at')


class AuditLogDetailView(generics.RetrieveAPIView):
    """
    GET /api/audit-logs/{id}/
    """
    queryset = AuditLog.objects.select_related('user')
    serializer_class = AuditLogSerializer
    permission_classes = [HasAppPermission]
    required_permission = 'audit.view'
