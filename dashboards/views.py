"""
Dashboard API Views

GET /api/dashboard/metrics/?from=YYYY-MM-DD&to=YYYY-MM-DD&agg=day|week|month

Without a range the last 7 days are reported in day buckets.
"""

from datetime import date, timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAppPermission

from .services import DashboardMetricsService


class DashboardMetricsView(APIView):
    permission_classes = [HasAppPermission]
    required_permission = 'dashboard.view'

    def get(self, request):
        try:
            date_from = self._parse_date(request.query_params.get('from'))
            date_to = self._parse_date(request.query_params.get('to'))
        except ValueError:
            return Response(
                {'error': 'Invalid date format. Use YYYY-MM-DD'},
                status=status.HTTP_400_BAD_REQUEST
            )

        if date_from and date_to and date_from > date_to:
            return Response(
                {'error': "'from' must be on or before 'to'"},
                status=status.HTTP_400_BAD_REQUEST
            )

        max_days = settings.DASHBOARD_MAX_RANGE_DAYS
        if date_from and (date_to or timezone.localdate()) - date_from >= timedelta(days=max_days):
            return Response(
                {'error': f"Date range cannot exceed {max_days} days"},
                status=status.HTTP_400_BAD_REQUEST
            )

        service = DashboardMetricsService(
            date_from=date_from,
            date_to=date_to,
            agg=request.query_params.get('agg', 'day'),
        )
        return Response(service.get_metrics(), status=status.HTTP_200_OK)

    @staticmethod
    def _parse_date(value):
        if not value:
            return None
        return date.fromisoformat(value[:10])
