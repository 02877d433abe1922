"""
Dashboard services module
"""

from .metrics import DashboardMetricsService

__all__ = [
    'DashboardMetricsService',
]
