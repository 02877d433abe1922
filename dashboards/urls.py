"""
Dashboard URL Configuration
"""

from django.urls import path

from .views import DashboardMetricsView

app_name = 'dashboards'

urlpatterns = [
    path('metrics/', DashboardMetricsView.as_view(), name='metrics'),
]
