from django.urls import path

from .views import (
    AgentLoadingDetailView,
    AgentLoadingListCreateView,
    AvailableVarietiesView,
    ClientLoadingDetailView,
    ClientLoadingListCreateView,
    FarmerLoadingDetailView,
    FarmerLoadingListCreateView,
    TripStatusView,
)

app_name = 'loadings'

urlpatterns = [
    # =========================================================================
    # FARMER / AGENT / CLIENT LOADINGS
    # =========================================================================
    path('farmer/', FarmerLoadingListCreateView.as_view(), name='farmer-list'),
    path('farmer/<uuid:pk>/', FarmerLoadingDetailView.as_view(), name='farmer-detail'),
    path('agent/', AgentLoadingListCreateView.as_view(), name='agent-list'),
    path('agent/<uuid:pk>/', AgentLoadingDetailView.as_view(), name='agent-detail'),
    path('client/', ClientLoadingListCreateView.as_view(), name='client-list'),
    path('client/<uuid:pk>/', ClientLoadingDetailView.as_view(), name='client-detail'),

    # =========================================================================
    # TRIPS
    # =========================================================================
    path('<str:load_type>/<uuid:pk>/trip/', TripStatusView.as_view(), name='trip-status'),
]

stock_urlpatterns = [
    path('available-varieties/', AvailableVarietiesView.as_view(), name='available-varieties'),
]
