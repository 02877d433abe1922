from django.urls import path

from .views import (
    ClientDetailView,
    ClientListCreateView,
    FishVarietyDeleteView,
    FishVarietyListCreateView,
)

app_name = 'parties'

urlpatterns = [
    # =========================================================================
    # CLIENTS
    # =========================================================================
    path('clients/', ClientListCreateView.as_view(), name='client-list'),
    path('clients/<uuid:pk>/', ClientDetailView.as_view(), name='client-detail'),

    # =========================================================================
    # FISH VARIETIES
    # =========================================================================
    path('fish-varieties/', FishVarietyListCreateView.as_view(), name='fish-variety-list'),
    path('fish-varieties/<str:code>/', FishVarietyDeleteView.as_view(), name='fish-variety-delete'),
]
