from django.urls import path

from .views import (
    AssignDriverView,
    DriverDetailView,
    DriverListCreateView,
    MarkAvailableView,
    OwnVehicleDetailView,
    OwnVehicleListCreateView,
    RentVehicleDetailView,
    RentVehicleListCreateView,
    VehicleDetailView,
)

app_name = 'fleet'

urlpatterns = [
    path('vehicles/own/', OwnVehicleListCreateView.as_view(), name='own-vehicles'),
    path('vehicles/own/<uuid:pk>/', OwnVehicleDetailView.as_view(), name='own-vehicle-detail'),
    path('vehicles/rent/', RentVehicleListCreateView.as_view(), name='rent-vehicles'),
    path('vehicles/rent/<uuid:pk>/', RentVehicleDetailView.as_view(), name='rent-vehicle-detail'),
    path('vehicles/assign-driver/', AssignDriverView.as_view(), name='assign-driver'),
    path('vehicles/mark-available/', MarkAvailableView.as_view(), name='mark-available'),
    path('vehicles/<uuid:pk>/', VehicleDetailView.as_view(), name='vehicle-detail'),
    path('drivers/', DriverListCreateView.as_view(), name='drivers'),
    path('drivers/<uuid:pk>/', DriverDetailView.as_view(), name='driver-detail'),
]
