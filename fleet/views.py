"""
Views for vehicles and drivers.

API Endpoints:
- /api/vehicles/own/ - List/create company-owned vehicles
- /api/vehicles/own/{id}/ - Update/delete an owned vehicle
- /api/vehicles/rent/ - List/create rented vehicles
- /api/vehicles/rent/{id}/ - Update/delete a rented vehicle
- /api/vehicles/{id}/ - Vehicle with its trip history
- /api/vehicles/assign-driver/ - Free assigned vehicles (GET), assign a driver (POST)
- /api/vehicles/mark-available/ - Release a vehicle from its current trip
- /api/drivers/ - List/create drivers
- /api/drivers/{id}/ - Retrieve/update/delete a driver
"""

import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAppPermission

from .models import Driver, FuelType, Ownership, Vehicle
from .serializers import (
    AssignDriverSerializer,
    DriverSerializer,
    MarkAvailableSerializer,
    OwnVehicleListSerializer,
    OwnVehicleSerializer,
    RentVehicleListSerializer,
    RentVehicleSerializer,
    VehicleBriefSerializer,
    VehicleSerializer,
)
from .services import DriverService, FleetError, FleetNotFoundError, VehicleService

logger = logging.getLogger(__name__)

FLEET_PERMISSIONS = {'GET': 'vehicles.view', '*': 'vehicles.create'}


class VehiclePagination(PageNumberPagination):
    """``?page=&limit=`` pagination with a ``meta`` block."""
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return Response({
            'data': data,
            'meta': {
                'page': self.page.number,
                'limit': paginator.per_page,
                'total': paginator.count,
                'total_pages': paginator.num_pages if paginator.count else 0,
            },
        })


class FleetView(APIView):
    permission_classes = [HasAppPermission]
    required_permission = FLEET_PERMISSIONS


# =============================================================================
# VEHICLES
# =============================================================================

class VehicleListCreateView(FleetView):
    """Vehicles of one ownership kind; subclasses set the serializers."""
    ownership = None
    write_serializer_class = None
    list_serializer_class = None
    search_fields = ['vehicle_number', 'assigned_driver__name']

    def filter_search(self, queryset, search):
        match = Q()
        for field in self.search_fields:
            match |= Q(**{f"{field}__icontains": search})
        return queryset.filter(match)

    def get_queryset(self):
        params = self.request.query_params
        queryset = Vehicle.objects.filter(ownership=self.ownership).select_related('assigned_driver')

        search = params.get('search', '').strip()
        if search:
            queryset = self.filter_search(queryset, search)

        fuel_type = params.get('fuel_type', 'ALL')
        if fuel_type in FuelType.values:
            queryset = queryset.filter(fuel_type=fuel_type)

        assigned = params.get('assigned', 'ALL').upper()
        if assigned == 'ASSIGNED':
            queryset = queryset.filter(assigned_driver__isnull=False)
        elif assigned == 'AVAILABLE':
            queryset = queryset.filter(assigned_driver__isnull=True)

        if params.get('sort', 'NEWEST').upper() == 'OLDEST':
            return queryset.order_by('created_at')
        return queryset.order_by('-created_at')

    def get(self, request):
        paginator = VehiclePagination()
        page = paginator.paginate_queryset(self.get_queryset(), request, view=self)
        return paginator.get_paginated_response(self.list_serializer_class(page, many=True).data)

    def post(self, request):
        serializer = self.write_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            vehicle = VehicleService.create_vehicle(self.ownership, serializer.validated_data)
        except FleetError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VehicleSerializer(vehicle).data, status=status.HTTP_201_CREATED)


class OwnVehicleListCreateView(VehicleListCreateView):
    """
    GET /api/vehicles/own/?page=&limit=&search=&fuel_type=&assigned=&sort=
    POST /api/vehicles/own/
    """
    ownership = Ownership.OWN
    write_serializer_class = OwnVehicleSerializer
    list_serializer_class = OwnVehicleListSerializer
    search_fields = ['vehicle_number', 'manufacturer', 'assigned_driver__name']


class RentVehicleListCreateView(VehicleListCreateView):
    """
    GET /api/vehicles/rent/?page=&limit=&search=&assigned=&sort=

    Every whitespace-separated search term must match the agency, the
    vehicle number or the driver's name.
    """
    ownership = Ownership.RENT
    write_serializer_class = RentVehicleSerializer
    list_serializer_class = RentVehicleListSerializer
    search_fields = ['rental_agency', 'vehicle_number', 'assigned_driver__name']

    def filter_search(self, queryset, search):
        for term in search.split():
            queryset = super().filter_search(queryset, term)
        return queryset


class VehicleUpdateDeleteView(FleetView):
    """PUT (partial) / DELETE one vehicle of the view's ownership kind."""
    ownership = None
    write_serializer_class = None

    def put(self, request, pk):
        vehicle = Vehicle.objects.filter(pk=pk).first()
        if vehicle is None:
            return Response({'error': 'Vehicle not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = self.write_serializer_class(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            vehicle = VehicleService.update_vehicle(vehicle, self.ownership, serializer.validated_data)
        except FleetError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VehicleSerializer(vehicle).data)

    def delete(self, request, pk):
        vehicle = Vehicle.objects.filter(pk=pk).first()
        if vehicle is None:
            return Response({'error': 'Vehicle not found'}, status=status.HTTP_404_NOT_FOUND)

        VehicleService.delete_vehicle(vehicle)
        return Response({'message': 'Vehicle deleted successfully'})


class OwnVehicleDetailView(VehicleUpdateDeleteView):
    ownership = Ownership.OWN
    write_serializer_class = OwnVehicleSerializer


class RentVehicleDetailView(VehicleUpdateDeleteView):
    ownership = Ownership.RENT
    write_serializer_class = RentVehicleSerializer


class VehicleDetailView(FleetView):
    """
    GET /api/vehicles/{id}/

    The vehicle with every farmer, agent and client trip it carried and the
    transport charges booked on each.
    """

    def get(self, request, pk):
        vehicle = Vehicle.objects.select_related('assigned_driver').filter(pk=pk).first()
        if vehicle is None:
            return Response({'error': 'Vehicle not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response({
            'vehicle': VehicleSerializer(vehicle).data,
            'trips': VehicleService.trips(vehicle),
        })


class AssignDriverView(FleetView):
    """
    GET /api/vehicles/assign-driver/ - Vehicles with a driver and no loading
    POST /api/vehicles/assign-driver/ {"vehicle_id", "driver_id"}
    """

    def get(self, request):
        vehicles = VehicleService.free_assigned_vehicles()
        data = [
            {**VehicleBriefSerializer(vehicle).data, 'driver_name': vehicle.assigned_driver.name}
            for vehicle in vehicles
        ]
        return Response(data)

    def post(self, request):
        serializer = AssignDriverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            vehicle = VehicleService.assign_driver(
                serializer.validated_data.get('vehicle_id'),
                serializer.validated_data.get('driver_id'),
            )
        except FleetNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except FleetError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'message': 'Driver assigned successfully', 'vehicle': VehicleSerializer(vehicle).data})


class MarkAvailableView(FleetView):
    """
    POST /api/vehicles/mark-available/ {"vehicle_id"}
    """

    def post(self, request):
        serializer = MarkAvailableSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            loading = VehicleService.mark_available(serializer.validated_data['vehicle_id'])
        except FleetError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': 'Vehicle marked as available',
            'load_type': loading.LOAD_TYPE,
            'bill_no': loading.bill_no,
        })


# =============================================================================
# DRIVERS
# =============================================================================

class DriverListCreateView(FleetView):
    """
    GET /api/drivers/
    POST /api/drivers/ (multipart, optional identity_proof)
    """
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get(self, request):
        drivers = Driver.objects.order_by('-created_at')
        return Response(DriverSerializer(drivers, many=True).data)

    def post(self, request):
        serializer = DriverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            driver = DriverService.create_driver(serializer.validated_data)
        except FleetError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(DriverSerializer(driver).data, status=status.HTTP_201_CREATED)


class DriverDetailView(FleetView):
    """
    GET /api/drivers/{id}/
    PATCH /api/drivers/{id}/ (``remove_identity_proof=true`` clears the proof)
    DELETE /api/drivers/{id}/
    """
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get_driver(self, pk):
        return Driver.objects.filter(pk=pk).first()

    def get(self, request, pk):
        driver = self.get_driver(pk)
        if driver is None:
            return Response({'error': 'Driver not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(DriverSerializer(driver).data)

    def patch(self, request, pk):
        driver = self.get_driver(pk)
        if driver is None:
            return Response({'error': 'Driver not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = DriverSerializer(driver, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            driver = DriverService.update_driver(driver, serializer.validated_data)
        except FleetError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(DriverSerializer(driver).data)

    def delete(self, request, pk):
        driver = self.get_driver(pk)
        if driver is None:
            return Response({'error': 'Driver not found'}, status=status.HTTP_404_NOT_FOUND)

        DriverService.delete_driver(driver)
        return Response({'message': 'Driver deleted successfully'})
