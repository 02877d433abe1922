"""
Fleet services: vehicle registration, driver assignment and trip history.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone

from charges.models import DispatchChargeType
from loadings.models import AgentLoading, ClientLoading, FarmerLoading, TripStatus

from .models import Driver, Vehicle

logger = logging.getLogger(__name__)

TRIP_SOURCES = [
    (FarmerLoading, 'farmer_loadings'),
    (AgentLoading, 'agent_loadings'),
    (ClientLoading, 'client_loadings'),
]

DRIVER_CREATE_CONFLICTS = [
    ('license_number', "Driver with this license number already exists"),
    ('phone', "Driver with this phone already exists"),
    ('aadhar_number', "Driver with this Aadhar number already exists"),
]
DRIVER_UPDATE_CONFLICTS = [
    ('phone', "Phone already exists"),
    ('license_number', "License number already exists"),
    ('aadhar_number', "Aadhar number already exists"),
]


class FleetError(ValueError):
    """Raised when a fleet request breaks a business rule."""
    pass


class FleetNotFoundError(Exception):
    """Raised when a vehicle or driver does not exist."""
    pass


def _check_driver_free(driver, vehicle=None):
    if driver is None:
        return
    current = Vehicle.objects.filter(assigned_driver=driver)
    if vehicle is not None:
        current = current.exclude(pk=vehicle.pk)
    if current.exists():
        raise FleetError("This driver is already assigned to a vehicle")


class VehicleService:

    @staticmethod
    @transaction.atomic
    def create_vehicle(ownership, data):
        if Vehicle.objects.filter(vehicle_number=data['vehicle_number']).exists():
            raise FleetError("Vehicle number already exists")
        _check_driver_free(data.get('assigned_driver'))

        vehicle = Vehicle.objects.create(ownership=ownership, **data)
        logger.info(f"{ownership} vehicle {vehicle.vehicle_number} added")
        return vehicle

    @staticmethod
    @transaction.atomic
    def update_vehicle(vehicle, ownership, data):
        if vehicle.ownership != ownership:
            raise FleetError(f"Vehicle is not a {ownership.lower()} vehicle")

        number = data.get('vehicle_number')
        if number and number != vehicle.vehicle_number:
            if Vehicle.objects.filter(vehicle_number=number).exclude(pk=vehicle.pk).exists():
                raise FleetError("Vehicle number already exists")
        if 'assigned_driver' in data:
            _check_driver_free(data['assigned_driver'], vehicle)

        for field, value in data.items():
            setattr(vehicle, field, value)
        vehicle.save()

        logger.info(f"Vehicle {vehicle.vehicle_number} updated")
        return vehicle

    @staticmethod
    def delete_vehicle(vehicle):
        number = vehicle.vehicle_number
        vehicle.delete()
        logger.info(f"Vehicle {number} deleted")
        return number

    @staticmethod
    @transaction.atomic
    def assign_driver(vehicle_id, driver_id):
        if not vehicle_id or not driver_id:
            raise FleetError("vehicle_id and driver_id are required")

        vehicle = Vehicle.objects.select_for_update().filter(pk=vehicle_id).first()
        if vehicle is None:
            raise FleetNotFoundError("Vehicle not found")
        if vehicle.assigned_driver_id:
            raise FleetError("This vehicle already has a driver assigned")

        driver = Driver.objects.filter(pk=driver_id).first()
        if driver is None:
            raise FleetNotFoundError("Driver not found")
        _check_driver_free(driver)

        vehicle.assigned_driver = driver
        vehicle.save(update_fields=['assigned_driver', 'updated_at'])
        logger.info(f"Driver {driver.name} assigned to {vehicle.vehicle_number}")
        return vehicle

    @staticmethod
    def free_assigned_vehicles():
        """Vehicles with a driver that no loading currently uses."""
        busy = Q()
        for _, related_name in TRIP_SOURCES:
            busy |= Q(**{f"{related_name}__isnull": False})
        return (
            Vehicle.objects
            .filter(assigned_driver__isnull=False)
            .exclude(busy)
            .select_related('assigned_driver')
            .distinct()
        )

    @staticmethod
    @transaction.atomic
    def mark_available(vehicle_id):
        """
        Detach the vehicle from the first loading using it (farmer, then agent,
        then client) and complete that trip.
        """
        for loading_model, _ in TRIP_SOURCES:
            loading = loading_model.objects.select_for_update().filter(vehicle_id=vehicle_id).first()
            if loading is None:
                continue

            loading.vehicle = None
            loading.vehicle_no = ''
            loading.trip_status = TripStatus.COMPLETED
            loading.completed_at = timezone.now()
            loading.save(update_fields=['vehicle', 'vehicle_no', 'trip_status', 'completed_at', 'updated_at'])

            logger.info(f"Vehicle {vehicle_id} released from {loading.LOAD_TYPE} loading {loading.bill_no}")
            return loading

        raise FleetError("No active trip found for this vehicle")

    @staticmethod
    def trips(vehicle):
        """Farmer, agent and client loadings carried by ``vehicle``, newest first."""
        transport = Sum(
            'dispatch_charges__amount',
            filter=Q(dispatch_charges__type=DispatchChargeType.TRANSPORT)
        )
        trips = []
        for loading_model, related_name in TRIP_SOURCES:
            loadings = getattr(vehicle, related_name).annotate(transport_total=transport)
            for loading in loadings:
                trips.append({
                    'id': str(loading.pk),
                    'load_type': loading.LOAD_TYPE,
                    'bill_no': loading.bill_no,
                    'party_name': loading.party_name,
                    'village': loading.village,
                    'date': loading.date,
                    'total_kgs': loading.total_kgs,
                    'total_price': loading.total_price,
                    'transport_charges': loading.transport_total or Decimal('0.00'),
                    'grand_total': loading.grand_total,
                    'created_at': loading.created_at,
                    'status': loading.trip_status,
                    'started_at': loading.started_at,
                    'completed_at': loading.completed_at,
                })
        trips.sort(key=lambda trip: trip['created_at'], reverse=True)
        return trips


class DriverService:

    @staticmethod
    def _conflict(data, checks, exclude_pk=None):
        for field, message in checks:
            value = data.get(field)
            if not value:
                continue
            queryset = Driver.objects.filter(**{field: value})
            if exclude_pk is not None:
                queryset = queryset.exclude(pk=exclude_pk)
            if queryset.exists():
                return message
        return None

    @classmethod
    @transaction.atomic
    def create_driver(cls, data):
        data = dict(data)
        data.pop('remove_identity_proof', None)

        conflict = cls._conflict(data, DRIVER_CREATE_CONFLICTS)
        if conflict:
            raise FleetError(conflict)

        driver = Driver.objects.create(**data)
        logger.info(f"Driver {driver.name} ({driver.license_number}) added")
        return driver

    @classmethod
    @transaction.atomic
    def update_driver(cls, driver, data):
        data = dict(data)
        remove_proof = data.pop('remove_identity_proof', False)

        conflict = cls._conflict(data, DRIVER_UPDATE_CONFLICTS, exclude_pk=driver.pk)
        if conflict:
            raise FleetError(conflict)

        old_proof = driver.identity_proof if driver.identity_proof else None
        if remove_proof:
            data['identity_proof'] = None
        elif not data.get('identity_proof'):
            data.pop('identity_proof', None)
            old_proof = None

        for field, value in data.items():
            setattr(driver, field, value)
        driver.save()

        if old_proof:
            transaction.on_commit(lambda f=old_proof: f.storage.delete(f.name))

        logger.info(f"Driver {driver.name} updated")
        return driver

    @staticmethod
    @transaction.atomic
    def delete_driver(driver):
        proof = driver.identity_proof if driver.identity_proof else None
        name = driver.name
        driver.delete()

        if proof:
            transaction.on_commit(lambda f=proof: f.storage.delete(f.name))

        logger.info(f"Driver {name} deleted")
        return name
