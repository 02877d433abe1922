"""
Fleet Integration Tests

Tests vehicles, drivers and the trips they run:
- Own and rented vehicle registration with unique plate numbers
- Paginated, filterable vehicle lists with a meta block
- Driver registration with unique phone, licence and Aadhar numbers
- One driver per vehicle; assignment and release after a trip
- Trip history with transport charges
- Daily document expiry check

SCENARIO:
=========
The company registers its own lorry AP16 TX 1234 and driver Prasad, assigns
him, and sends the lorry out on agent bill A-2001 with Rs 2,500 of transport.
The vehicle page lists that trip; marking the lorry available completes it.
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework import status

from fleet.models import Driver, Ownership, Vehicle
from fleet.tasks import check_vehicle_document_expiry
from loadings.models import AgentLoading, TripStatus

pytestmark = pytest.mark.django_db


# =============================================================================
# FIXTURES
# =============================================================================

def driver_payload(**overrides):
    payload = {
        'name': 'Prasad',
        'phone': '9848012345',
        'license_number': 'AP1620190001234',
        'address': 'Bhimavaram',
        'age': 34,
        'aadhar_number': '234567890123',
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def own_vehicle(admin_client):
    response = admin_client.post('/api/vehicles/own/', {
        'vehicle_number': 'ap16 tx 1234',
        'fuel_type': 'DIESEL',
        'manufacturer': 'Tata',
        'capacity_in_tons': '9.00',
    })
    assert response.status_code == status.HTTP_201_CREATED, response.data
    return Vehicle.objects.get(pk=response.data['id'])


@pytest.fixture
def driver(admin_client):
    response = admin_client.post('/api/drivers/', driver_payload(), format='json')
    assert response.status_code == status.HTTP_201_CREATED, response.data
    return Driver.objects.get(pk=response.data['id'])


@pytest.fixture
def trip(admin_client, own_vehicle, varieties, loading_date):
    response = admin_client.post('/api/loadings/agent/', {
        'bill_no': 'A-2001',
        'agent_name': 'Suresh Agencies',
        'date': loading_date,
        'vehicle': str(own_vehicle.pk),
        'items': [{'variety_code': 'ROHU', 'no_trays': 2, 'price_per_kg': 100}],
    })
    assert response.status_code == status.HTTP_201_CREATED, response.data
    loading = AgentLoading.objects.get(bill_no='A-2001')
    admin_client.post('/api/payments/dispatch/', {
        'source_type': 'AGENT',
        'source_record_id': str(loading.pk),
        'type': 'TRANSPORT',
        'amount': 2500,
    })
    return loading


# =============================================================================
# VEHICLES
# =============================================================================

class TestVehicles:

    def test_own_vehicle_number_is_uppercased(self, own_vehicle):
        assert own_vehicle.vehicle_number == 'AP16 TX 1234'
        assert own_vehicle.ownership == Ownership.OWN

    def test_duplicate_vehicle_number(self, admin_client, own_vehicle):
        response = admin_client.post('/api/vehicles/rent/', {
            'vehicle_number': 'AP16 TX 1234',
            'rental_agency': 'Sri Sai Transports',
            'rental_rate_per_day': '3500.00',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Vehicle number already exists'

    def test_own_vehicle_needs_fuel_type(self, admin_client):
        response = admin_client.post('/api/vehicles/own/', {'vehicle_number': 'AP37 Z 0001'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Fuel type is required' in str(response.data['fuel_type'])

    def test_rent_vehicle_needs_agency_and_rate(self, admin_client):
        response = admin_client.post('/api/vehicles/rent/', {'vehicle_number': 'AP37 Z 0001'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'rental_agency' in response.data
        assert 'rental_rate_per_day' in response.data

    def test_list_has_meta_block(self, admin_client, own_vehicle):
        admin_client.post('/api/vehicles/own/', {'vehicle_number': 'AP37 Z 0001', 'fuel_type': 'CNG'})

        response = admin_client.get('/api/vehicles/own/?limit=1&sort=OLDEST')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['meta'] == {'page': 1, 'limit': 1, 'total': 2, 'total_pages': 2}
        assert response.data['data'][0]['vehicle_number'] == 'AP16 TX 1234'

    def test_list_filters(self, admin_client, own_vehicle, driver):
        admin_client.post('/api/vehicles/own/', {'vehicle_number': 'AP37 Z 0001', 'fuel_type': 'CNG'})
        admin_client.post('/api/vehicles/assign-driver/', {
            'vehicle_id': str(own_vehicle.pk),
            'driver_id': str(driver.pk),
        })

        by_fuel = admin_client.get('/api/vehicles/own/?fuel_type=CNG')
        assigned = admin_client.get('/api/vehicles/own/?assigned=ASSIGNED')
        by_driver = admin_client.get('/api/vehicles/own/?search=prasad')

        assert [v['vehicle_number'] for v in by_fuel.data['data']] == ['AP37 Z 0001']
        assert [v['vehicle_number'] for v in assigned.data['data']] == ['AP16 TX 1234']
        assert by_driver.data['meta']['total'] == 1

    def test_rent_search_requires_every_term(self, admin_client):
        admin_client.post('/api/vehicles/rent/', {
            'vehicle_number': 'AP39 R 5555',
            'rental_agency': 'Sri Sai Transports',
            'rental_rate_per_day': '3500.00',
        })

        both = admin_client.get('/api/vehicles/rent/?search=sai AP39')
        mismatch = admin_client.get('/api/vehicles/rent/?search=sai TS09')

        assert both.data['meta']['total'] == 1
        assert mismatch.data['meta']['total'] == 0

    def test_update_through_wrong_ownership(self, admin_client, own_vehicle):
        response = admin_client.put(f'/api/vehicles/rent/{own_vehicle.pk}/', {'rental_agency': 'X'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Vehicle is not a rent vehicle'

    def test_partial_update_and_delete(self, admin_client, own_vehicle):
        updated = admin_client.put(f'/api/vehicles/own/{own_vehicle.pk}/', {'manufacturer': 'Ashok Leyland'})
        deleted = admin_client.delete(f'/api/vehicles/own/{own_vehicle.pk}/')

        assert updated.status_code == status.HTTP_200_OK
        assert updated.data['manufacturer'] == 'Ashok Leyland'
        assert updated.data['fuel_type'] == 'DIESEL'
        assert deleted.data['message'] == 'Vehicle deleted successfully'
        assert not Vehicle.objects.filter(pk=own_vehicle.pk).exists()

    def test_fleet_permissions_split_read_and_write(self, clerk_client, clerk_user):
        from accounts.models import RolePermission

        RolePermission.objects.create(role=clerk_user.role, permission='vehicles.view')

        read = clerk_client.get('/api/vehicles/own/')
        write = clerk_client.post('/api/vehicles/own/', {'vehicle_number': 'AP37 Z 0001', 'fuel_type': 'CNG'})

        assert read.status_code == status.HTTP_200_OK
        assert write.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# DRIVERS
# =============================================================================

class TestDrivers:

    def test_duplicate_licence(self, admin_client, driver):
        response = admin_client.post('/api/drivers/', driver_payload(
            phone='9000000001',
            aadhar_number='345678901234',
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Driver with this license number already exists'

    def test_age_and_aadhar_validation(self, admin_client):
        response = admin_client.post('/api/drivers/', driver_payload(age=16, aadhar_number='12AB'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'age' in response.data
        assert 'aadhar_number' in response.data

    def test_update_to_taken_phone(self, admin_client, driver):
        other = admin_client.post('/api/drivers/', driver_payload(
            name='Ravi',
            phone='9000000001',
            license_number='AP1620190009999',
            aadhar_number='345678901234',
        ), format='json').data

        response = admin_client.patch(f"/api/drivers/{other['id']}/", {'phone': '9848012345'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Phone already exists'

    def test_detail_shows_assigned_vehicle(self, admin_client, driver, own_vehicle):
        before = admin_client.get(f'/api/drivers/{driver.pk}/')
        admin_client.post('/api/vehicles/assign-driver/', {
            'vehicle_id': str(own_vehicle.pk),
            'driver_id': str(driver.pk),
        })
        after = admin_client.get(f'/api/drivers/{driver.pk}/')

        assert before.data['assigned_vehicle'] is None
        assert after.data['assigned_vehicle']['vehicle_number'] == 'AP16 TX 1234'

    def test_delete_driver(self, admin_client, driver):
        response = admin_client.delete(f'/api/drivers/{driver.pk}/')
        missing = admin_client.get(f'/api/drivers/{driver.pk}/')

        assert response.data['message'] == 'Driver deleted successfully'
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert missing.data['error'] == 'Driver not found'


# =============================================================================
# ASSIGNMENTS AND TRIPS
# =============================================================================

class TestAssignmentsAndTrips:

    def test_assign_driver(self, admin_client, own_vehicle, driver):
        response = admin_client.post('/api/vehicles/assign-driver/', {
            'vehicle_id': str(own_vehicle.pk),
            'driver_id': str(driver.pk),
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['vehicle']['assigned_driver']['name'] == 'Prasad'

    def test_vehicle_takes_one_driver(self, admin_client, own_vehicle, driver):
        other = Driver.objects.create(
            name='Ravi', phone='9000000001', license_number='L-2', address='Eluru', age=40,
            aadhar_number='345678901234',
        )
        admin_client.post('/api/vehicles/assign-driver/', {
            'vehicle_id': str(own_vehicle.pk),
            'driver_id': str(driver.pk),
        })

        response = admin_client.post('/api/vehicles/assign-driver/', {
            'vehicle_id': str(own_vehicle.pk),
            'driver_id': str(other.pk),
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'This vehicle already has a driver assigned'

    def test_driver_takes_one_vehicle(self, admin_client, own_vehicle, driver):
        second = Vehicle.objects.create(vehicle_number='AP37 Z 0001', ownership=Ownership.OWN, fuel_type='CNG')
        admin_client.post('/api/vehicles/assign-driver/', {
            'vehicle_id': str(own_vehicle.pk),
            'driver_id': str(driver.pk),
        })

        response = admin_client.post('/api/vehicles/assign-driver/', {
            'vehicle_id': str(second.pk),
            'driver_id': str(driver.pk),
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'This driver is already assigned to a vehicle'

    def test_assign_requires_both_ids(self, admin_client, own_vehicle):
        response = admin_client.post('/api/vehicles/assign-driver/', {'vehicle_id': str(own_vehicle.pk)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'vehicle_id and driver_id are required'

    def test_free_assigned_vehicles_exclude_busy_ones(self, admin_client, own_vehicle, driver, trip):
        idle = Vehicle.objects.create(vehicle_number='AP37 Z 0001', ownership=Ownership.OWN, fuel_type='CNG')
        other = Driver.objects.create(
            name='Ravi', phone='9000000001', license_number='L-2', address='Eluru', age=40,
            aadhar_number='345678901234',
        )
        for vehicle, person in ((own_vehicle, driver), (idle, other)):
            admin_client.post('/api/vehicles/assign-driver/', {
                'vehicle_id': str(vehicle.pk),
                'driver_id': str(person.pk),
            })

        response = admin_client.get('/api/vehicles/assign-driver/')

        assert response.status_code == status.HTTP_200_OK
        assert [row['vehicle_number'] for row in response.data] == ['AP37 Z 0001']
        assert response.data[0]['driver_name'] == 'Ravi'

    def test_vehicle_detail_lists_trips(self, admin_client, own_vehicle, trip):
        response = admin_client.get(f'/api/vehicles/{own_vehicle.pk}/')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['trips']) == 1
        row = response.data['trips'][0]
        assert row['bill_no'] == 'A-2001'
        assert row['load_type'] == 'AGENT'
        assert row['party_name'] == 'Suresh Agencies'
        assert row['transport_charges'] == Decimal('2500.00')

    def test_mark_available_completes_trip(self, admin_client, own_vehicle, trip):
        response = admin_client.post('/api/vehicles/mark-available/', {'vehicle_id': str(own_vehicle.pk)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['bill_no'] == 'A-2001'
        trip.refresh_from_db()
        assert trip.vehicle is None
        assert trip.vehicle_no == ''
        assert trip.trip_status == TripStatus.COMPLETED
        assert trip.completed_at is not None

    def test_mark_available_without_trip(self, admin_client, own_vehicle):
        response = admin_client.post('/api/vehicles/mark-available/', {'vehicle_id': str(own_vehicle.pk)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'No active trip found for this vehicle'


# =============================================================================
# DOCUMENT EXPIRY
# =============================================================================

class TestDocumentExpiry:

    def test_expiring_documents_are_reported(self, settings):
        settings.DOCUMENT_EXPIRY_WARNING_DAYS = 30
        today = timezone.localdate()
        Vehicle.objects.create(
            vehicle_number='AP16 TX 1234',
            ownership=Ownership.OWN,
            fuel_type='DIESEL',
            insurance_expiry=today + timedelta(days=5),
            permit_expiry=today + timedelta(days=300),
        )
        Vehicle.objects.create(
            vehicle_number='AP37 Z 0001',
            ownership=Ownership.OWN,
            fuel_type='CNG',
            rc_validity=today + timedelta(days=200),
        )

        result = check_vehicle_document_expiry()

        assert result['count'] == 1
        vehicle = result['vehicles'][0]
        assert vehicle['vehicle_number'] == 'AP16 TX 1234'
        assert [doc['document'] for doc in vehicle['documents']] == ['Insurance']
