"""
Loadings and Stock Integration Tests

Tests recording shipments and the stock they move:
- Farmer loadings: unpriced lines, grand total = net whole kilograms
- Agent loadings: lines priced after the 5% deduction, vehicle required
- Client loadings: refused when a variety is oversold
- Available varieties: net stock in whole trays
- Trip status updates and bill delete

SCENARIO:
=========
A trader buys Rohu in from a farmer (10 trays + 5 kg loose, no company
vehicle) and from an agent (2 trays at Rs 100/kg on a hired lorry), then
sells 10 trays to a client:
- Farmer bill: 355 kg, grand total 337 kg (355 x 0.95, whole kg)
- Agent bill: 70 kg, Rs 6,650 (70 x 100 x 0.95)
- Stock before the sale: 425 kg; a 13-tray (455 kg) order is refused
- Stock after the sale: 75 kg = 2 full trays
"""

import pytest
from decimal import Decimal
from rest_framework import status

from loadings.models import AgentLoading, AgentLoadingItem, ClientLoading, FarmerLoading, TripStatus

pytestmark = pytest.mark.django_db


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def farmer_payload(loading_date):
    return {
        'bill_no': 'F-1001',
        'farmer_name': 'Ramesh',
        'village': 'Kaikaluru',
        'date': loading_date,
        'items': [{'variety_code': 'rohu', 'no_trays': 10, 'loose': 5}],
    }


@pytest.fixture
def agent_payload(loading_date):
    return {
        'bill_no': 'A-2001',
        'agent_name': 'Suresh Agencies',
        'village': 'Bhimavaram',
        'date': loading_date,
        'vehicle_no': 'ap16 tx 1234',
        'items': [{'variety_code': 'ROHU', 'no_trays': 2, 'loose': 0, 'price_per_kg': 100}],
    }


@pytest.fixture
def stocked(admin_client, varieties, farmer_payload, agent_payload):
    """425 kg of Rohu in stock."""
    assert admin_client.post('/api/loadings/farmer/', farmer_payload).status_code == status.HTTP_201_CREATED
    assert admin_client.post('/api/loadings/agent/', agent_payload).status_code == status.HTTP_201_CREATED
    return varieties


# =============================================================================
# FARMER AND AGENT LOADINGS
# =============================================================================

class TestVendorLoadings:

    def test_farmer_loading_grand_total_is_net_whole_kgs(self, admin_client, varieties, farmer_payload):
        response = admin_client.post('/api/loadings/farmer/', farmer_payload)

        assert response.status_code == status.HTTP_201_CREATED
        loading = FarmerLoading.objects.get(bill_no='F-1001')
        assert loading.total_trays == 10
        assert loading.total_kgs == Decimal('355.00')
        assert loading.grand_total == Decimal('337.00')
        assert loading.total_price == Decimal('0.00')
        assert loading.fish_code == 'NA'
        assert response.data['items'][0]['variety_code'] == 'ROHU'

    def test_farmer_loading_with_vehicle_has_no_deduction(self, admin_client, varieties, farmer_payload):
        farmer_payload.update({'use_vehicle': True, 'vehicle_no': 'AP37 Z 0001'})

        admin_client.post('/api/loadings/farmer/', farmer_payload)

        loading = FarmerLoading.objects.get(bill_no='F-1001')
        assert loading.vehicle_no == 'AP37 Z 0001'
        assert loading.grand_total == Decimal('355.00')

    def test_duplicate_bill_number_is_rejected(self, admin_client, varieties, farmer_payload):
        admin_client.post('/api/loadings/farmer/', farmer_payload)
        response = admin_client.post('/api/loadings/farmer/', farmer_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Bill number already exists' in str(response.data['bill_no'])

    def test_loading_requires_items(self, admin_client, varieties, farmer_payload):
        farmer_payload['items'] = []

        response = admin_client.post('/api/loadings/farmer/', farmer_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'items' in response.data

    def test_agent_lines_are_priced_after_deduction(self, admin_client, varieties, agent_payload):
        response = admin_client.post('/api/loadings/agent/', agent_payload)

        assert response.status_code == status.HTTP_201_CREATED
        loading = AgentLoading.objects.get(bill_no='A-2001')
        item = loading.items.get()
        assert item.total_kgs == Decimal('70.00')
        assert item.total_price == Decimal('6650.00')
        assert loading.total_price == Decimal('6650.00')
        assert loading.vehicle_no == 'AP16 TX 1234'
        assert Decimal(response.data['grand_total']) == Decimal('6650.00')

    def test_agent_loading_requires_vehicle(self, admin_client, varieties, agent_payload):
        agent_payload.pop('vehicle_no')

        response = admin_client.post('/api/loadings/agent/', agent_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Vehicle is required'

    def test_unknown_variety_is_rejected(self, admin_client, varieties, farmer_payload):
        farmer_payload['items'] = [{'variety_code': 'SHARK', 'no_trays': 1}]

        response = admin_client.post('/api/loadings/farmer/', farmer_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# CLIENT LOADINGS AND STOCK
# =============================================================================

class TestClientLoadingsAndStock:

    def test_oversold_variety_is_refused(self, admin_client, stocked, loading_date):
        response = admin_client.post('/api/loadings/client/', {
            'bill_no': 'C-3001',
            'client_name': 'Fresh Mart',
            'date': loading_date,
            'items': [{'variety_code': 'ROHU', 'no_trays': 13}],
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'].startswith('Stock exceeded for ROHU')
        assert not ClientLoading.objects.exists()

    def test_client_loading_within_stock(self, admin_client, stocked, loading_date):
        response = admin_client.post('/api/loadings/client/', {
            'bill_no': 'C-3001',
            'client_name': 'Fresh Mart',
            'date': loading_date,
            'items': [{'variety_code': 'ROHU', 'no_trays': 10}],
        })

        assert response.status_code == status.HTTP_201_CREATED
        loading = ClientLoading.objects.get(bill_no='C-3001')
        assert loading.total_kgs == Decimal('350.00')
        assert loading.grand_total == Decimal('332.50')

    def test_vehicle_carried_client_loading_has_no_deduction(self, admin_client, stocked, loading_date):
        response = admin_client.post('/api/loadings/client/', {
            'bill_no': 'C-3001',
            'client_name': 'Fresh Mart',
            'date': loading_date,
            'vehicle_no': 'AP37 Z 0001',
            'items': [{'variety_code': 'ROHU', 'no_trays': 10}],
        })

        assert response.status_code == status.HTTP_201_CREATED
        loading = ClientLoading.objects.get(bill_no='C-3001')
        assert loading.vehicle_no == 'AP37 Z 0001'
        assert loading.total_kgs == Decimal('350.00')
        assert loading.grand_total == Decimal('350.00')

    def test_list_rejects_malformed_filters(self, admin_client, stocked):
        bad_client = admin_client.get('/api/loadings/client/?client=not-a-uuid')
        bad_date = admin_client.get('/api/loadings/farmer/?from=01-10-2025')
        in_range = admin_client.get('/api/loadings/farmer/?from=2025-10-01&to=2025-10-01')

        assert bad_client.status_code == status.HTTP_400_BAD_REQUEST
        assert 'client' in bad_client.data
        assert bad_date.status_code == status.HTTP_400_BAD_REQUEST
        assert bad_date.data['from'] == 'Invalid date format. Use YYYY-MM-DD'
        assert in_range.status_code == status.HTTP_200_OK
        assert in_range.data['count'] == 1

    def test_farmer_and_agent_stock_add_up(self, admin_client, stocked, loading_date):
        admin_client.post('/api/loadings/agent/', {
            'bill_no': 'A-2002',
            'agent_name': 'Suresh Agencies',
            'date': loading_date,
            'vehicle_no': 'AP16 TX 1234',
            'items': [{'variety_code': 'KATLA', 'no_trays': 1, 'loose': 20, 'price_per_kg': 90}],
        })

        response = admin_client.get('/api/stocks/available-varieties/')

        assert response.status_code == status.HTTP_200_OK
        rows = {row['code']: row for row in response.data}
        assert rows['ROHU']['net_kgs'] == Decimal('425.00')
        assert rows['ROHU']['net_trays'] == 12
        assert rows['KATLA']['net_kgs'] == Decimal('55.00')
        assert rows['KATLA']['net_trays'] == 1
        assert 'PANGAS' not in rows

    def test_client_loading_needs_a_weighed_line(self, admin_client, stocked, loading_date):
        response = admin_client.post('/api/loadings/client/', {
            'bill_no': 'C-3002',
            'client_name': 'Fresh Mart',
            'date': loading_date,
            'items': [{'variety_code': 'ROHU', 'no_trays': 0, 'loose': 0}],
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Select at least one variety'

    def test_available_varieties_report_whole_trays(self, admin_client, stocked, loading_date):
        admin_client.post('/api/loadings/client/', {
            'bill_no': 'C-3001',
            'client_name': 'Fresh Mart',
            'date': loading_date,
            'items': [{'variety_code': 'ROHU', 'no_trays': 10}],
        })

        response = admin_client.get('/api/stocks/available-varieties/')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        row = response.data[0]
        assert row['code'] == 'ROHU'
        assert row['net_kgs'] == Decimal('75.00')
        assert row['net_trays'] == 2


# =============================================================================
# TRIPS AND DELETION
# =============================================================================

class TestTripsAndDeletion:

    def test_complete_trip_sets_completed_at(self, admin_client, stocked):
        loading = FarmerLoading.objects.get(bill_no='F-1001')

        response = admin_client.patch(
            f'/api/loadings/former/{loading.pk}/trip/',
            {'trip_status': 'COMPLETED'},
        )

        assert response.status_code == status.HTTP_200_OK
        loading.refresh_from_db()
        assert loading.trip_status == TripStatus.COMPLETED
        assert loading.completed_at is not None

    def test_invalid_loading_type(self, admin_client, stocked):
        loading = FarmerLoading.objects.get(bill_no='F-1001')

        response = admin_client.patch(f'/api/loadings/ship/{loading.pk}/trip/', {'trip_status': 'COMPLETED'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid loading type'

    def test_delete_removes_lines(self, admin_client, stocked):
        loading = AgentLoading.objects.get(bill_no='A-2001')

        response = admin_client.delete(f'/api/loadings/agent/{loading.pk}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['bill_no'] == 'A-2001'
        assert not AgentLoading.objects.filter(pk=loading.pk).exists()
        assert not AgentLoadingItem.objects.filter(loading_id=loading.pk).exists()

    def test_delete_missing_bill(self, admin_client, varieties):
        response = admin_client.delete('/api/loadings/farmer/00000000-0000-0000-0000-000000000000/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Bill not found'


# =============================================================================
# PERMISSIONS
# =============================================================================

class TestLoadingPermissions:

    def test_unauthenticated_request_is_rejected(self, api_client, varieties):
        response = api_client.get('/api/loadings/farmer/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_role_without_permission_is_forbidden(self, clerk_client, varieties):
        response = clerk_client.get('/api/loadings/farmer/')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_role_permission_grants_access(self, clerk_client, clerk_user, varieties):
        from accounts.models import RolePermission

        RolePermission.objects.create(role=clerk_user.role, permission='loadings.view')

        response = clerk_client.get('/api/loadings/farmer/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 0

    def test_client_loadings_need_their_own_permission(self, clerk_client, clerk_user, varieties):
        from accounts.models import RolePermission

        RolePermission.objects.create(role=clerk_user.role, permission='loadings.view')

        response = clerk_client.get('/api/loadings/client/')

        assert response.status_code == status.HTTP_403_FORBIDDEN
