"""
Vendor and Client Bill Integration Tests

Tests editing bills line by line after the loading was recorded:
- Vendor lines priced in whole rupees after the 5% deduction
- Client lines charged for their share of the billable weight
- Stock checks when a line is added to a client bill
- Removing the last line removes the bill
- Excel exports

SCENARIO:
=========
An agent bill holds 2 trays of Rohu at Rs 100/kg (Rs 6,650). A third tray
is added at Rs 100 (Rs 3,325), then repriced at Rs 120 (Rs 3,990).
A client bill of 2 trays (no vehicle) gets a third tray: 105 kg, billable
99.75 kg, so the new line carries 33.25 kg and costs Rs 3,325 at Rs 100.
"""

import pytest
from decimal import Decimal
from rest_framework import status

from loadings.models import AgentLoading, ClientLoading, FarmerLoading

pytestmark = pytest.mark.django_db


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def agent_bill(admin_client, varieties, loading_date):
    response = admin_client.post('/api/loadings/agent/', {
        'bill_no': 'A-2001',
        'agent_name': 'Suresh Agencies',
        'date': loading_date,
        'vehicle_no': 'AP16 TX 1234',
        'items': [{'variety_code': 'ROHU', 'no_trays': 2, 'price_per_kg': 100}],
    })
    assert response.status_code == status.HTTP_201_CREATED
    return AgentLoading.objects.get(bill_no='A-2001')


@pytest.fixture
def farmer_bill(admin_client, varieties, loading_date):
    response = admin_client.post('/api/loadings/farmer/', {
        'bill_no': 'F-1001',
        'farmer_name': 'Ramesh',
        'date': loading_date,
        'items': [{'variety_code': 'ROHU', 'no_trays': 10, 'loose': 5}],
    })
    assert response.status_code == status.HTTP_201_CREATED
    return FarmerLoading.objects.get(bill_no='F-1001')


@pytest.fixture
def client_bill(admin_client, farmer_bill, loading_date):
    response = admin_client.post('/api/loadings/client/', {
        'bill_no': 'C-3001',
        'client_name': 'Fresh Mart',
        'date': loading_date,
        'items': [{'variety_code': 'ROHU', 'no_trays': 2}],
    })
    assert response.status_code == status.HTTP_201_CREATED
    return ClientLoading.objects.get(bill_no='C-3001')


# =============================================================================
# VENDOR BILLS
# =============================================================================

class TestVendorBillItems:

    def test_add_item_prices_line_in_whole_rupees(self, admin_client, agent_bill):
        response = admin_client.post('/api/vendor-bills/add-item/', {
            'source': 'agent',
            'loading_id': str(agent_bill.pk),
            'variety_code': 'rohu',
            'no_trays': 1,
            'price_per_kg': 100,
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['source'] == 'agent'
        assert Decimal(response.data['item']['total_price']) == Decimal('3325')
        agent_bill.refresh_from_db()
        assert agent_bill.total_price == Decimal('9975.00')
        assert agent_bill.grand_total == Decimal('9975.00')
        assert agent_bill.total_trays == 3

    def test_add_item_to_missing_bill(self, admin_client, varieties):
        response = admin_client.post('/api/vendor-bills/add-item/', {
            'source': 'farmer',
            'loading_id': '00000000-0000-0000-0000-000000000000',
            'variety_code': 'ROHU',
            'no_trays': 1,
        })

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Farmer bill not found'

    def test_invalid_source(self, admin_client, agent_bill):
        response = admin_client.post('/api/vendor-bills/add-item/', {
            'source': 'client',
            'loading_id': str(agent_bill.pk),
            'variety_code': 'ROHU',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'source' in response.data

    def test_update_item_reprices_line(self, admin_client, agent_bill):
        added = admin_client.post('/api/vendor-bills/add-item/', {
            'source': 'agent',
            'loading_id': str(agent_bill.pk),
            'variety_code': 'ROHU',
            'no_trays': 1,
            'price_per_kg': 100,
        }).data['item']

        response = admin_client.patch(f"/api/vendor-bills/item/{added['id']}/", {'price_per_kg': 120})

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['item']['total_price']) == Decimal('3990')
        agent_bill.refresh_from_db()
        assert agent_bill.total_price == Decimal('10640.00')

    def test_update_missing_item(self, admin_client, varieties):
        response = admin_client.patch(
            '/api/vendor-bills/item/00000000-0000-0000-0000-000000000000/',
            {'price_per_kg': 10},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Item not found'

    def test_deleting_last_line_removes_bill(self, admin_client, farmer_bill):
        item = farmer_bill.items.get()

        response = admin_client.delete(f'/api/vendor-bills/item/{item.pk}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deleted_bill'] is True
        assert response.data['source'] == 'farmer'
        assert not FarmerLoading.objects.filter(pk=farmer_bill.pk).exists()

    def test_deleting_one_of_several_lines_keeps_bill(self, admin_client, agent_bill):
        admin_client.post('/api/vendor-bills/add-item/', {
            'source': 'agent',
            'loading_id': str(agent_bill.pk),
            'variety_code': 'KATLA',
            'no_trays': 1,
            'price_per_kg': 100,
        })
        rohu_line = agent_bill.items.get(variety_id='ROHU')

        response = admin_client.delete(f'/api/vendor-bills/item/{rohu_line.pk}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deleted_bill'] is False
        agent_bill.refresh_from_db()
        assert agent_bill.total_price == Decimal('3325.00')

    def test_export_returns_workbook(self, admin_client, agent_bill, farmer_bill):
        response = admin_client.get('/api/vendor-bills/export/')

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith(
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        assert 'vendor_bills_' in response['Content-Disposition']


# =============================================================================
# CLIENT BILLS
# =============================================================================

class TestClientBillItems:

    def test_add_item_reprices_bill(self, admin_client, client_bill):
        response = admin_client.post('/api/client-bills/item/', {
            'loading_id': str(client_bill.pk),
            'variety_code': 'ROHU',
            'no_trays': 1,
        })

        assert response.status_code == status.HTTP_201_CREATED
        client_bill.refresh_from_db()
        assert client_bill.total_kgs == Decimal('105.00')
        assert client_bill.grand_total == Decimal('99.75')

    def test_add_item_beyond_stock_is_refused(self, admin_client, client_bill):
        response = admin_client.post('/api/client-bills/item/', {
            'loading_id': str(client_bill.pk),
            'variety_code': 'KATLA',
            'no_trays': 1,
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'].startswith('Stock exceeded for KATLA')

    def test_add_empty_line_is_refused(self, admin_client, client_bill):
        response = admin_client.post('/api/client-bills/item/', {
            'loading_id': str(client_bill.pk),
            'variety_code': 'ROHU',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Enter trays or loose'

    def test_price_update_charges_effective_kgs(self, admin_client, client_bill):
        added = admin_client.post('/api/client-bills/item/', {
            'loading_id': str(client_bill.pk),
            'variety_code': 'ROHU',
            'no_trays': 1,
        }).data['item']

        response = admin_client.patch(f"/api/client-bills/item/{added['id']}/", {'price_per_kg': 100})

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['item']['total_price']) == Decimal('3325.00')
        client_bill.refresh_from_db()
        assert client_bill.total_price == Decimal('3325.00')

    def test_explicit_total_price_overrides(self, admin_client, client_bill):
        item = client_bill.items.get()

        response = admin_client.patch(f'/api/client-bills/item/{item.pk}/', {'total_price': 5000})

        assert response.status_code == status.HTTP_200_OK
        client_bill.refresh_from_db()
        assert client_bill.total_price == Decimal('5000.00')

    def test_update_requires_a_price(self, admin_client, client_bill):
        item = client_bill.items.get()

        response = admin_client.patch(f'/api/client-bills/item/{item.pk}/', {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_line_reprices_remaining(self, admin_client, client_bill):
        original = client_bill.items.get()
        admin_client.patch(f'/api/client-bills/item/{original.pk}/', {'price_per_kg': 90})
        added = admin_client.post('/api/client-bills/item/', {
            'loading_id': str(client_bill.pk),
            'variety_code': 'ROHU',
            'no_trays': 1,
        }).data['item']
        admin_client.patch(f"/api/client-bills/item/{added['id']}/", {'price_per_kg': 100})
        client_bill.refresh_from_db()
        assert client_bill.total_price == Decimal('9310.00')

        response = admin_client.delete(f"/api/client-bills/item/{added['id']}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Item deleted'
        assert response.data['deleted_bill'] is False
        client_bill.refresh_from_db()
        assert client_bill.total_kgs == Decimal('70.00')
        assert client_bill.grand_total == Decimal('66.50')
        assert client_bill.total_price == Decimal('5985.00')

    def test_delete_last_line_removes_bill(self, admin_client, client_bill):
        item = client_bill.items.get()

        response = admin_client.delete(f'/api/client-bills/item/{item.pk}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Item deleted, bill removed (last item)'
        assert response.data['deleted_bill'] is True
        assert not ClientLoading.objects.filter(pk=client_bill.pk).exists()
        stock = admin_client.get('/api/stocks/available-varieties/').data
        assert stock[0]['net_kgs'] == Decimal('355.00')

    def test_delete_missing_line(self, admin_client, client_bill):
        response = admin_client.delete('/api/client-bills/item/00000000-0000-0000-0000-000000000000/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Item not found'

    def test_update_total(self, admin_client, client_bill):
        item = client_bill.items.get()
        admin_client.patch(f'/api/client-bills/item/{item.pk}/', {'total_price': 1200})

        response = admin_client.post('/api/client-bills/update-total/', {'loading_id': str(client_bill.pk)})

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['total_price']) == Decimal('1200.00')

    def test_update_total_for_missing_bill(self, admin_client, varieties):
        response = admin_client.post(
            '/api/client-bills/update-total/',
            {'loading_id': '00000000-0000-0000-0000-000000000000'},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_export_returns_workbook(self, admin_client, client_bill):
        response = admin_client.get('/api/client-bills/export/?from=2025-09-01&to=2025-10-31')

        assert response.status_code == status.HTTP_200_OK
        assert 'client_bills_' in response['Content-Disposition']
