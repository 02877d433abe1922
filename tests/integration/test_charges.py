"""
Dispatch Charge and Packing Amount Integration Tests

Tests the extra costs recorded against a loading:
- Dispatch charges (ice, transport, other, packing) keep the loading's
  dispatch_charges_total in step
- Packing payments get a yearly RS-PACKING number and keep the loading's
  packing_amount_total in step
- The agent bill's displayed grand total includes both

SCENARIO:
=========
An agent bill worth Rs 6,650 picks up Rs 500 of transport and Rs 300 of
ice, and the packing crew is paid Rs 1,200:
- dispatch_charges_total: 800
- packing_amount_total: 1,200
- displayed grand total: 8,650
"""

import pytest
from decimal import Decimal
from django.utils import timezone
from rest_framework import status

from charges.models import DispatchCharge
from loadings.models import AgentLoading

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


def dispatch_payload(loading, charge_type='TRANSPORT', amount=500, **extra):
    return {
        'source_type': 'agent',
        'source_record_id': str(loading.pk),
        'type': charge_type,
        'amount': amount,
        **extra,
    }


def packing_payload(**extra):
    return {
        'mode': 'loading',
        'workers': 4,
        'temperature': 4.5,
        'total_amount': 1200,
        **extra,
    }


# =============================================================================
# DISPATCH CHARGES
# =============================================================================

class TestDispatchCharges:

    def test_charges_roll_up_to_loading(self, admin_client, agent_bill):
        first = admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill))
        second = admin_client.post(
            '/api/payments/dispatch/',
            dispatch_payload(agent_bill, 'ICE_COOLING', 300),
        )

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_201_CREATED
        assert first.data['source_type'] == 'AGENT'
        agent_bill.refresh_from_db()
        assert agent_bill.dispatch_charges_total == Decimal('800.00')

    def test_deleting_charge_reduces_total(self, admin_client, agent_bill):
        admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill))
        admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill, 'ICE_COOLING', 300))

        DispatchCharge.objects.get(type='TRANSPORT').delete()

        agent_bill.refresh_from_db()
        assert agent_bill.dispatch_charges_total == Decimal('300.00')

    def test_other_charge_needs_label(self, admin_client, agent_bill):
        response = admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill, 'OTHER', 100))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'label' in response.data

    def test_invalid_type_and_amount(self, admin_client, agent_bill):
        bad_type = admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill, 'FUEL', 100))
        bad_amount = admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill, amount=0))

        assert bad_type.status_code == status.HTTP_400_BAD_REQUEST
        assert bad_amount.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Valid positive amount is required' in str(bad_amount.data['amount'])

    def test_unknown_loading(self, admin_client, agent_bill):
        payload = dispatch_payload(agent_bill)
        payload['source_record_id'] = '00000000-0000-0000-0000-000000000000'

        response = admin_client.post('/api/payments/dispatch/', payload)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'].startswith('No agent loading found')

    def test_list_charges_for_loading(self, admin_client, agent_bill):
        admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill))

        response = admin_client.get(
            f'/api/payments/dispatch/?source_record_id={agent_bill.pk}&source_type=AGENT'
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['type'] == 'TRANSPORT'

    def test_list_requires_source_record_id(self, admin_client, agent_bill):
        response = admin_client.get('/api/payments/dispatch/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_rejects_malformed_source_record_id(self, admin_client, agent_bill):
        dispatch = admin_client.get('/api/payments/dispatch/?source_record_id=not-a-uuid')
        packing = admin_client.get('/api/payments/packing-amount/?source_record_id=not-a-uuid')

        assert dispatch.status_code == status.HTTP_400_BAD_REQUEST
        assert 'source_record_id' in dispatch.data
        assert packing.status_code == status.HTTP_400_BAD_REQUEST
        assert 'source_record_id' in packing.data


# =============================================================================
# PACKING AMOUNTS
# =============================================================================

class TestPackingAmounts:

    def test_packing_bill_numbers_run_per_year(self, admin_client, varieties):
        yy = f"{timezone.localdate().year % 100:02d}"

        first = admin_client.post('/api/payments/packing-amount/', packing_payload())
        second = admin_client.post('/api/payments/packing-amount/', packing_payload(mode='unloading'))

        assert first.status_code == status.HTTP_201_CREATED
        assert first.data['bill_no'] == f'RS-PACKING-{yy}-0001'
        assert second.data['bill_no'] == f'RS-PACKING-{yy}-0002'
        assert first.data['party_name'] is None

    def test_linked_packing_rolls_up_to_loading(self, admin_client, agent_bill):
        response = admin_client.post('/api/payments/packing-amount/', packing_payload(
            source_type='AGENT',
            source_record_id=str(agent_bill.pk),
        ))

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['party_name'] == 'Suresh Agencies'
        assert response.data['vehicle_no'] == 'AP16 TX 1234'
        agent_bill.refresh_from_db()
        assert agent_bill.packing_amount_total == Decimal('1200.00')

    def test_non_cash_payment_needs_reference(self, admin_client, varieties):
        response = admin_client.post('/api/payments/packing-amount/', packing_payload(payment_mode='upi'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'reference' in response.data

    def test_invalid_mode(self, admin_client, varieties):
        response = admin_client.post('/api/payments/packing-amount/', packing_payload(mode='sorting'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_deleting_loading_unlinks_packing(self, admin_client, agent_bill):
        admin_client.post('/api/payments/packing-amount/', packing_payload(
            source_type='AGENT',
            source_record_id=str(agent_bill.pk),
        ))

        admin_client.delete(f'/api/loadings/agent/{agent_bill.pk}/')

        response = admin_client.get('/api/payments/packing-amount/')
        assert response.data['count'] == 1
        assert response.data['results'][0]['source_type'] == ''
        assert response.data['results'][0]['source_record_id'] is None

    def test_deleting_loading_keeps_dispatch_charges(self, admin_client, agent_bill):
        admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill))

        response = admin_client.delete(f'/api/loadings/agent/{agent_bill.pk}/')

        assert response.status_code == status.HTTP_200_OK
        charge = DispatchCharge.objects.get()
        assert charge.amount == Decimal('500.00')
        assert charge.source_type == ''
        assert charge.source_record_id is None
        assert charge.agent_loading_id is None


# =============================================================================
# AGENT GRAND TOTAL
# =============================================================================

class TestAgentGrandTotal:

    def test_display_total_includes_charges_and_packing(self, admin_client, agent_bill):
        admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill))
        admin_client.post('/api/payments/dispatch/', dispatch_payload(agent_bill, 'ICE_COOLING', 300))
        admin_client.post('/api/payments/packing-amount/', packing_payload(
            source_type='agent',
            source_record_id=str(agent_bill.pk),
        ))

        response = admin_client.get(f'/api/loadings/agent/{agent_bill.pk}/')

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['grand_total']) == Decimal('8650.00')
        assert Decimal(response.data['dispatch_charges_total']) == Decimal('800.00')
