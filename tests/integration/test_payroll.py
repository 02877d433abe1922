"""
Payroll Integration Tests

Tests the employee register and monthly salary records:
- Sequential RS-EMP codes that are never reused
- 409 conflicts on shared Aadhaar, PAN, mobile, email or account number
- Field validation of identity numbers
- Drop-down of employees without a login
- Salary CRUD with YYYY-MM months

SCENARIO:
=========
The office registers Venkat (RS-EMP-0001) and Lakshmi (RS-EMP-0002).
A third registration reusing Venkat's PAN is refused with 409. Deleting
Lakshmi does not free her code: the next employee is RS-EMP-0003.
"""

import pytest
from decimal import Decimal
from rest_framework import status

from payroll.models import Employee, Salary
from tests.conftest import employee_data

pytestmark = pytest.mark.django_db


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def second_employee_data():
    return employee_data(
        full_name='Lakshmi Devi',
        gender='Female',
        aadhaar='345678901234',
        pan='BCDEF2345G',
        mobile='9123456780',
        email='lakshmi@example.com',
        account_number='30007654321',
    )


# =============================================================================
# EMPLOYEES
# =============================================================================

class TestEmployeeRegister:

    def test_codes_are_sequential(self, admin_client, employee, second_employee_data):
        response = admin_client.post('/api/employees/', second_employee_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert employee.employee_id == 'RS-EMP-0001'
        assert response.data['employee_id'] == 'RS-EMP-0002'

    def test_codes_are_not_reused_after_delete(self, admin_client, employee, second_employee_data):
        second = admin_client.post('/api/employees/', second_employee_data, format='json').data
        admin_client.delete(f"/api/employees/{second['id']}/")

        third = admin_client.post('/api/employees/', employee_data(
            aadhaar='456789012345',
            pan='CDEFG3456H',
            mobile='9012345678',
            email='third@example.com',
            account_number='30009999999',
        ), format='json')

        assert third.data['employee_id'] == 'RS-EMP-0003'

    def test_duplicate_identity_is_a_conflict(self, admin_client, employee, second_employee_data):
        second_employee_data['pan'] = 'ABCDE1234F'
        second_employee_data['mobile'] = '9876543210'

        response = admin_client.post('/api/employees/', second_employee_data, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert 'PAN' in response.data['error']
        assert 'Mobile number' in response.data['error']
        assert Employee.objects.count() == 1

    def test_update_to_taken_email_is_a_conflict(self, admin_client, employee, second_employee_data):
        second = admin_client.post('/api/employees/', second_employee_data, format='json').data

        response = admin_client.patch(
            f"/api/employees/{second['id']}/",
            {'email': 'venkat@example.com'},
            format='json',
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'Employee with same Email already exists'

    def test_update_own_values_is_allowed(self, admin_client, employee):
        response = admin_client.patch(
            f'/api/employees/{employee.pk}/',
            {'pan': 'abcde1234f', 'designation': 'Supervisor'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['designation'] == 'Supervisor'
        assert response.data['pan'] == 'ABCDE1234F'

    def test_invalid_identity_numbers(self, admin_client):
        response = admin_client.post('/api/employees/', employee_data(
            aadhaar='12345',
            pan='1234',
            mobile='1234567890',
            ifsc='SBIN1234',
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        for field in ('aadhaar', 'pan', 'mobile', 'ifsc'):
            assert field in response.data

    def test_alt_mobile_must_differ(self, admin_client):
        response = admin_client.post(
            '/api/employees/',
            employee_data(alt_mobile='9876543210'),
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'alt_mobile' in response.data

    def test_missing_employee(self, admin_client):
        response = admin_client.get('/api/employees/00000000-0000-0000-0000-000000000000/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Employee not found'

    def test_drop_down_excludes_employees_with_login(self, admin_client, admin_user, employee, second_employee_data):
        second = admin_client.post('/api/employees/', second_employee_data, format='json').data
        admin_user.employee = employee
        admin_user.save()

        response = admin_client.get('/api/employees/drop-down/')

        assert response.status_code == status.HTTP_200_OK
        assert [row['id'] for row in response.data] == [second['id']]


# =============================================================================
# SALARIES
# =============================================================================

class TestSalaries:

    def test_create_stores_first_of_month(self, admin_client, admin_user):
        response = admin_client.post('/api/salaries/', {
            'user': str(admin_user.pk),
            'month': '2025-09',
            'amount': '18000.00',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['month'] == '2025-09'
        salary = Salary.objects.get(pk=response.data['id'])
        assert salary.month.day == 1
        assert salary.amount == Decimal('18000.00')

    def test_invalid_month(self, admin_client, admin_user):
        response = admin_client.post('/api/salaries/', {
            'user': str(admin_user.pk),
            'month': 'September',
            'amount': '18000.00',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'month' in response.data

    def test_put_updates_sent_fields_only(self, admin_client, admin_user):
        created = admin_client.post('/api/salaries/', {
            'user': str(admin_user.pk),
            'month': '2025-09',
            'amount': '18000.00',
            'notes': 'September',
        }).data

        response = admin_client.put(f"/api/salaries/{created['id']}/", {'amount': '19000.00'})

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['amount']) == Decimal('19000.00')
        assert response.data['notes'] == 'September'

    def test_delete_and_missing(self, admin_client, admin_user):
        created = admin_client.post('/api/salaries/', {
            'user': str(admin_user.pk),
            'month': '2025-09',
            'amount': '18000.00',
        }).data

        deleted = admin_client.delete(f"/api/salaries/{created['id']}/")
        missing = admin_client.get(f"/api/salaries/{created['id']}/")

        assert deleted.status_code == status.HTTP_200_OK
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert missing.data['error'] == 'Salary record not found'
