"""
Shared pytest fixtures for the integration tests.
"""
import uuid

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test to prevent pollution."""
    cache.clear()
    yield
    cache.clear()


def make_user(role, **extra):
    unique_id = uuid.uuid4().hex[:8]
    return User.objects.create_user(
        username=f'{role}_{unique_id}',
        email=f'{role}_{unique_id}@test.com',
        password='testpass123',
        role=role,
        **extra
    )


@pytest.fixture
def admin_user():
    return make_user('admin', name='Office Admin')


@pytest.fixture
def clerk_user():
    return make_user('clerk', name='Bill Clerk')


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as an admin (every permission)."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def clerk_client(clerk_user):
    """API client authenticated as a clerk with no granted permissions."""
    client = APIClient()
    client.force_authenticate(user=clerk_user)
    return client


@pytest.fixture
def varieties():
    from parties.models import FishVariety

    return {
        'ROHU': FishVariety.objects.create(code='ROHU', name='Rohu'),
        'KATLA': FishVariety.objects.create(code='KATLA', name='Katla'),
        'PANGAS': FishVariety.objects.create(code='PANGAS', name='Pangasius'),
    }


@pytest.fixture
def loading_date():
    return '2025-10-01T08:00:00+05:30'


def employee_data(**overrides):
    data = {
        'doj': '2024-04-01',
        'department': 'Operations',
        'designation': 'Loader',
        'basic_salary': '12000.00',
        'gross_salary': '15000.00',
        'ctc': '16500.00',
        'full_name': 'Venkat Rao',
        'father_name': 'Subba Rao',
        'dob': '1990-06-15',
        'gender': 'Male',
        'marital_status': 'Married',
        'aadhaar': '234567890123',
        'pan': 'ABCDE1234F',
        'mobile': '9876543210',
        'email': 'venkat@example.com',
        'current_address': 'Kaikaluru, Eluru District',
        'permanent_address': 'Kaikaluru, Eluru District',
        'bank_name': 'State Bank of India',
        'branch_name': 'Kaikaluru',
        'account_number': '30001234567',
        'ifsc': 'SBIN0001234',
    }
    data.update(overrides)
    return data


@pytest.fixture
def employee(admin_client):
    from payroll.models import Employee

    response = admin_client.post('/api/employees/', employee_data(), format='json')
    assert response.status_code == 201, response.data
    return Employee.objects.get(pk=response.data['id'])
