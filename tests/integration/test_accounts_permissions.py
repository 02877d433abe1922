"""
Accounts and Permissions Integration Tests

Tests who may do what:
- Email + password JWT login
- Registration of an employee login by a team manager, with the role taken
  from the designation
- Role permissions stored in the database, editable by admins
- Per-user overrides that grant a single permission
- Audit log of recorded changes

SCENARIO:
=========
A clerk starts with no permissions and is refused the farmer loadings list.
An admin grants the clerk role 'loadings.view'; the list opens. A per-user
override then grants one clerk access to the audit log, and the change to a
vendor bill line is visible there.
"""

import pytest
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import RolePermission, User, UserPermissionOverride
from audit.models import AuditLog
from tests.conftest import employee_data

pytestmark = pytest.mark.django_db


# =============================================================================
# AUTHENTICATION
# =============================================================================

class TestAuthentication:

    def test_login_with_email(self, admin_user):
        response = APIClient().post('/api/auth/login/', {
            'email': admin_user.email,
            'password': 'testpass123',
        })

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert 'refresh' in response.data
        assert response.data['user']['role'] == 'admin'

    def test_login_with_wrong_password(self, admin_user):
        response = APIClient().post('/api/auth/login/', {
            'email': admin_user.email,
            'password': 'wrong',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_register_employee_takes_role_from_designation(self, admin_client):
        employee = admin_client.post(
            '/api/employees/',
            employee_data(designation='Senior Clerk'),
            format='json',
        ).data

        response = admin_client.post('/api/auth/register/', {
            'email': 'venkat.login@example.com',
            'password': 'S3cure-pass',
            'employee_id': employee['id'],
        })
        again = admin_client.post('/api/auth/register/', {
            'email': 'other@example.com',
            'password': 'S3cure-pass',
            'employee_id': employee['id'],
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['role'] == 'clerk'
        assert again.status_code == status.HTTP_409_CONFLICT
        assert again.data['error'] == 'Employee already has an account'

    def test_register_requires_fields(self, admin_client):
        response = admin_client.post('/api/auth/register/', {'email': 'x@example.com'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'email, password and employee_id are required'

    def test_register_needs_team_permission(self, admin_client, clerk_client):
        employee = admin_client.post(
            '/api/employees/',
            employee_data(designation='Office Admin'),
            format='json',
        ).data
        payload = {
            'email': 'admin.login@example.com',
            'password': 'S3cure-pass',
            'employee_id': employee['id'],
        }

        anonymous = APIClient().post('/api/auth/register/', payload)
        clerk = clerk_client.post('/api/auth/register/', payload)

        assert anonymous.status_code == status.HTTP_401_UNAUTHORIZED
        assert clerk.status_code == status.HTTP_403_FORBIDDEN
        assert not User.objects.filter(email='admin.login@example.com').exists()


# =============================================================================
# PERMISSIONS
# =============================================================================

class TestRolePermissions:

    def test_role_grant_opens_endpoint(self, clerk_client, clerk_user):
        refused = clerk_client.get('/api/loadings/farmer/')
        RolePermission.objects.create(role='clerk', permission='loadings.view')
        allowed = clerk_client.get('/api/loadings/farmer/')

        assert refused.status_code == status.HTTP_403_FORBIDDEN
        assert allowed.status_code == status.HTTP_200_OK

    def test_user_override_grants_single_permission(self, clerk_client, clerk_user):
        UserPermissionOverride.objects.create(user=clerk_user, permission='audit.view', allow=True)

        audit = clerk_client.get('/api/audit-logs/')
        loadings = clerk_client.get('/api/loadings/farmer/')

        assert audit.status_code == status.HTTP_200_OK
        assert loadings.status_code == status.HTTP_403_FORBIDDEN

    def test_me_lists_effective_permissions(self, clerk_client, clerk_user):
        RolePermission.objects.create(role='clerk', permission='loadings.view')
        UserPermissionOverride.objects.create(user=clerk_user, permission='audit.view', allow=True)
        UserPermissionOverride.objects.create(user=clerk_user, permission='stock.view', allow=False)

        response = clerk_client.get('/api/auth/me/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['permissions'] == ['audit.view', 'loadings.view']

    def test_deny_override_does_not_revoke_role_grant(self, clerk_client, clerk_user):
        RolePermission.objects.create(role='clerk', permission='stock.view')
        UserPermissionOverride.objects.create(user=clerk_user, permission='stock.view', allow=False)

        stock = clerk_client.get('/api/stocks/available-varieties/')
        me = clerk_client.get('/api/auth/me/')

        assert stock.status_code == status.HTTP_200_OK
        assert me.data['user']['permissions'] == ['stock.view']

    def test_admin_replaces_role_permissions(self, admin_client):
        RolePermission.objects.create(role='clerk', permission='stock.view')

        response = admin_client.post('/api/superadmin/permissions/', {
            'role': 'clerk',
            'permissions': ['loadings.view', 'partyBills.view'],
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['permissions'] == ['loadings.view', 'partyBills.view']
        assert set(RolePermission.objects.filter(role='clerk').values_list('permission', flat=True)) == {
            'loadings.view', 'partyBills.view'
        }

    def test_only_admins_edit_permissions(self, clerk_client):
        response = clerk_client.get('/api/superadmin/permissions/')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# AUDIT LOG
# =============================================================================

class TestAuditLog:

    def test_bill_line_change_is_audited(self, admin_client, admin_user, varieties, loading_date):
        admin_client.post('/api/loadings/agent/', {
            'bill_no': 'A-2001',
            'agent_name': 'Suresh Agencies',
            'date': loading_date,
            'vehicle_no': 'AP16 TX 1234',
            'items': [{'variety_code': 'ROHU', 'no_trays': 2, 'price_per_kg': 100}],
        })
        line = admin_client.get('/api/loadings/agent/').data['results'][0]['items'][0]

        admin_client.patch(f"/api/vendor-bills/item/{line['id']}/", {'price_per_kg': 110})

        entry = AuditLog.objects.get(module='Vendor Bills')
        assert entry.user == admin_user
        assert entry.record_id == line['id']

        response = admin_client.get('/api/audit-logs/', {'module': 'Vendor Bills'})
        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_unparseable_forwarded_for_falls_back(self, admin_client, varieties, loading_date):
        response = admin_client.post(
            '/api/loadings/agent/',
            {
                'bill_no': 'A-2002',
                'agent_name': 'Suresh Agencies',
                'date': loading_date,
                'vehicle_no': 'AP16 TX 1234',
                'items': [{'variety_code': 'ROHU', 'no_trays': 2, 'price_per_kg': 100}],
            },
        )
        line = response.data['items'][0]

        patched = admin_client.patch(
            f"/api/vendor-bills/item/{line['id']}/",
            {'price_per_kg': 110},
            HTTP_X_FORWARDED_FOR='unknown, 10.0.0.1',
            HTTP_X_REAL_IP='203.0.113.7',
        )

        assert patched.status_code == status.HTTP_200_OK
        entry = AuditLog.objects.get(module='Vendor Bills')
        assert entry.ip_address == '203.0.113.7'
        entry.full_clean()
