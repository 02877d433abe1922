"""
Permissions Configuration

Defines every permission the API checks and the defaults seeded for each
role. The database rows in ``RolePermission`` are authoritative at runtime;
these defaults only feed ``manage.py seed_role_permissions``.
"""

WILDCARD = '*'

# All system permissions
# Format: (codename, description)
SYSTEM_PERMISSIONS = [
    (WILDCARD, 'Full access'),
    ('dashboard.view', 'View the dashboard metrics'),
    ('loadings.view', 'View and record farmer/agent loadings'),
    ('loadings.client.view', 'View client loadings'),
    ('loadings.client.edit', 'Create and delete client loadings'),
    ('loadings.former.view', 'View farmer loadings'),
    ('loadings.agent.view', 'View agent loadings'),
    ('stock.view', 'View stock and manage fish varieties'),
    ('partyBills.view', 'View and edit vendor/client bills'),
    ('vehicles.view', 'View vehicles and drivers'),
    ('vehicles.create', 'Create and edit vehicles and drivers'),
    ('employees.view', 'Manage employees and salaries'),
    ('teams.view', 'Manage team members and user roles'),
    ('audit.view', 'View the audit log'),
    ('payments.view', 'Record payments, dispatch charges and packing amounts'),
    ('receipts.view', 'Issue invoices and receipts'),
    ('clients.view', 'Manage the client party master'),
]

_LOADING_DESK = [
    'loadings.view',
    'loadings.client.view',
    'loadings.client.edit',
    'stock.view',
    'partyBills.view',
]

ROLE_PERMISSIONS = {
    'admin': [WILDCARD],
    'documentation': _LOADING_DESK,
    'sales': _LOADING_DESK,
    'partner': ['stock.view', 'partyBills.view'],
    'finance': ['payments.view', 'receipts.view', 'partyBills.view'],
    'clerk': ['loadings.view'],
    'seniorExecutive': ['loadings.view'],
    'juniorExecutive': ['loadings.view'],
    'executive': ['loadings.view'],
    'supervisor': ['loadings.view'],
    'others': ['loadings.view'],
}

# Designation keywords, checked in order, mapped to a role
DESIGNATION_ROLE_RULES = [
    (('admin',), 'admin'),
    (('finance', 'account'), 'finance'),
    (('clerk',), 'clerk'),
    (('sales', 'marketing'), 'sales'),
    (('supervisor',), 'supervisor'),
    (('documentation',), 'documentation'),
    (('partner',), 'partner'),
    (('senior',), 'seniorExecutive'),
    (('junior',), 'juniorExecutive'),
    (('executive',), 'executive'),
]


def get_all_permission_codenames():
    """Get list of all permission codenames."""
    return [perm[0] for perm in SYSTEM_PERMISSIONS]


def get_default_permissions(role):
    """Get default permissions for a role."""
    return ROLE_PERMISSIONS.get(role, [])
