"""
Role and permission services.

Permission checks resolve against the database in this order:
1. the ``admin`` role passes every check
2. a ``RolePermission`` row for the user's role
3. an allowing ``UserPermissionOverride`` for the user
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from .models import RolePermission, UserPermissionOverride
from .permissions_config import (
    DESIGNATION_ROLE_RULES,
    ROLE_PERMISSIONS,
    WILDCARD,
)

User = get_user_model()

logger = logging.getLogger(__name__)


class RoleError(ValueError):
    """Raised for unknown roles or malformed role updates."""
    pass


def map_designation_to_role(designation):
    """Derive a user role from an employee's free-text designation."""
    text = (designation or '').lower()
    for keywords, role in DESIGNATION_ROLE_RULES:
        if any(keyword in text for keyword in keywords):
            return role
    return User.UserRole.OTHERS


def has_server_permission(user, permission):
    """Return True when ``user`` may exercise ``permission``."""
    if user is None or not user.is_authenticated:
        return False

    if user.role == User.UserRole.ADMIN:
        return True

    if RolePermission.objects.filter(
        role=user.role,
        permission__in=[permission, WILDCARD],
    ).exists():
        return True

    override = UserPermissionOverride.objects.filter(
        user=user,
        permission=permission,
    ).first()
    return bool(override and override.allow)


def get_user_permissions(user):
    """Effective permission codenames for a user, for the ``/me`` payload."""
    if user.role == User.UserRole.ADMIN:
        return [WILDCARD]

    granted = set(
        RolePermission.objects.filter(role=user.role).values_list('permission', flat=True)
    )
    granted.update(
        user.permission_overrides.filter(allow=True).values_list('permission', flat=True)
    )
    return sorted(granted)


def _validate_role(role):
    if role not in User.UserRole.values:
        raise RoleError(f"Unknown role: {role}")


@transaction.atomic
def replace_role_permissions(role, permissions):
    """Replace every permission row of ``role`` with ``permissions``."""
    _validate_role(role)
    unique = sorted(set(p for p in permissions if p))

    RolePermission.objects.filter(role=role).delete()
    RolePermission.objects.bulk_create(
        [RolePermission(role=role, permission=p) for p in unique]
    )

    logger.info(f"Permissions for role {role} replaced: {', '.join(unique) or '(none)'}")
    return unique


def permissions_by_role():
    """Current permission rows grouped as ``{role: [permission, ...]}``."""
    grouped = {role: [] for role in User.UserRole.values}
    for row in RolePermission.objects.order_by('role', 'permission'):
        grouped.setdefault(row.role, []).append(row.permission)
    return grouped


@transaction.atomic
def seed_role_permissions(reset=False):
    """
    Load the default role permissions.

    Existing rows are kept unless ``reset`` is set; returns the number of
    rows created.
    """
    created = 0
    for role, permissions in ROLE_PERMISSIONS.items():
        if reset:
            RolePermission.objects.filter(role=role).delete()
        for permission in permissions:
            _, was_created = RolePermission.objects.get_or_create(
                role=role,
                permission=permission,
            )
            created += int(was_created)
    logger.info(f"Seeded {created} role permission rows")
    return created
