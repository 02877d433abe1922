"""
Employee services: code generation, identity conflicts and document files.
"""

import logging

from django.db import transaction
from django.db.models import Q

from invoices.services import next_employee_code

from .models import Employee

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = [
    ('aadhaar', 'Aadhaar'),
    ('pan', 'PAN'),
    ('mobile', 'Mobile number'),
    ('email', 'Email'),
    ('account_number', 'Account number'),
]
DOCUMENT_FIELDS = ['photo', 'aadhaar_proof', 'pan_proof']


class EmployeeConflictError(Exception):
    """Raised when another employee already holds an identity number."""
    pass


def find_conflicts(data, exclude_pk=None):
    """Labels of the identity fields in ``data`` already used by another employee."""
    lookups = Q()
    checked = []
    for field, label in UNIQUE_FIELDS:
        value = data.get(field)
        if value:
            lookups |= Q(**{field: value})
            checked.append((field, label, value))
    if not checked:
        return []

    queryset = Employee.objects.filter(lookups)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)

    conflicts = []
    for existing in queryset:
        for field, label, value in checked:
            if getattr(existing, field) == value and label not in conflicts:
                conflicts.append(label)
    return conflicts


class EmployeeService:

    @staticmethod
    @transaction.atomic
    def create_employee(data):
        conflicts = find_conflicts(data)
        if conflicts:
            raise EmployeeConflictError(f"Employee with same {', '.join(conflicts)} already exists")

        employee = Employee(**data)
        employee.employee_id = next_employee_code()
        employee.save()

        logger.info(f"Employee {employee.employee_id} ({employee.full_name}) created")
        return employee

    @staticmethod
    @transaction.atomic
    def update_employee(employee, data):
        conflicts = find_conflicts(data, exclude_pk=employee.pk)
        if conflicts:
            raise EmployeeConflictError(f"Employee with same {', '.join(conflicts)} already exists")

        replaced = []
        for field, value in data.items():
            if field in DOCUMENT_FIELDS:
                old_file = getattr(employee, field)
                if old_file:
                    replaced.append(old_file)
            setattr(employee, field, value)
        employee.save()

        for old_file in replaced:
            transaction.on_commit(lambda f=old_file: f.storage.delete(f.name))

        logger.info(f"Employee {employee.employee_id} updated")
        return employee

    @staticmethod
    @transaction.atomic
    def delete_employee(employee):
        files = [getattr(employee, field) for field in DOCUMENT_FIELDS if getattr(employee, field)]
        code = employee.employee_id
        employee.delete()

        for old_file in files:
            transaction.on_commit(lambda f=old_file: f.storage.delete(f.name))

        logger.info(f"Employee {code} deleted")
        return code
