"""
Payment services.
"""

import logging

from django.db import IntegrityError, transaction

from audit.models import AuditAction
from loadings.models import get_loading_model
from payroll.models import Employee

from .models import ClientPayment, EmployeePayment, VendorPayment

logger = logging.getLogger(__name__)


class PaymentError(ValueError):
    """Raised when a payment request breaks a business rule."""
    pass


class PaymentTargetNotFoundError(Exception):
    """Raised when the loading or employee a payment names does not exist."""
    pass


class PaymentService:

    @staticmethod
    @transaction.atomic
    def create_client_payment(data, user=None):
        payment = ClientPayment.objects.create(created_by=user, **data)
        logger.info(f"Client payment {payment.amount} from {payment.client_name} recorded")
        return payment

    @staticmethod
    def resolve_vendor_loading(source, source_record_id=None, bill_no=''):
        """The farmer or agent loading a vendor payment is for, by id or by bill number."""
        model = get_loading_model(source)
        if source_record_id:
            return model.objects.filter(pk=source_record_id).first()
        if bill_no:
            return model.objects.filter(bill_no=bill_no).first()
        return None

    @classmethod
    @transaction.atomic
    def create_vendor_payment(cls, data, user=None):
        data = dict(data)
        source = data.pop('source')
        source_record_id = data.pop('source_record_id', None)
        bill_no = data.pop('bill_no', '')

        if not source_record_id and not bill_no:
            raise PaymentError("source_record_id is required (or provide valid bill_no for lookup)")

        loading = cls.resolve_vendor_loading(source, source_record_id, bill_no)
        if loading is None:
            if source_record_id:
                raise PaymentTargetNotFoundError(f"No {source} loading found with ID: {source_record_id}")
            raise PaymentError("source_record_id is required (or provide valid bill_no for lookup)")

        vendor_name = data.pop('vendor_name', '') or loading.party_name or 'Unknown Vendor'
        payment = VendorPayment.objects.create(
            vendor_id=f"{source}:{loading.pk}",
            vendor_key=f"{source}:{vendor_name}",
            vendor_name=vendor_name,
            source=source,
            source_record_id=loading.pk,
            created_by=user,
            **data
        )
        logger.info(f"Vendor payment {payment.amount} to {payment.vendor_key} recorded")
        return payment

    @staticmethod
    def create_employee_payment(data, user=None, audit=None):
        employee = Employee.objects.filter(pk=data['employee']).first()
        if employee is None:
            raise PaymentTargetNotFoundError("Employee not found")

        duplicate_message = (
            f"Salary for {data['salary_month']} has already been paid to this employee"
        )
        if EmployeePayment.objects.filter(employee=employee, salary_month=data['salary_month']).exists():
            raise PaymentError(duplicate_message)

        try:
            with transaction.atomic():
                payment = EmployeePayment.objects.create(
                    employee=employee,
                    employee_name=data.get('employee_name') or employee.full_name,
                    salary_month=data['salary_month'],
                    date=data['date'],
                    amount=data['amount'],
                    payment_mode=data['payment_mode'],
                    reference=data.get('reference') or '',
                    created_by=user,
                )
                if audit is not None:
                    audit.log(
                        'Employee Payments',
                        AuditAction.CREATE,
                        record_id=payment.pk,
                        new_values={
                            'employee_name': payment.employee_name,
                            'salary_month': payment.salary_month,
                            'date': payment.date,
                            'amount': payment.amount,
                            'payment_mode': payment.payment_mode,
                        },
                        label=f"Employee Payments created for employee ID: {employee.employee_id}",
                    )
        except IntegrityError:
            raise PaymentError(duplicate_message)

        logger.info(f"Salary {payment.salary_month} paid to {employee.employee_id}: {payment.amount}")
        return payment
