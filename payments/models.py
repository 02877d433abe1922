"""
Payment Models

- ClientPayment: money received from a client against a client loading
- VendorPayment: money paid to a farmer or agent for a loading
- EmployeePayment: salary paid to an employee for one month
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from charges.models import PaymentMode
from loadings.models import get_loading_model


def client_payment_image_path(instance, filename):
    return f"client-payments/{instance.client_loading_id or 'unlinked'}/{filename}"


class VendorSource(models.TextChoices):
    FARMER = 'farmer', 'Farmer'
    AGENT = 'agent', 'Agent'


class BasePayment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    date = models.DateTimeField(db_index=True)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_mode = models.CharField(max_length=10, choices=PaymentMode.choices, default=PaymentMode.CASH)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-date']


class InstallmentFields(models.Model):
    is_installment = models.BooleanField(default=False)
    installments = models.PositiveIntegerField(null=True, blank=True)
    installment_number = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        abstract = True


class ClientPayment(BasePayment, InstallmentFields):
    client_loading = models.ForeignKey(
        'loadings.ClientLoading',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments'
    )
    client_name = models.CharField(max_length=150, db_index=True)
    reference = models.CharField(max_length=100, blank=True)
    image = models.FileField(upload_to=client_payment_image_path, null=True, blank=True)

    class Meta(BasePayment.Meta):
        db_table = 'client_payments'
        verbose_name = 'Client Payment'
        verbose_name_plural = 'Client Payments'

    def __str__(self):
        return f"{self.client_name} - {self.amount}"


class VendorPayment(BasePayment, InstallmentFields):
    vendor_id = models.CharField(max_length=100, db_index=True, help_text="``{source}:{loading id}``")
    vendor_key = models.CharField(max_length=200, db_index=True, help_text="``{source}:{vendor name}``")
    vendor_name = models.CharField(max_length=150)
    source = models.CharField(max_length=10, choices=VendorSource.choices)
    source_record_id = models.UUIDField(db_index=True)

    reference_no = models.CharField(max_length=100, blank=True)
    payment_ref = models.CharField(max_length=100, blank=True)
    account_number = models.CharField(max_length=30, blank=True)
    ifsc = models.CharField(max_length=11, blank=True)
    bank_name = models.CharField(max_length=100, blank=True)
    bank_address = models.CharField(max_length=255, blank=True)
    payment_details = models.TextField(blank=True)

    class Meta(BasePayment.Meta):
        db_table = 'vendor_payments'
        verbose_name = 'Vendor Payment'
        verbose_name_plural = 'Vendor Payments'

    def __str__(self):
        return f"{self.vendor_key} - {self.amount}"

    @property
    def loading(self):
        model = get_loading_model(self.source)
        if model is None:
            return None
        return model.objects.filter(pk=self.source_record_id).first()


class EmployeePayment(BasePayment):
    employee = models.ForeignKey(
        'payroll.Employee',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    employee_name = models.CharField(max_length=150)
    salary_month = models.CharField(max_length=7, help_text="YYYY-MM")
    reference = models.CharField(max_length=100, blank=True)

    class Meta(BasePayment.Meta):
        db_table = 'employee_payments'
        verbose_name = 'Employee Payment'
        verbose_name_plural = 'Employee Payments'
        constraints = [
            models.UniqueConstraint(fields=['employee', 'salary_month'], name='unique_employee_salary_month'),
        ]

    def __str__(self):
        return f"{self.employee_name} {self.salary_month} - {self.amount}"
