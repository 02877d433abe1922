"""
Payroll Models

- Employee: staff record with salary structure, identity and bank details
- Salary: monthly salary entry recorded against a user account
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

mobile_validator = RegexValidator(
    regex=r'^[6-9]\d{9}$',
    message='Enter a valid 10-digit mobile number'
)
aadhaar_validator = RegexValidator(
    regex=r'^[2-9]\d{11}$',
    message='Enter a valid 12-digit Aadhaar number'
)
pan_validator = RegexValidator(
    regex=r'^[A-Z]{5}\d{4}[A-Z]$',
    message='Enter a valid PAN (e.g. ABCDE1234F)'
)
ifsc_validator = RegexValidator(
    regex=r'^[A-Z]{4}0[A-Z0-9]{6}$',
    message='Enter a valid IFSC code'
)


def employee_photo_path(instance, filename):
    return f"employees/photos/{instance.employee_id}_{filename}"


def employee_aadhaar_path(instance, filename):
    return f"employees/aadhaar/{instance.employee_id}_{filename}"


def employee_pan_path(instance, filename):
    return f"employees/pan/{instance.employee_id}_{filename}"


class Gender(models.TextChoices):
    MALE = 'Male', 'Male'
    FEMALE = 'Female', 'Female'
    OTHER = 'Other', 'Other'


class MaritalStatus(models.TextChoices):
    SINGLE = 'Single', 'Single'
    MARRIED = 'Married', 'Married'
    DIVORCED = 'Divorced', 'Divorced'
    WIDOWED = 'Widowed', 'Widowed'


def _salary_field(**kwargs):
    return models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        **kwargs
    )


class Employee(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employee_id = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        help_text="Generated code, e.g. RS-EMP-0001"
    )

    # Employment
    doj = models.DateField(verbose_name="Date of joining")
    department = models.CharField(max_length=100)
    designation = models.CharField(max_length=100)
    work_location = models.CharField(max_length=150, blank=True)
    shift_type = models.CharField(max_length=50, blank=True)

    # Salary structure
    basic_salary = _salary_field()
    hra = _salary_field()
    conveyance_allowance = _salary_field()
    special_allowance = _salary_field()
    gross_salary = _salary_field()
    ctc = _salary_field()

    # Personal
    full_name = models.CharField(max_length=150, db_index=True)
    father_name = models.CharField(max_length=150)
    dob = models.DateField(verbose_name="Date of birth")
    gender = models.CharField(max_length=10, choices=Gender.choices)
    marital_status = models.CharField(max_length=10, choices=MaritalStatus.choices)
    nationality = models.CharField(max_length=50, default='Indian')
    aadhaar = models.CharField(max_length=12, unique=True, validators=[aadhaar_validator])
    pan = models.CharField(max_length=10, unique=True, validators=[pan_validator])
    mobile = models.CharField(max_length=10, unique=True, validators=[mobile_validator])
    alt_mobile = models.CharField(max_length=10, blank=True, validators=[mobile_validator])
    email = models.EmailField(unique=True, null=True, blank=True)
    current_address = models.TextField()
    permanent_address = models.TextField()

    # Bank
    bank_name = models.CharField(max_length=100)
    branch_name = models.CharField(max_length=100)
    account_number = models.CharField(max_length=30, unique=True)
    ifsc = models.CharField(max_length=11, validators=[ifsc_validator])

    # Documents
    photo = models.FileField(upload_to=employee_photo_path, null=True, blank=True)
    aadhaar_proof = models.FileField(upload_to=employee_aadhaar_path, null=True, blank=True)
    pan_proof = models.FileField(upload_to=employee_pan_path, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employees'
        ordering = ['-created_at']
        verbose_name = 'Employee'
        verbose_name_plural = 'Employees'

    def __str__(self):
        return f"{self.employee_id} - {self.full_name}"


class Salary(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='salaries'
    )
    month = models.DateField(help_text="Any day in the salary month")
    amount = _salary_field()
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'salaries'
        ordering = ['-created_at']
        verbose_name = 'Salary'
        verbose_name_plural = 'Salaries'

    def __str__(self):
        return f"{self.user} - {self.month:%Y-%m}: {self.amount}"
