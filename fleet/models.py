"""
Fleet Models

Company-owned and rented vehicles used to carry loadings, and the drivers
assigned to them. Own vehicles carry compliance documents whose expiry
dates are checked daily by ``fleet.tasks``.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Ownership(models.TextChoices):
    OWN = 'OWN', 'Own'
    RENT = 'RENT', 'Rent'


class FuelType(models.TextChoices):
    DIESEL = 'DIESEL', 'Diesel'
    PETROL = 'PETROL', 'Petrol'
    CNG = 'CNG', 'CNG'
    ELECTRIC = 'ELECTRIC', 'Electric'


def driver_proof_path(instance, filename):
    return f"drivers/{instance.license_number}/{filename}"


class Driver(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=15, unique=True)
    license_number = models.CharField(max_length=50, unique=True)
    address = models.TextField()
    age = models.PositiveIntegerField()
    aadhar_number = models.CharField(max_length=12, unique=True)
    identity_proof = models.FileField(upload_to=driver_proof_path, null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'drivers'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.license_number})"


class Vehicle(models.Model):
    DOCUMENT_FIELDS = [
        ('rc_validity', 'RC'),
        ('insurance_expiry', 'Insurance'),
        ('fitness_expiry', 'Fitness'),
        ('pollution_expiry', 'Pollution'),
        ('permit_expiry', 'Permit'),
        ('road_tax_expiry', 'Road tax'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    vehicle_number = models.CharField(max_length=20, unique=True)
    ownership = models.CharField(max_length=4, choices=Ownership.choices, db_index=True)

    # Own vehicle specification
    manufacturer = models.CharField(max_length=100, blank=True)
    model = models.CharField(max_length=100, blank=True)
    year_of_manufacture = models.PositiveIntegerField(null=True, blank=True)
    fuel_type = models.CharField(max_length=10, choices=FuelType.choices, blank=True)
    engine_number = models.CharField(max_length=50, blank=True)
    chassis_number = models.CharField(max_length=50, blank=True)
    capacity_in_tons = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    body_type = models.CharField(max_length=50, blank=True)

    # Compliance documents
    rc_validity = models.DateField(null=True, blank=True)
    insurance_expiry = models.DateField(null=True, blank=True)
    fitness_expiry = models.DateField(null=True, blank=True)
    pollution_expiry = models.DateField(null=True, blank=True)
    permit_expiry = models.DateField(null=True, blank=True)
    road_tax_expiry = models.DateField(null=True, blank=True)

    # Rented vehicle terms
    rental_agency = models.CharField(max_length=150, blank=True)
    rental_rate_per_day = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    assigned_driver = models.OneToOneField(
        Driver,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_vehicle'
    )
    remarks = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vehicles'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['ownership', 'created_at']),
        ]

    def __str__(self):
        return f"{self.vehicle_number} ({self.get_ownership_display()})"

    def save(self, *args, **kwargs):
        self.vehicle_number = (self.vehicle_number or '').strip().upper()
        super().save(*args, **kwargs)

    def expiring_documents(self, until):
        """Documents whose expiry date falls on or before ``until``."""
        expiring = []
        for field, label in self.DOCUMENT_FIELDS:
            value = getattr(self, field)
            if value and value <= until:
                expiring.append({'document': label, 'field': field, 'expires_on': value})
        return expiring
