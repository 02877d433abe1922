"""
Party master data.

- Client: customers the company sells to, with GST and bank details
- FishVariety: the catalogue of fish codes every loading line refers to
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class GSTType(models.TextChoices):
    REGISTERED = 'REGISTERED', 'Registered'
    UNREGISTERED = 'UNREGISTERED', 'Unregistered'
    CONSUMER = 'CONSUMER', 'Consumer'


class BalanceType(models.TextChoices):
    RECEIVABLE = 'RECEIVABLE', 'To Receive'
    PAYABLE = 'PAYABLE', 'To Pay'


class FishVariety(models.Model):
    code = models.CharField(max_length=20, unique=True, help_text="Short code used on bills, e.g. 'ROHU'")
    name = models.CharField(max_length=100)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fish_varieties'
        ordering = ['name']
        verbose_name = 'Fish Variety'
        verbose_name_plural = 'Fish Varieties'

    def __str__(self):
        return f"{self.code} - {self.name}"

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)


class Client(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    party_name = models.CharField(max_length=200, db_index=True)
    party_group = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20)
    email = models.EmailField(blank=True)

    gst_type = models.CharField(max_length=20, choices=GSTType.choices)
    gstin = models.CharField(max_length=15, blank=True)
    state = models.CharField(max_length=100, blank=True)
    billing_address = models.TextField()

    opening_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    balance_type = models.CharField(max_length=20, choices=BalanceType.choices)
    credit_limit = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    reference_no = models.CharField(max_length=100, blank=True)

    account_number = models.CharField(max_length=30, blank=True)
    ifsc = models.CharField(max_length=11, blank=True)
    bank_name = models.CharField(max_length=100, blank=True)
    bank_address = models.TextField(blank=True)
    payment_details = models.TextField(blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clients'
        ordering = ['-created_at']
        verbose_name = 'Client'
        verbose_name_plural = 'Clients'

    def __str__(self):
        return self.party_name
