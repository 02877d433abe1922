"""
Charge Models

Ancillary costs attached to a loading:

- DispatchCharge: ice, transport and other costs of sending a load
- PackingAmount: wages paid to the crew that loaded or unloaded a vehicle

Both point at their loading through ``source_type``/``source_record_id`` and
through one of three typed foreign keys, so the loading can sum them.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class SourceType(models.TextChoices):
    FARMER = 'FARMER', 'Farmer'
    AGENT = 'AGENT', 'Agent'
    CLIENT = 'CLIENT', 'Client'


class DispatchChargeType(models.TextChoices):
    ICE_COOLING = 'ICE_COOLING', 'Ice Cooling'
    TRANSPORT = 'TRANSPORT', 'Transport'
    OTHER = 'OTHER', 'Other'
    PACKING = 'PACKING', 'Packing'


class PaymentMode(models.TextChoices):
    CASH = 'CASH', 'Cash'
    AC = 'AC', 'Account Transfer'
    UPI = 'UPI', 'UPI'
    CHEQUE = 'CHEQUE', 'Cheque'


class PackingMode(models.TextChoices):
    LOADING = 'loading', 'Loading'
    UNLOADING = 'unloading', 'Unloading'


LOADING_FK_FIELDS = {
    SourceType.FARMER: 'farmer_loading',
    SourceType.AGENT: 'agent_loading',
    SourceType.CLIENT: 'client_loading',
}


class LinkedToLoading(models.Model):
    """Typed links to the loading a charge belongs to."""

    source_type = models.CharField(max_length=10, choices=SourceType.choices, blank=True, db_index=True)
    source_record_id = models.UUIDField(null=True, blank=True, db_index=True)

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

    @property
    def loading(self):
        if not self.source_type:
            return None
        return getattr(self, LOADING_FK_FIELDS[self.source_type])

    def link_to(self, loading):
        """Point this row at ``loading`` (farmer, agent or client)."""
        for field in LOADING_FK_FIELDS.values():
            setattr(self, field, None)
        if loading is None:
            self.source_type = ''
            self.source_record_id = None
            return
        self.source_type = loading.LOAD_TYPE
        self.source_record_id = loading.pk
        setattr(self, LOADING_FK_FIELDS[loading.LOAD_TYPE], loading)


class DispatchCharge(LinkedToLoading):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    type = models.CharField(max_length=15, choices=DispatchChargeType.choices)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    label = models.CharField(max_length=150, blank=True, help_text="Required for OTHER and PACKING")
    notes = models.TextField(blank=True)

    farmer_loading = models.ForeignKey(
        'loadings.FarmerLoading',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='dispatch_charges'
    )
    agent_loading = models.ForeignKey(
        'loadings.AgentLoading',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='dispatch_charges'
    )
    client_loading = models.ForeignKey(
        'loadings.ClientLoading',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='dispatch_charges'
    )

    class Meta:
        db_table = 'dispatch_charges'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['source_type', 'source_record_id']),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.amount} ({self.source_type})"


class PackingAmount(LinkedToLoading):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    bill_no = models.CharField(max_length=30, unique=True, help_text="RS-PACKING-{yy}-{seq}")
    mode = models.CharField(max_length=10, choices=PackingMode.choices)
    workers = models.PositiveIntegerField()
    temperature = models.DecimalField(max_digits=6, decimal_places=2)
    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_mode = models.CharField(max_length=10, choices=PaymentMode.choices, default=PaymentMode.CASH)
    reference = models.CharField(max_length=100, blank=True)

    farmer_loading = models.ForeignKey(
        'loadings.FarmerLoading',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='packing_amounts'
    )
    agent_loading = models.ForeignKey(
        'loadings.AgentLoading',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='packing_amounts'
    )
    client_loading = models.ForeignKey(
        'loadings.ClientLoading',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='packing_amounts'
    )

    class Meta:
        db_table = 'packing_amounts'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['source_type', 'source_record_id']),
        ]

    def __str__(self):
        return f"{self.bill_no} - {self.total_amount}"
