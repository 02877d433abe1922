"""
Loading Models

A loading is one recorded shipment of fish, itemised per variety:

- FarmerLoading: fish bought in from a farmer (incoming stock)
- AgentLoading: fish bought in through an agent (incoming stock)
- ClientLoading: fish sold out to a client (outgoing stock)

Each line weighs ``no_trays * 35 + loose`` kilograms. Loading totals are
recomputed from the lines whenever a line changes; the billing rules that
turn weights into money live in ``loadings.services`` and ``billing.services``.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils import timezone


class LoadType(models.TextChoices):
    FARMER = 'FARMER', 'Farmer'
    AGENT = 'AGENT', 'Agent'
    CLIENT = 'CLIENT', 'Client'


class TripStatus(models.TextChoices):
    RUNNING = 'RUNNING', 'Running'
    COMPLETED = 'COMPLETED', 'Completed'
    CANCELLED = 'CANCELLED', 'Cancelled'


def _money_field(**kwargs):
    return models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        **kwargs
    )


class Loading(models.Model):
    """Fields and weight bookkeeping shared by the three loading kinds."""

    LOAD_TYPE = None

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    bill_no = models.CharField(max_length=50, unique=True, help_text="Paper bill number")
    fish_code = models.CharField(max_length=20, blank=True)
    village = models.CharField(max_length=150, blank=True)
    date = models.DateTimeField(default=timezone.now, db_index=True)

    vehicle_no = models.CharField(
        max_length=20,
        blank=True,
        help_text="Free-text vehicle number when the vehicle is not in the fleet"
    )

    trip_status = models.CharField(
        max_length=10,
        choices=TripStatus.choices,
        default=TripStatus.RUNNING,
        db_index=True
    )
    started_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)

    total_trays = models.PositiveIntegerField(default=0)
    total_loose_kgs = _money_field()
    total_tray_kgs = _money_field()
    total_kgs = _money_field()
    total_price = _money_field()
    dispatch_charges_total = _money_field()
    packing_amount_total = _money_field()
    grand_total = _money_field()

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

    def __str__(self):
        return f"{self.bill_no} - {self.party_name}"

    @property
    def party_name(self):
        raise NotImplementedError

    @property
    def has_vehicle(self):
        return bool(self.vehicle_id or self.vehicle_no)

    @property
    def vehicle_number(self):
        if self.vehicle_id:
            return self.vehicle.vehicle_number
        return self.vehicle_no or ''

    def refresh_weight_totals(self):
        """Recompute tray and kilogram totals from the lines (does not save)."""
        totals = self.items.aggregate(
            trays=Sum('no_trays'),
            loose=Sum('loose'),
            tray_kgs=Sum('tray_kgs'),
            kgs=Sum('total_kgs'),
        )
        self.total_trays = totals['trays'] or 0
        self.total_loose_kgs = totals['loose'] or Decimal('0.00')
        self.total_tray_kgs = totals['tray_kgs'] or Decimal('0.00')
        self.total_kgs = totals['kgs'] or Decimal('0.00')

    def items_price_total(self):
        return self.items.aggregate(total=Sum('total_price'))['total'] or Decimal('0.00')


class FarmerLoading(Loading):
    LOAD_TYPE = LoadType.FARMER

    farmer_name = models.CharField(max_length=150, db_index=True)
    vehicle = models.ForeignKey(
        'fleet.Vehicle',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='farmer_loadings'
    )

    class Meta:
        db_table = 'farmer_loadings'
        ordering = ['-created_at']
        verbose_name = 'Farmer Loading'
        verbose_name_plural = 'Farmer Loadings'

    @property
    def party_name(self):
        return self.farmer_name


class AgentLoading(Loading):
    LOAD_TYPE = LoadType.AGENT

    agent_name = models.CharField(max_length=150, db_index=True)
    vehicle = models.ForeignKey(
        'fleet.Vehicle',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='agent_loadings'
    )

    class Meta:
        db_table = 'agent_loadings'
        ordering = ['-created_at']
        verbose_name = 'Agent Loading'
        verbose_name_plural = 'Agent Loadings'

    @property
    def party_name(self):
        return self.agent_name


class ClientLoading(Loading):
    LOAD_TYPE = LoadType.CLIENT

    client_name = models.CharField(max_length=150, db_index=True)
    client = models.ForeignKey(
        'parties.Client',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='loadings',
        help_text="Party master record, when the client is registered"
    )
    vehicle = models.ForeignKey(
        'fleet.Vehicle',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='client_loadings'
    )

    class Meta:
        db_table = 'client_loadings'
        ordering = ['-date']
        verbose_name = 'Client Loading'
        verbose_name_plural = 'Client Loadings'

    @property
    def party_name(self):
        return self.client_name


class LoadingItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    variety = models.ForeignKey(
        'parties.FishVariety',
        to_field='code',
        db_column='variety_code',
        on_delete=models.PROTECT,
        related_name='+'
    )
    no_trays = models.PositiveIntegerField(default=0)
    tray_kgs = _money_field()
    loose = _money_field()
    total_kgs = _money_field()
    price_per_kg = _money_field()
    total_price = _money_field()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['created_at']

    def __str__(self):
        return f"{self.variety_id}: {self.total_kgs} kg"


class FarmerLoadingItem(LoadingItem):
    loading = models.ForeignKey(FarmerLoading, on_delete=models.CASCADE, related_name='items')

    class Meta(LoadingItem.Meta):
        db_table = 'farmer_loading_items'


class AgentLoadingItem(LoadingItem):
    loading = models.ForeignKey(AgentLoading, on_delete=models.CASCADE, related_name='items')

    class Meta(LoadingItem.Meta):
        db_table = 'agent_loading_items'


class ClientLoadingItem(LoadingItem):
    loading = models.ForeignKey(ClientLoading, on_delete=models.CASCADE, related_name='items')

    class Meta(LoadingItem.Meta):
        db_table = 'client_loading_items'


LOADING_MODELS = {
    LoadType.FARMER: FarmerLoading,
    LoadType.AGENT: AgentLoading,
    LoadType.CLIENT: ClientLoading,
}


def get_loading_model(load_type):
    """Loading model for a load type; ``FORMER`` is accepted for farmer."""
    key = (load_type or '').strip().upper()
    if key == 'FORMER':
        key = LoadType.FARMER
    return LOADING_MODELS.get(key)
