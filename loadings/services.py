"""
Loading services: recording loadings, the stock ledger and trip bookkeeping.

Billing rules applied when a loading is recorded:
- Farmer: lines are unpriced; grand total is the net weight in whole kilograms
- Agent: each line is priced net of the deduction; grand total is the sum
- Client: grand total is the net weight; stock must cover every variety
"""

import logging
from collections import defaultdict
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from parties.models import FishVariety

from .models import (
    AgentLoading,
    AgentLoadingItem,
    ClientLoading,
    ClientLoadingItem,
    FarmerLoading,
    FarmerLoadingItem,
    TripStatus,
)
from .weights import (
    deducted_amount,
    format_kgs,
    item_weights,
    net_kgs,
    round2,
    round_whole,
    tray_weight,
    to_decimal,
)

logger = logging.getLogger(__name__)

DISPATCH_ICE_COOLING = 'ICE_COOLING'
DISPATCH_TRANSPORT = 'TRANSPORT'
DISPATCH_OTHER = 'OTHER'


class LoadingError(ValueError):
    """Raised when a loading request breaks a business rule."""
    pass


class StockExceededError(LoadingError):
    """Raised when a client loading asks for more fish than is in stock."""

    def __init__(self, code, available, requested=None):
        self.code = code
        self.available = available
        self.requested = requested
        if requested is None:
            message = f"Stock exceeded for {code}. Available {round2(available):.2f} Kgs"
        else:
            message = (
                f"Stock exceeded for {code}. Available {format_kgs(available)} Kgs, "
                f"requested {format_kgs(requested)} Kgs"
            )
        super().__init__(message)


# =============================================================================
# STOCK LEDGER
# =============================================================================

class StockLedger:
    """
    Net stock per variety code: farmer and agent kilograms in, client
    kilograms out.
    """

    @staticmethod
    def _sum_by_code(item_model, codes=None):
        queryset = item_model.objects.all()
        if codes is not None:
            queryset = queryset.filter(variety_id__in=codes)
        rows = queryset.values('variety_id').annotate(total=Sum('total_kgs'))
        return {row['variety_id']: row['total'] or Decimal('0') for row in rows}

    @classmethod
    def net_kgs_by_code(cls, codes=None):
        """``{code: incoming - outgoing}``; may be negative for oversold codes."""
        net = defaultdict(lambda: Decimal('0'))
        for item_model in (FarmerLoadingItem, AgentLoadingItem):
            for code, total in cls._sum_by_code(item_model, codes).items():
                net[code] += total
        for code, total in cls._sum_by_code(ClientLoadingItem, codes).items():
            net[code] -= total
        return dict(net)

    @classmethod
    def available_kgs(cls, code):
        return max(Decimal('0'), cls.net_kgs_by_code([code]).get(code, Decimal('0')))

    @classmethod
    def available_varieties(cls):
        """Varieties with at least one full tray in stock."""
        net = cls.net_kgs_by_code()
        names = dict(FishVariety.objects.filter(code__in=net.keys()).values_list('code', 'name'))

        rows = []
        for code in sorted(net):
            net_kgs_value = max(Decimal('0'), net[code])
            net_trays = int(net_kgs_value // tray_weight())
            if net_trays <= 0:
                continue
            rows.append({
                'code': code,
                'name': names.get(code, code),
                'net_kgs': round2(net_kgs_value),
                'net_trays': net_trays,
            })
        return rows

    @classmethod
    def lock_varieties(cls, codes):
        """Serialise concurrent stock checks on the same varieties."""
        list(FishVariety.objects.select_for_update().filter(code__in=codes).order_by('code'))

    @classmethod
    def ensure_available(cls, requested):
        """
        Raise ``StockExceededError`` for the first code whose request exceeds
        the stock on hand. ``requested`` maps code to kilograms.
        """
        net = cls.net_kgs_by_code(list(requested))
        for code, kgs in requested.items():
            available = max(Decimal('0'), net.get(code, Decimal('0')))
            if kgs > available:
                logger.warning(f"Stock exceeded for {code}: available {available}, requested {kgs}")
                raise StockExceededError(code, available, kgs)


# =============================================================================
# DISPATCH BREAKDOWN
# =============================================================================

def dispatch_breakdown(loading):
    """
    Summarise the dispatch charges attached to a loading.

    Only labelled ``OTHER`` charges are listed individually.
    """
    ice_cooling = Decimal('0')
    transport = Decimal('0')
    other_charges = []
    total = Decimal('0')

    for charge in loading.dispatch_charges.all():
        total += charge.amount
        if charge.type == DISPATCH_ICE_COOLING:
            ice_cooling += charge.amount
        elif charge.type == DISPATCH_TRANSPORT:
            transport += charge.amount
        elif charge.type == DISPATCH_OTHER and charge.label:
            other_charges.append({'label': charge.label, 'amount': charge.amount})

    return {
        'ice_cooling': round2(ice_cooling),
        'transport': round2(transport),
        'other_charges': other_charges,
        'total': round2(total),
    }


# =============================================================================
# LOADING SERVICE
# =============================================================================

class LoadingService:
    """Creates and removes loadings with their lines and totals."""

    @staticmethod
    def _build_items(item_model, loading, items, price_rule=None):
        built = []
        for item in items:
            weights = item_weights(item.get('no_trays'), item.get('loose'))
            price = to_decimal(item.get('price_per_kg'))
            total_price = price_rule(weights.total_kgs, price) if price_rule else Decimal('0.00')
            built.append(item_model(
                loading=loading,
                variety=item['variety'],
                no_trays=weights.no_trays,
                tray_kgs=weights.tray_kgs,
                loose=weights.loose,
                total_kgs=weights.total_kgs,
                price_per_kg=round2(price) if price_rule else Decimal('0.00'),
                total_price=total_price,
            ))
        item_model.objects.bulk_create(built)
        return built

    @staticmethod
    def _vehicle_fields(data, use_vehicle=True):
        if not use_vehicle:
            return {'vehicle': None, 'vehicle_no': ''}
        vehicle = data.get('vehicle')
        vehicle_no = (data.get('vehicle_no') or '').strip().upper()
        if vehicle is not None and not vehicle_no:
            vehicle_no = vehicle.vehicle_number
        return {'vehicle': vehicle, 'vehicle_no': vehicle_no}

    @classmethod
    @transaction.atomic
    def create_farmer_loading(cls, data, user=None):
        vehicle_fields = cls._vehicle_fields(data, use_vehicle=data.get('use_vehicle', False))
        loading = FarmerLoading.objects.create(
            bill_no=data['bill_no'],
            farmer_name=data['farmer_name'],
            fish_code=data.get('fish_code') or 'NA',
            village=data.get('village') or '',
            date=data['date'],
            created_by=user,
            **vehicle_fields,
        )
        cls._build_items(FarmerLoadingItem, loading, data['items'])

        loading.refresh_weight_totals()
        loading.total_price = Decimal('0.00')
        loading.grand_total = round_whole(net_kgs(loading.total_kgs, loading.has_vehicle))
        loading.save()

        logger.info(
            f"Farmer loading {loading.bill_no} recorded: {loading.total_kgs} kg, "
            f"grand total {loading.grand_total} kg"
        )
        return loading

    @classmethod
    @transaction.atomic
    def create_agent_loading(cls, data, user=None):
        vehicle_fields = cls._vehicle_fields(data)
        if not vehicle_fields['vehicle'] and not vehicle_fields['vehicle_no']:
            raise LoadingError("Vehicle is required")

        loading = AgentLoading.objects.create(
            bill_no=data['bill_no'],
            agent_name=data['agent_name'],
            fish_code=data.get('fish_code') or '',
            village=data.get('village') or '',
            date=data['date'],
            created_by=user,
            **vehicle_fields,
        )
        cls._build_items(
            AgentLoadingItem,
            loading,
            data['items'],
            price_rule=lambda kgs, price: round2(deducted_amount(kgs, price)),
        )

        loading.refresh_weight_totals()
        loading.total_price = round2(loading.items_price_total())
        loading.grand_total = loading.total_price
        loading.save()

        logger.info(f"Agent loading {loading.bill_no} recorded: {loading.total_kgs} kg, {loading.total_price}")
        return loading

    @classmethod
    @transaction.atomic
    def create_client_loading(cls, data, user=None):
        requested = defaultdict(lambda: Decimal('0'))
        for item in data['items']:
            weights = item_weights(item.get('no_trays'), item.get('loose'))
            if weights.total_kgs > 0:
                requested[item['variety'].code] += weights.total_kgs
        if not requested:
            raise LoadingError("Select at least one variety")

        StockLedger.lock_varieties(list(requested))
        StockLedger.ensure_available(dict(requested))

        loading = ClientLoading.objects.create(
            bill_no=data['bill_no'],
            client_name=data['client_name'],
            client=data.get('client'),
            fish_code=data.get('fish_code') or '',
            village=data.get('village') or '',
            date=data['date'],
            created_by=user,
            **cls._vehicle_fields(data),
        )
        cls._build_items(ClientLoadingItem, loading, data['items'])

        loading.refresh_weight_totals()
        loading.grand_total = net_kgs(loading.total_kgs, loading.has_vehicle)
        loading.save()

        logger.info(f"Client loading {loading.bill_no} recorded: {loading.total_kgs} kg out")
        return loading

    @staticmethod
    @transaction.atomic
    def delete_loading(loading):
        """
        Delete a loading with its lines. Dispatch charges and packing payments
        are kept but unlinked from the deleted bill.
        """
        loading.dispatch_charges.update(source_type='', source_record_id=None)
        loading.packing_amounts.update(source_type='', source_record_id=None)
        bill_no = loading.bill_no
        loading.delete()
        logger.info(f"{loading.LOAD_TYPE} loading {bill_no} deleted")
        return bill_no

    @staticmethod
    def set_trip_status(loading, trip_status):
        loading.trip_status = trip_status
        if trip_status == TripStatus.COMPLETED:
            loading.completed_at = timezone.now()
        elif trip_status == TripStatus.RUNNING:
            loading.completed_at = None
        loading.save(update_fields=['trip_status', 'completed_at', 'updated_at'])
        logger.info(f"Trip {loading.bill_no} marked {trip_status}")
        return loading


def agent_display_grand_total(loading):
    """Agent bill total including dispatch charges and packing amounts."""
    breakdown_total = sum((c.amount for c in loading.dispatch_charges.all()), Decimal('0'))
    return round2(loading.total_price + breakdown_total + loading.packing_amount_total)
