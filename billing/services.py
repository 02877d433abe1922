"""
Bill item services.

Vendor bills are the farmer and agent loadings seen from the purchase side:
each line is priced ``round(total_kgs * price * 0.95)`` in whole rupees and
the bill total is the sum of its lines.

Client bills are client loadings seen from the sales side: the bill's
billable weight follows the vehicle rule, and each line is charged for its
share of that weight (its effective kilograms) at its own price.

Removing the last line of a bill removes the bill.
"""

import logging
from decimal import Decimal

from django.db import transaction

from audit.models import AuditAction
from loadings.models import (
    AgentLoading,
    AgentLoadingItem,
    ClientLoadingItem,
    FarmerLoading,
    FarmerLoadingItem,
)
from loadings.services import LoadingService, StockExceededError, StockLedger
from loadings.weights import (
    deducted_amount,
    item_weights,
    net_kgs,
    normalize_loose,
    normalize_trays,
    round2,
    round3,
    round_whole,
    to_decimal,
)

logger = logging.getLogger(__name__)

VENDOR_MODULE = 'Vendor Bills'
CLIENT_MODULE = 'Client Bills'

VENDOR_SOURCES = {
    'farmer': (FarmerLoading, FarmerLoadingItem, 'Farmer bill not found'),
    'agent': (AgentLoading, AgentLoadingItem, 'Agent bill not found'),
}


class BillingError(ValueError):
    """Raised when a bill line request breaks a business rule."""
    pass


class BillNotFoundError(Exception):
    """Raised when the bill a line belongs to does not exist."""
    pass


def item_snapshot(item):
    return {
        'bill_no': item.loading.bill_no,
        'name': item.loading.party_name,
        'variety_code': item.variety_id,
        'no_trays': item.no_trays,
        'loose': item.loose,
        'tray_kgs': item.tray_kgs,
        'total_kgs': item.total_kgs,
        'price_per_kg': item.price_per_kg,
        'total_price': item.total_price,
    }


def vendor_line_price(total_kgs, price_per_kg):
    """Whole-rupee line value after the shrinkage deduction."""
    return round_whole(deducted_amount(total_kgs, price_per_kg))


def effective_kgs(item_kgs, total_kgs, grand_total):
    """A line's share of the billable weight, to 3 decimals."""
    item_kgs = to_decimal(item_kgs)
    total_kgs = to_decimal(total_kgs)
    if total_kgs <= 0:
        return item_kgs
    return round3(item_kgs / total_kgs * to_decimal(grand_total))


def _delete_item_and_maybe_bill(item):
    """Delete ``item``; the bill goes too when it was the last line."""
    loading = item.loading
    loading_id = loading.pk
    item.delete()

    if not loading.items.exists():
        LoadingService.delete_loading(loading)
        return {'deleted_bill': True, 'loading_id': str(loading_id)}

    return {'deleted_bill': False, 'loading_id': str(loading_id), 'loading': loading}


# =============================================================================
# VENDOR BILLS
# =============================================================================

class VendorBillService:

    @staticmethod
    def refresh_totals(loading):
        loading.refresh_weight_totals()
        loading.total_price = round2(loading.items_price_total())
        loading.grand_total = loading.total_price
        loading.save()
        return loading

    @staticmethod
    def find_item(item_id):
        """Look the line up among farmer then agent lines."""
        for source, (_, item_model, _) in VENDOR_SOURCES.items():
            item = item_model.objects.select_related('loading').filter(pk=item_id).first()
            if item is not None:
                return source, item
        return None, None

    @classmethod
    @transaction.atomic
    def add_item(cls, source, loading_id, data, audit=None):
        loading_model, item_model, not_found = VENDOR_SOURCES[source]
        loading = loading_model.objects.select_for_update().filter(pk=loading_id).first()
        if loading is None:
            raise BillNotFoundError(not_found)

        weights = item_weights(data.get('no_trays'), data.get('loose'))
        price = max(Decimal('0'), to_decimal(data.get('price_per_kg')))
        item = item_model.objects.create(
            loading=loading,
            variety=data['variety'],
            no_trays=weights.no_trays,
            tray_kgs=weights.tray_kgs,
            loose=weights.loose,
            total_kgs=weights.total_kgs,
            price_per_kg=round2(price),
            total_price=vendor_line_price(weights.total_kgs, price),
        )
        cls.refresh_totals(loading)

        if audit is not None:
            audit.log(
                VENDOR_MODULE,
                AuditAction.CREATE,
                record_id=item.pk,
                new_values={'source': source, **item_snapshot(item)},
            )

        logger.info(f"Vendor bill {loading.bill_no}: added {item.variety_id} line, total {loading.total_price}")
        return item

    @classmethod
    @transaction.atomic
    def update_item(cls, item, data, audit=None):
        old_values = item_snapshot(item)

        no_trays = normalize_trays(data['no_trays']) if 'no_trays' in data else item.no_trays
        loose = normalize_loose(data['loose']) if 'loose' in data else item.loose
        if 'price_per_kg' in data:
            price = max(Decimal('0'), to_decimal(data['price_per_kg']))
        else:
            price = item.price_per_kg

        weights = item_weights(no_trays, loose)
        item.no_trays = weights.no_trays
        item.loose = weights.loose
        item.tray_kgs = weights.tray_kgs
        item.total_kgs = weights.total_kgs
        item.price_per_kg = round2(price)
        item.total_price = vendor_line_price(weights.total_kgs, price)
        item.save()

        cls.refresh_totals(item.loading)

        if audit is not None:
            audit.log_change(
                VENDOR_MODULE,
                item.pk,
                old_values,
                item_snapshot(item),
                label=f"Vendor Bills updated for bill: {item.loading.bill_no}",
            )
        return item

    @classmethod
    @transaction.atomic
    def delete_item(cls, item, audit=None):
        snapshot = item_snapshot(item)
        item_id = item.pk
        result = _delete_item_and_maybe_bill(item)
        loading = result.pop('loading', None)
        if loading is not None:
            cls.refresh_totals(loading)

        if audit is not None:
            audit.log(VENDOR_MODULE, AuditAction.DELETE, record_id=item_id, old_values=snapshot)

        logger.info(f"Vendor bill {snapshot['bill_no']}: line {item_id} deleted")
        return result


# =============================================================================
# CLIENT BILLS
# =============================================================================

class ClientBillService:

    @staticmethod
    def reprice(loading):
        """
        Recompute weights and the billable grand total, then charge each line
        for its effective kilograms at its own price.
        """
        loading.refresh_weight_totals()
        loading.grand_total = net_kgs(loading.total_kgs, loading.has_vehicle)

        total_price = Decimal('0.00')
        for item in loading.items.all():
            share = effective_kgs(item.total_kgs, loading.total_kgs, loading.grand_total)
            item.total_price = round2(share * item.price_per_kg)
            item.save(update_fields=['total_price', 'updated_at'])
            total_price += item.total_price

        loading.total_price = round2(total_price)
        loading.save()
        return loading

    @staticmethod
    def update_total(loading):
        """Set the bill total price to the sum of its lines."""
        loading.total_price = round2(loading.items_price_total())
        loading.save(update_fields=['total_price', 'updated_at'])
        return loading.total_price

    @classmethod
    @transaction.atomic
    def add_item(cls, loading, variety, no_trays, loose, audit=None):
        weights = item_weights(no_trays, loose)
        if weights.no_trays <= 0 and weights.loose <= 0:
            raise BillingError("Enter trays or loose")

        StockLedger.lock_varieties([variety.code])
        available = StockLedger.available_kgs(variety.code)
        if weights.total_kgs > available:
            logger.warning(
                f"Client bill {loading.bill_no}: {weights.total_kgs} kg of {variety.code} "
                f"requested, {available} available"
            )
            raise StockExceededError(variety.code, available)

        item = ClientLoadingItem.objects.create(
            loading=loading,
            variety=variety,
            no_trays=weights.no_trays,
            tray_kgs=weights.tray_kgs,
            loose=weights.loose,
            total_kgs=weights.total_kgs,
            price_per_kg=Decimal('0.00'),
            total_price=Decimal('0.00'),
        )
        cls.reprice(loading)

        if audit is not None:
            audit.log(
                CLIENT_MODULE,
                AuditAction.CREATE,
                record_id=item.pk,
                new_values={**item_snapshot(item), 'vehicle_number': loading.vehicle_number or None},
            )

        logger.info(f"Client bill {loading.bill_no}: added {variety.code} line, {weights.total_kgs} kg")
        return item

    @classmethod
    @transaction.atomic
    def update_item(cls, item, data, audit=None):
        """
        Update a line's price. Without an explicit ``total_price`` the line is
        recharged for its effective kilograms at the new price.
        """
        old_values = item_snapshot(item)
        loading = item.loading

        if 'price_per_kg' in data:
            item.price_per_kg = round2(max(Decimal('0'), to_decimal(data['price_per_kg'])))

        if 'total_price' in data:
            item.total_price = round2(max(Decimal('0'), to_decimal(data['total_price'])))
        else:
            share = effective_kgs(item.total_kgs, loading.total_kgs, loading.grand_total)
            item.total_price = round2(share * item.price_per_kg)

        item.save()
        cls.update_total(loading)

        if audit is not None:
            audit.log_change(
                CLIENT_MODULE,
                item.pk,
                old_values,
                item_snapshot(item),
                label=f"Client Bills updated for bill: {loading.bill_no}",
            )
        return item

    @classmethod
    @transaction.atomic
    def delete_item(cls, item, audit=None):
        snapshot = item_snapshot(item)
        item_id = item.pk
        result = _delete_item_and_maybe_bill(item)
        loading = result.pop('loading', None)
        if loading is not None:
            cls.reprice(loading)

        if audit is not None:
            audit.log(CLIENT_MODULE, AuditAction.DELETE, record_id=item_id, old_values=snapshot)

        logger.info(f"Client bill {snapshot['bill_no']}: line {item_id} deleted")
        return result
