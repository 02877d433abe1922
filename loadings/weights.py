"""
Weight and money arithmetic shared by loadings, bills and stock.

A tray holds a fixed 35 kg of fish. Loads that are not carried by a company
vehicle lose a 5% shrinkage deduction before they are billed.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_FLOOR, ROUND_HALF_UP

from django.conf import settings

TWO_PLACES = Decimal('0.01')
THREE_PLACES = Decimal('0.001')
WHOLE = Decimal('1')
ZERO = Decimal('0')


def tray_weight():
    return Decimal(settings.TRAY_WEIGHT_KG)


def deduction_factor():
    return Decimal('1') - Decimal(str(settings.DEDUCTION_PERCENT)) / Decimal('100')


def to_decimal(value, default=ZERO):
    """Parse ``value`` as a Decimal, returning ``default`` for blanks and garbage."""
    if value is None or value == '':
        return default
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    return parsed if parsed.is_finite() else default


def round2(value):
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round3(value):
    return to_decimal(value).quantize(THREE_PLACES, rounding=ROUND_HALF_UP)


def round_whole(value):
    return to_decimal(value).quantize(WHOLE, rounding=ROUND_HALF_UP)


def normalize_trays(value):
    """Whole, non-negative tray count."""
    trays = to_decimal(value)
    if trays <= 0:
        return 0
    return int(trays.to_integral_value(rounding=ROUND_FLOOR))


def normalize_loose(value):
    loose = to_decimal(value)
    return loose if loose > 0 else ZERO


def format_kgs(value):
    """Kilograms without trailing zeros, e.g. ``70`` or ``35.5``."""
    value = to_decimal(value).normalize()
    return f"{value:f}"


@dataclass(frozen=True)
class ItemWeights:
    no_trays: int
    tray_kgs: Decimal
    loose: Decimal
    total_kgs: Decimal


def item_weights(no_trays, loose):
    """Weigh one line: ``total_kgs = trays * 35 + loose``."""
    trays = normalize_trays(no_trays)
    loose = normalize_loose(loose)
    tray_kgs = round2(trays * tray_weight())
    return ItemWeights(
        no_trays=trays,
        tray_kgs=tray_kgs,
        loose=round2(loose),
        total_kgs=round2(tray_kgs + loose),
    )


def net_kgs(total_kgs, has_vehicle):
    """Billable kilograms: the full weight for vehicle loads, else after the deduction."""
    total_kgs = to_decimal(total_kgs)
    if has_vehicle:
        return round2(total_kgs)
    return round2(total_kgs * deduction_factor())


def deducted_amount(total_kgs, price_per_kg):
    """Line value after the shrinkage deduction, unrounded."""
    return to_decimal(total_kgs) * to_decimal(price_per_kg) * deduction_factor()
