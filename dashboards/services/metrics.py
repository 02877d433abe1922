"""
Dashboard Metrics Service

Sales and purchase figures for a date range:
- Summary: sales, purchase, shipments, outstanding receivable
- Series per day, week (Sunday start) or month bucket
- Top varieties sold by kilograms
- Outstanding ageing of client bills
- Fish variety list for the quick-add form
"""

from collections import defaultdict
from datetime import datetime, time, timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.core.cache import cache
from django.db.models import Sum
from django.utils import timezone

from loadings.models import AgentLoading, ClientLoading, ClientLoadingItem, FarmerLoading
from parties.models import FishVariety
from payments.models import ClientPayment

AGGREGATIONS = ('day', 'week', 'month')
DEFAULT_RANGE_DAYS = 7
TOP_VARIETIES = 6

AGEING_BUCKETS = [
    ('0-7 days', 0, 7),
    ('8-15 days', 8, 15),
    ('16-30 days', 16, 30),
    ('> 30 days', 31, None),
]


def _money(value):
    return float((value or Decimal('0')).quantize(Decimal('0.01')))


def week_start(day):
    """The Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def build_buckets(date_from, date_to, agg):
    """
    Consecutive ``(label, start, end)`` date buckets covering the range.
    Week and month buckets are aligned to calendar boundaries, so the first
    and last may extend past the range.
    """
    buckets = []
    if agg == 'month':
        current = date_from.replace(day=1)
        while current <= date_to:
            end = current + relativedelta(months=1) - timedelta(days=1)
            buckets.append((current.strftime('%B %Y'), current, end))
            current += relativedelta(months=1)
    elif agg == 'week':
        current = week_start(date_from)
        while current <= date_to:
            end = current + timedelta(days=6)
            buckets.append((f"{current.strftime('%b %d')} - {end.strftime('%b %d')}", current, end))
            current += timedelta(weeks=1)
    else:
        current = date_from
        while current <= date_to:
            buckets.append((current.strftime('%a, %b %d'), current, current))
            current += timedelta(days=1)
    return buckets


class DashboardMetricsService:
    """Metrics for ``[date_from, date_to]`` (inclusive, local dates)."""

    def __init__(self, date_from=None, date_to=None, agg='day'):
        today = timezone.localdate()
        self.date_to = date_to or today
        self.date_from = date_from or (self.date_to - timedelta(days=DEFAULT_RANGE_DAYS - 1))
        self.agg = agg if agg in AGGREGATIONS else 'day'

        tz = timezone.get_current_timezone()
        self.start = timezone.make_aware(datetime.combine(self.date_from, time.min), tz)
        self.end = timezone.make_aware(datetime.combine(self.date_to, time.max), tz)

    @property
    def cache_key(self):
        return f"dashboard:metrics:{self.date_from.isoformat()}:{self.date_to.isoformat()}:{self.agg}"

    def in_range(self, queryset, field='date'):
        return queryset.filter(**{f"{field}__gte": self.start, f"{field}__lte": self.end})

    def get_metrics(self, use_cache=True):
        if use_cache:
            cached = cache.get(self.cache_key)
            if cached is not None:
                return cached

        series = self.get_series()
        result = {
            'range': {
                'from': self.date_from.isoformat(),
                'to': self.date_to.isoformat(),
                'agg': self.agg,
            },
            'today': self.get_summary(),
            'weekly': series,
            'movement': series,
            'top_varieties': self.get_top_varieties(),
            'outstanding_ageing': self.get_outstanding_ageing(),
            'fish_varieties': self.get_fish_varieties(),
        }
        cache.set(self.cache_key, result, timeout=settings.DASHBOARD_CACHE_TIMEOUT)
        return result

    def get_summary(self):
        client_loadings = self.in_range(ClientLoading.objects.all())
        sales_agg = client_loadings.aggregate(total=Sum('total_price'))
        sales = sales_agg['total'] or Decimal('0')

        purchase = Decimal('0')
        for model in (FarmerLoading, AgentLoading):
            purchase += self.in_range(model.objects.all()).aggregate(total=Sum('total_price'))['total'] or Decimal('0')

        paid = self.in_range(ClientPayment.objects.all()).aggregate(total=Sum('amount'))['total'] or Decimal('0')

        return {
            'sales': _money(sales),
            'purchase': _money(purchase),
            'pending_shipments': client_loadings.count(),
            'outstanding': _money(max(Decimal('0'), sales - paid)),
        }

    def _totals_by_day(self, model):
        totals = defaultdict(Decimal)
        for date, total_price in self.in_range(model.objects.all()).values_list('date', 'total_price'):
            totals[timezone.localtime(date).date()] += total_price or Decimal('0')
        return totals

    def get_series(self):
        sales_by_day = self._totals_by_day(ClientLoading)
        farmer_by_day = self._totals_by_day(FarmerLoading)
        agent_by_day = self._totals_by_day(AgentLoading)

        def bucket_sum(totals, start, end):
            return sum((amount for day, amount in totals.items() if start <= day <= end), Decimal('0'))

        series = []
        for label, start, end in build_buckets(self.date_from, self.date_to, self.agg):
            series.append({
                'label': label,
                'sales': _money(bucket_sum(sales_by_day, start, end)),
                'purchase': _money(
                    bucket_sum(farmer_by_day, start, end) + bucket_sum(agent_by_day, start, end)
                ),
            })
        return series

    def get_top_varieties(self):
        rows = (
            self.in_range(ClientLoadingItem.objects.all(), field='loading__date')
            .values('variety_id')
            .annotate(kgs=Sum('total_kgs'))
            .order_by('-kgs', 'variety_id')[:TOP_VARIETIES]
        )
        return [
            {'code': row['variety_id'], 'kgs': float(row['kgs'].quantize(Decimal('0.1')))}
            for row in rows
        ]

    def get_outstanding_ageing(self):
        today = timezone.localdate()
        amounts = {label: Decimal('0') for label, _, _ in AGEING_BUCKETS}

        loadings = self.in_range(ClientLoading.objects.all()).annotate(paid=Sum('payments__amount'))
        for loading in loadings:
            remaining = loading.total_price - (loading.paid or Decimal('0'))
            if remaining <= 0:
                continue
            age = (today - timezone.localtime(loading.date).date()).days
            for label, low, high in AGEING_BUCKETS:
                if age >= low and (high is None or age <= high):
                    amounts[label] += remaining
                    break

        return [{'bucket': label, 'amount': _money(amounts[label])} for label, _, _ in AGEING_BUCKETS]

    def get_fish_varieties(self):
        return list(FishVariety.objects.order_by('code').values('code', 'name'))
