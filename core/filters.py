"""
Query-string helpers shared by list and export endpoints.

Malformed values raise DRF's ``ValidationError`` so the request answers 400.
"""

from datetime import date

from rest_framework.exceptions import ValidationError


def date_param(request, name):
    """Parse ``?<name>=YYYY-MM-DD``; ``None`` when absent."""
    value = request.query_params.get(name)
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValidationError({name: 'Invalid date format. Use YYYY-MM-DD'})


def filter_date_range(queryset, request, field='date'):
    """Apply ``?from=`` and ``?to=`` (inclusive days) to a datetime ``field``."""
    date_from = date_param(request, 'from')
    date_to = date_param(request, 'to')
    if date_from:
        queryset = queryset.filter(**{f'{field}__date__gte': date_from})
    if date_to:
        queryset = queryset.filter(**{f'{field}__date__lte': date_to})
    return queryset
