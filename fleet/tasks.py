"""
Fleet Celery tasks.

Daily compliance check of own vehicles' documents.
"""
from datetime import timedelta
import logging

from celery import shared_task
from django.conf import settings
from django.db.models import Q
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task
def check_vehicle_document_expiry():
    """
    Find vehicles with a document expiring within
    ``DOCUMENT_EXPIRY_WARNING_DAYS`` (already expired ones included).

    Scheduled via Celery Beat to run daily at 7 AM.
    """
    from fleet.models import Vehicle

    until = timezone.localdate() + timedelta(days=settings.DOCUMENT_EXPIRY_WARNING_DAYS)

    expiring_filter = Q()
    for field, _ in Vehicle.DOCUMENT_FIELDS:
        expiring_filter |= Q(**{f"{field}__lte": until})

    results = []
    for vehicle in Vehicle.objects.filter(expiring_filter).order_by('vehicle_number'):
        documents = vehicle.expiring_documents(until)
        for doc in documents:
            logger.warning(
                f"Vehicle {vehicle.vehicle_number}: {doc['document']} expires on {doc['expires_on']}"
            )
        results.append({
            'vehicle_id': str(vehicle.pk),
            'vehicle_number': vehicle.vehicle_number,
            'documents': [
                {'document': doc['document'], 'expires_on': doc['expires_on'].isoformat()}
                for doc in documents
            ],
        })

    logger.info(f"Document expiry check: {len(results)} vehicle(s) need attention")
    return {'vehicles': results, 'count': len(results)}
