"""
Charge Signals

Keeps ``dispatch_charges_total`` and ``packing_amount_total`` on the parent
loading equal to the sum of its charge rows.
"""

import logging
from decimal import Decimal

from django.db.models import Sum
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from loadings.models import get_loading_model

from .models import DispatchCharge, PackingAmount

logger = logging.getLogger(__name__)

TOTAL_FIELDS = {
    DispatchCharge: ('dispatch_charges_total', 'amount'),
    PackingAmount: ('packing_amount_total', 'total_amount'),
}


def update_loading_charge_total(charge_model, source_type, source_record_id):
    """Recalculate one charge total on the loading identified by type and id."""
    if not source_type or not source_record_id:
        return

    loading_model = get_loading_model(source_type)
    if loading_model is None:
        return

    total_field, amount_field = TOTAL_FIELDS[charge_model]
    total = charge_model.objects.filter(
        source_type=source_type,
        source_record_id=source_record_id,
    ).aggregate(total=Sum(amount_field))['total'] or Decimal('0.00')

    loading_model.objects.filter(pk=source_record_id).update(**{total_field: total})
    logger.debug(f"Updated {source_type} loading {source_record_id} {total_field}: {total}")


@receiver(pre_save, sender=DispatchCharge)
@receiver(pre_save, sender=PackingAmount)
def charge_pre_save_track_link(sender, instance, **kwargs):
    """Remember the previous link so a re-pointed charge also refreshes the old loading."""
    instance._previous_link = None
    if instance.pk:
        previous = sender.objects.filter(pk=instance.pk).values('source_type', 'source_record_id').first()
        if previous:
            instance._previous_link = (previous['source_type'], previous['source_record_id'])


@receiver(post_save, sender=DispatchCharge)
@receiver(post_save, sender=PackingAmount)
def charge_saved_update_loading(sender, instance, created, **kwargs):
    update_loading_charge_total(sender, instance.source_type, instance.source_record_id)

    previous = getattr(instance, '_previous_link', None)
    if previous and previous != (instance.source_type, instance.source_record_id):
        update_loading_charge_total(sender, *previous)


@receiver(post_delete, sender=DispatchCharge)
@receiver(post_delete, sender=PackingAmount)
def charge_deleted_update_loading(sender, instance, **kwargs):
    update_loading_charge_total(sender, instance.source_type, instance.source_record_id)
