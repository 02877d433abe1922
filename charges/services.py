"""
Charge services: recording dispatch charges and packing payments against loadings.
"""

import logging

from django.db import transaction

from invoices.services import next_packing_bill_number
from loadings.models import get_loading_model

from .models import DispatchCharge, PackingAmount

logger = logging.getLogger(__name__)


class LoadingNotFoundError(Exception):
    """Raised when a charge names a loading that does not exist."""
    pass


def resolve_loading(source_type, source_record_id):
    model = get_loading_model(source_type)
    if model is None:
        return None
    return model.objects.filter(pk=source_record_id).first()


class ChargeService:

    @staticmethod
    @transaction.atomic
    def create_dispatch_charge(data, user=None):
        loading = resolve_loading(data['source_type'], data['source_record_id'])
        if loading is None:
            raise LoadingNotFoundError(
                f"No {data['source_type'].lower()} loading found with ID: {data['source_record_id']}"
            )

        charge = DispatchCharge(
            type=data['type'],
            amount=data['amount'],
            label=data.get('label') or '',
            notes=data.get('notes') or '',
            created_by=user,
        )
        charge.link_to(loading)
        charge.save()

        logger.info(f"Dispatch charge {charge.type} {charge.amount} added to {loading.bill_no}")
        return charge

    @staticmethod
    @transaction.atomic
    def create_packing_amount(data, user=None):
        loading = None
        if data.get('source_type'):
            loading = resolve_loading(data['source_type'], data['source_record_id'])
            if loading is None:
                raise LoadingNotFoundError(f"Linked {data['source_type'].lower()} loading not found")

        packing = PackingAmount(
            bill_no=next_packing_bill_number(),
            mode=data['mode'],
            workers=data['workers'],
            temperature=data['temperature'],
            total_amount=data['total_amount'],
            payment_mode=data['payment_mode'],
            reference=data.get('reference') or '',
            created_by=user,
        )
        packing.link_to(loading)
        packing.save()

        logger.info(f"Packing amount {packing.bill_no} recorded: {packing.total_amount}")
        return packing
