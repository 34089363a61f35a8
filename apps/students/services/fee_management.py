"""
Fee structure service.

The fee structure is read once per admission and copied onto the student;
edits here never touch existing students.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction

from apps.accounts.models import User
from apps.students.models import FeeStructure

from .library_settings import get_default_fees


logger = logging.getLogger(__name__)


def get_fee_structure(*, owner: User) -> FeeStructure:
    """Return the owner's fee structure, creating it with defaults on first use."""
    fee_structure, created = FeeStructure.objects.get_or_create(
        owner=owner,
        defaults=get_default_fees(),
    )
    if created:
        logger.info("Created default fee structure for %s", owner)
    return fee_structure


@transaction.atomic
def update_fee_structure(
    *,
    owner: User,
    full_time_fee: Optional[Decimal] = None,
    half_time_fee: Optional[Decimal] = None
) -> FeeStructure:
    """
    Change current prices.

    Args:
        owner: Library owner
        full_time_fee: New full-time monthly price (unchanged if None)
        half_time_fee: New half-time monthly price (unchanged if None)

    Returns:
        Updated FeeStructure instance
    """
    get_fee_structure(owner=owner)
    fee_structure = FeeStructure.objects.select_for_update().get(owner=owner)

    if full_time_fee is not None:
        fee_structure.full_time_fee = full_time_fee
    if half_time_fee is not None:
        fee_structure.half_time_fee = half_time_fee
    fee_structure.save()

    logger.info(
        "Fee structure for %s set to full-time %s, half-time %s",
        owner, fee_structure.full_time_fee, fee_structure.half_time_fee,
    )
    return fee_structure
