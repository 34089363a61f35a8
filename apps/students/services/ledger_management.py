"""Fee ledger service - payments and the mark-as-due override."""

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.students.engine import mark_as_due, payment_total, record_payment
from apps.students.models import Student

from .student_queries import get_student


logger = logging.getLogger(__name__)


@transaction.atomic
def record_fee_payment(
    *,
    owner: User,
    student_id: str,
    method: str,
    months: int = 1,
    amount: Optional[Decimal] = None
) -> Student:
    """
    Record one or more monthly payments.

    Args:
        owner: Library owner
        student_id: Paying student
        method: Payment method ('UPI', 'Cash', ...)
        months: Number of months paid (>= 1)
        amount: Per-month amount; defaults to the student's admission fee

    Returns:
        Updated Student instance

    Raises:
        StudentNotFoundError: If the student doesn't exist
        StudentNotActiveError: If the student has departed
        InvalidPaymentError: If months or amount is invalid
    """
    today = timezone.localdate()
    student = get_student(owner=owner, student_id=student_id, lock=True)
    amount = student.fee_amount if amount is None else amount

    record = record_payment(
        student.to_record(),
        amount=amount,
        method=method,
        months=months,
        paid_on=today,
    )
    student.apply_record(record)
    student.save(update_fields=['payment_history', 'next_due_date', 'updated_at'])

    logger.info(
        "Payment of %s (%s x %s) by %s via %s, next due %s",
        payment_total(amount, months), months, amount,
        student.student_id, method, student.next_due_date,
    )
    return student


@transaction.atomic
def mark_fee_due(*, owner: User, student_id: str) -> Student:
    """Force the student's fee to show as due (due date becomes yesterday)."""
    today = timezone.localdate()
    student = get_student(owner=owner, student_id=student_id, lock=True)

    record = mark_as_due(student.to_record(), today)
    student.apply_record(record)
    student.save(update_fields=['next_due_date', 'updated_at'])

    logger.info("Marked fee of %s as due (next due %s)", student.student_id, student.next_due_date)
    return student
