"""
Lifecycle service - departures with credit transfer, and reactivation.

A departure with a credit transfer writes two student rows. Both come from
a single engine call and are saved in one transaction, so either both
records change or neither does.

Writers that lock more than one student take the owner row lock first, so
they queue behind each other instead of locking students in crossed order.
"""

import logging
from typing import Optional, Tuple

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.students.engine import depart, reactivate, remaining_days
from apps.students.exceptions import InvalidTransferTargetError, StudentNotFoundError
from apps.students.models import Student

from .student_queries import build_seat_map, get_active_students, get_student


logger = logging.getLogger(__name__)


def departure_preview(*, owner: User, student_id: str) -> dict:
    """Remaining prepaid days a departure would free up today."""
    today = timezone.localdate()
    student = get_student(owner=owner, student_id=student_id)
    return {
        'student_id': student.student_id,
        'next_due_date': student.next_due_date,
        'as_of': today,
        'remaining_days': remaining_days(student.to_record(), today),
    }


@transaction.atomic
def depart_student(
    *,
    owner: User,
    student_id: str,
    transfer_to: Optional[str] = None,
    reason: Optional[str] = None
) -> Tuple[Student, Optional[Student]]:
    """
    Record a departure, optionally crediting unused days to another student.

    Args:
        owner: Library owner
        student_id: Departing student
        transfer_to: Student id receiving the remaining days
        reason: Free-text departure reason

    Returns:
        Tuple of (departed student, credited student or None)

    Raises:
        StudentNotFoundError: If the departing student doesn't exist
        InvalidTransferTargetError: If the target is missing, inactive or
            the departing student
        AlreadyDepartedError: If the student has already departed
    """
    today = timezone.localdate()
    User.objects.select_for_update().get(pk=owner.pk)
    student = get_student(owner=owner, student_id=student_id, lock=True)

    target = None
    if transfer_to:
        try:
            target = get_student(owner=owner, student_id=transfer_to, lock=True)
        except StudentNotFoundError:
            raise InvalidTransferTargetError(f"Transfer target {transfer_to} not found")

    result = depart(
        student.to_record(),
        target.to_record() if target is not None else None,
        reason,
        today,
    )

    student.apply_record(result.departed)
    student.save(update_fields=[
        'status', 'departure_date', 'departure_reason', 'transfer_log', 'updated_at',
    ])

    credited = None
    if result.credited is not None:
        target.apply_record(result.credited)
        target.save(update_fields=['next_due_date', 'received_credit_log', 'updated_at'])
        credited = target

    logger.info(
        "Student %s departed on %s%s",
        student.student_id, today,
        f", {result.departed.transfer_log.days_transferred} day(s) to {target.student_id}"
        if target is not None else '',
    )
    return student, credited


@transaction.atomic
def reactivate_student(*, owner: User, student_id: str, seat_number: int) -> Student:
    """
    Bring a departed student back on a fully free seat.

    Raises:
        StudentNotFoundError: If the student doesn't exist
        StudentNotDepartedError: If the student is still active
        SeatNotAvailableForReactivationError: If either slot of the seat is taken
    """
    User.objects.select_for_update().get(pk=owner.pk)
    student = get_student(owner=owner, student_id=student_id, lock=True)

    active = get_active_students(owner=owner, lock=True)
    seats = build_seat_map(active)

    record = reactivate(student.to_record(), seat_number, seats)
    student.apply_record(record)
    student.save(update_fields=[
        'status', 'seat_number', 'departure_date', 'departure_reason', 'transfer_log',
        'updated_at',
    ])

    logger.info("Reactivated %s on seat %s", student.student_id, seat_number)
    return student
