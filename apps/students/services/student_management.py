"""
Student management service - admission, profile edits and deletion.

Admissions lock the owner row so concurrent admissions of the same library
cannot hand out the same sequential id or the same seat slot.
"""

import logging
from datetime import date
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.students.engine import AdmissionRequest, admit
from apps.students.models import Student

from .fee_management import get_fee_structure
from .library_settings import get_due_date_rule
from .student_queries import build_seat_map, get_active_students, get_student


logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'father_name', 'mobile')


@transaction.atomic
def admit_student(
    *,
    owner: User,
    title: str,
    name: str,
    mobile: str,
    admission_type: str,
    seat_number: Optional[int],
    photo_url: str,
    admission_date: Optional[date] = None,
    shift: Optional[str] = None,
    father_name: str = ''
) -> Student:
    """
    Admit a new student onto a seat.

    This operation:
    1. Locks the owner so ids and seats are allocated one at a time
    2. Recomputes seat occupancy from the active students
    3. Validates the request and builds the record in the engine
    4. Saves the new student

    Args:
        owner: Library owner
        title: Title deciding the seat category ('Mr.', 'Ms.', ...)
        name: Student name
        mobile: Mobile number
        admission_type: 'Full-time' or 'Half-time'
        seat_number: Requested seat
        photo_url: Reference to the stored identity photo
        admission_date: Defaults to today
        shift: 'morning' or 'evening' for half-time plans
        father_name: Father's name

    Returns:
        Created Student instance

    Raises:
        MissingRequiredFieldError: If a required field is empty
        InvalidAdmissionTypeError: If plan and shift do not agree
        NoSeatAvailableError: If the seat is taken for this plan
    """
    User.objects.select_for_update().get(pk=owner.pk)

    active = get_active_students(owner=owner, lock=True)
    seats = build_seat_map(active)
    existing_ids = Student.objects.filter(owner=owner).values_list('student_id', flat=True)

    request = AdmissionRequest(
        title=title,
        name=name,
        father_name=father_name,
        mobile=mobile,
        admission_type=admission_type,
        shift=shift,
        seat_number=seat_number,
        admission_date=admission_date or timezone.localdate(),
        photo_url=photo_url,
    )
    record = admit(
        request,
        seats,
        get_fee_structure(owner=owner).to_schedule(),
        existing_ids=list(existing_ids),
        due_date_rule=get_due_date_rule(),
    )

    student = Student(owner=owner).apply_record(record)
    student.save()

    logger.info(
        "Admitted %s (%s) to seat %s as %s, next due %s",
        student.student_id, student.name, student.seat_number,
        record.plan, student.next_due_date,
    )
    return student


@transaction.atomic
def update_student_details(*, owner: User, student_id: str, **changes) -> Student:
    """
    Edit a student's name, father's name or mobile.

    Plan, seat and ledger fields are not editable here; they change only
    through admission, payment, departure and reactivation.
    """
    student = get_student(owner=owner, student_id=student_id, lock=True)

    update_fields = []
    for field in EDITABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(student, field, changes[field])
            update_fields.append(field)

    if update_fields:
        student.save(update_fields=update_fields + ['updated_at'])
    return student


@transaction.atomic
def delete_student(*, owner: User, student_id: str) -> None:
    """
    Permanently delete a student.

    The seat is freed implicitly: occupancy is derived from the remaining
    active students.
    """
    student = get_student(owner=owner, student_id=student_id, lock=True)
    student.delete()
    logger.info("Deleted student %s (%s)", student_id, student.name)
