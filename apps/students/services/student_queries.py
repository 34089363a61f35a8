"""
Read-side student services: lookups, seat map, dashboard and search.

Stored rows are converted to engine records one by one. A row that cannot
be read (for example a half-time plan without a shift) is reported as a
``DataIntegrityConflictError`` instead of failing the whole read.
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.students.engine import (
    AdmissionPlan,
    GenderCategory,
    SeatMap,
    Shift,
    StudentRecord,
    compute_occupancy,
    dashboard_stats,
    find_available_seats,
    find_student,
    is_past_due,
)
from apps.students.exceptions import (
    DataIntegrityConflictError,
    StudentNotFoundError,
    StudentServiceError,
)
from apps.students.models import Student, StudentStatusChoice

from .library_settings import get_seat_layout


logger = logging.getLogger(__name__)


def get_student(*, owner: User, student_id: str, lock: bool = False) -> Student:
    """
    Get one of the owner's students by its sequential id (e.g. 'S007').

    Args:
        owner: Library owner
        student_id: Student id scoped to the owner
        lock: Take a row lock (only meaningful inside a transaction)

    Raises:
        StudentNotFoundError: If no such student exists for this owner
    """
    queryset = Student.objects.all()
    if lock:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(owner=owner, student_id=str(student_id).upper())
    except Student.DoesNotExist:
        raise StudentNotFoundError(f"Student {student_id} not found")


def get_students(*, owner: User, status: Optional[str] = None) -> QuerySet:
    queryset = Student.objects.filter(owner=owner)
    if status:
        queryset = queryset.filter(status=status)
    return queryset


def get_active_students(*, owner: User, lock: bool = False) -> List[Student]:
    queryset = get_students(owner=owner, status=StudentStatusChoice.ACTIVE)
    if lock:
        queryset = queryset.select_for_update()
    return list(queryset)


def to_records(
    students: Iterable[Student],
) -> Tuple[List[StudentRecord], List[DataIntegrityConflictError]]:
    """Engine records for ``students``, plus one conflict per unreadable row."""
    records, unreadable = [], []
    for student in students:
        try:
            records.append(student.to_record())
        except (StudentServiceError, ValueError, KeyError, TypeError) as e:
            conflict = DataIntegrityConflictError(
                student.seat_number, None, None, student.student_id, reason=str(e)
            )
            logger.warning("Skipping student row: %s", conflict)
            unreadable.append(conflict)
    return records, unreadable


def build_seat_map(students: Iterable[Student]) -> SeatMap:
    """
    Occupancy of ``students`` over the configured layout.

    Unreadable rows are listed in ``unplaced`` and keep the free slots of
    their recorded seat blocked, so nobody is admitted on top of them.
    """
    records, unreadable = to_records(students)
    seats = compute_occupancy(records, get_seat_layout())

    blocked = {conflict.seat_number: conflict.claimant_id for conflict in unreadable}
    held = []
    for seat in seats:
        holder = blocked.get(seat.number)
        if holder is not None:
            seat = replace(seat, **{
                slot.value: holder for slot in Shift if seat.is_slot_free(slot)
            })
        held.append(seat)
    return SeatMap(held, unplaced=seats.unplaced + tuple(unreadable))


def get_seat_map(*, owner: User) -> SeatMap:
    """Current seat occupancy, always recomputed from active students."""
    return build_seat_map(get_active_students(owner=owner))


def get_available_seats(*, owner: User, gender_category: str, admission_type: str,
                        shift: Optional[str] = None):
    plan = AdmissionPlan.parse(admission_type, shift)
    return find_available_seats(
        get_seat_map(owner=owner),
        GenderCategory(gender_category),
        plan,
    )


def filter_by_fee_status(students, fee_status: str, as_of=None) -> List[Student]:
    """Keep students whose fee is 'due' or 'paid' as of ``as_of`` (default today)."""
    as_of = as_of or timezone.localdate()
    want_due = fee_status == 'due'
    return [s for s in students if is_past_due(s.next_due_date, as_of) == want_due]


def get_dashboard(*, owner: User) -> dict:
    """Dashboard cards: active count, seats occupied, pending fees."""
    today = timezone.localdate()
    students = list(get_students(owner=owner))
    by_id = {s.student_id: s for s in students}

    records, unreadable = to_records(students)
    stats = dashboard_stats(records, today)
    stats['fees_pending'] = [by_id[record.id] for record in stats['fees_pending']]
    stats['conflicts'] = unreadable
    stats['as_of'] = today
    return stats


def search_student(*, owner: User, query: str) -> Optional[Student]:
    """Find a student profile by name, mobile or exact id."""
    students = list(get_students(owner=owner))
    records, _ = to_records(students)
    match = find_student(records, query)
    if match is None:
        return None
    return next(s for s in students if s.student_id == match.id)
