"""Dashboard figures and profile search over one account's students."""

from typing import Iterable, Optional

from .billing_ledger import fees_pending, total_pending
from .domain import StudentRecord


def dashboard_stats(students: Iterable[StudentRecord], as_of) -> dict:
    students = list(students)
    active = [s for s in students if s.is_active]
    pending = fees_pending(active, as_of)
    return {
        'total_students': len(active),
        'seats_occupied': len({s.seat_number for s in active}),
        'departed_students': len(students) - len(active),
        'fees_pending': pending,
        'fees_pending_count': len(pending),
        'total_fees_pending': total_pending(active, as_of),
    }


def find_student(students: Iterable[StudentRecord], query: str) -> Optional[StudentRecord]:
    """
    First student matching ``query``.

    Matches a name substring or mobile substring (case-insensitive), or the
    exact student id.
    """
    query = (query or '').strip().lower()
    if not query:
        return None
    for student in students:
        if (
            query in student.name.lower()
            or (student.mobile and query in student.mobile.lower())
            or student.id.lower() == query
        ):
            return student
    return None
