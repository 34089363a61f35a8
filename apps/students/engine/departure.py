"""
Lifecycle engine - departures, credit transfer and reactivation.

A departure may hand the leaver's unused prepaid days to another active
student. Both resulting records come back from one call so the caller can
persist them as a pair; seats are released implicitly because occupancy is
always recomputed from active students.
"""

from dataclasses import dataclass
from typing import Optional

from .dates import add_days, as_day, days_until
from .domain import CreditEntry, StudentRecord, StudentStatus, TransferLog
from ..exceptions import (
    AlreadyDepartedError,
    InvalidTransferTargetError,
    SeatNotAvailableForReactivationError,
    StudentNotDepartedError,
)
from .seat_registry import get_seat


@dataclass(frozen=True)
class DepartureResult:
    departed: StudentRecord
    credited: Optional[StudentRecord] = None


def remaining_days(student: StudentRecord, as_of) -> int:
    """Prepaid days left; 0 when the fee is due today or already overdue."""
    return days_until(student.next_due_date, as_of)


def depart(
    student: StudentRecord,
    target: Optional[StudentRecord],
    reason: Optional[str],
    as_of,
) -> DepartureResult:
    """
    Mark ``student`` as departed, optionally crediting ``target``.

    The transfer log is written whenever a target is chosen, even with zero
    days, so the choice stays on record. The target's due date only moves
    (by plain day count) when there are days to give.

    Raises:
        AlreadyDepartedError: If ``student`` has already departed.
        InvalidTransferTargetError: If ``target`` is the leaver or not active.
    """
    if not student.is_active:
        raise AlreadyDepartedError(f"Student {student.id} has already departed")
    if target is not None:
        if target.id == student.id:
            raise InvalidTransferTargetError("A student cannot transfer credit to themselves")
        if not target.is_active:
            raise InvalidTransferTargetError(f"Student {target.id} is not active")

    as_of = as_day(as_of)
    days = remaining_days(student, as_of)

    transfer_log = None
    if target is not None:
        transfer_log = TransferLog(
            to_student_id=target.id,
            to_name=target.name,
            days_transferred=days,
        )

    departed = student.evolve(
        status=StudentStatus.DEPARTED,
        departure_date=as_of,
        departure_reason=reason or None,
        transfer_log=transfer_log,
    )

    credited = None
    if target is not None and days > 0:
        entry = CreditEntry(
            from_student_id=student.id,
            from_name=student.name,
            days_received=days,
            date=as_of,
        )
        credited = target.evolve(
            next_due_date=add_days(target.next_due_date, days),
            received_credit_log=target.received_credit_log + (entry,),
        )

    return DepartureResult(departed=departed, credited=credited)


def reactivate(student: StudentRecord, new_seat_number: int, seats) -> StudentRecord:
    """
    Bring a departed student back on a fully free seat.

    The ledger is left untouched: a stale due date shows as due straight away.

    Raises:
        StudentNotDepartedError: If the student is still active.
        SeatNotAvailableForReactivationError: If the seat is unknown or
            either of its slots is occupied.
    """
    if student.is_active:
        raise StudentNotDepartedError(f"Student {student.id} is already active")

    seat = get_seat(seats, new_seat_number)
    if seat is None or not seat.is_free:
        raise SeatNotAvailableForReactivationError(
            f"Seat {new_seat_number} is not free for reactivation"
        )

    return student.evolve(
        status=StudentStatus.ACTIVE,
        seat_number=new_seat_number,
        departure_date=None,
        departure_reason=None,
        transfer_log=None,
    )
