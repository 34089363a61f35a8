"""
Seat registry - occupancy derived from the active-student set.

Seat state is never stored as a source of truth. Every call recomputes the
whole pool from the layout and the current active students, so admissions,
departures, reactivations and deletes free or take slots without any direct
seat mutation.
"""

import logging
from dataclasses import replace
from typing import Iterable, List

from .domain import AdmissionPlan, Seat, SeatLayout, Shift, StudentRecord
from ..exceptions import DataIntegrityConflictError


logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = SeatLayout()


class SeatMap(list):
    """Seats ordered by number, plus conflicts that belong to no seat."""

    def __init__(self, seats=(), unplaced=()):
        super().__init__(seats)
        self.unplaced = tuple(unplaced)


def compute_occupancy(
    active_students: Iterable[StudentRecord],
    layout: SeatLayout = DEFAULT_LAYOUT,
) -> SeatMap:
    """
    Recompute every seat from scratch.

    Full-time students take both slots of their seat, half-time students the
    slot of their shift. Departed records in the input are ignored.

    Students are applied in ascending id order so the result does not depend
    on input order. A claim on an occupied slot is a data-integrity error: it
    is logged and attached to the seat's ``conflicts`` while the first
    claimant keeps the slot. A claim on a seat number outside the layout is
    logged and kept in ``unplaced``. Other seats are computed normally.

    Args:
        active_students: Current students of one owning account.
        layout: Seat pool definition.

    Returns:
        Seats ordered by number. Claims on unknown seats are kept in
        ``unplaced``.
    """
    seats = {seat.number: seat for seat in layout.seats()}
    orphans = []

    ordered = sorted(
        (s for s in active_students if s.is_active),
        key=lambda s: (s.number, s.id),
    )
    for student in ordered:
        seat = seats.get(student.seat_number)
        if seat is None:
            conflict = DataIntegrityConflictError(student.seat_number, None, None, student.id)
            logger.warning("Occupancy conflict: %s", conflict)
            orphans.append(conflict)
            continue

        changes = {}
        conflicts = list(seat.conflicts)
        for slot in student.plan.slots:
            holder = seat.occupant(slot)
            if holder is None or holder == student.id:
                changes[slot.value] = student.id
            else:
                conflict = DataIntegrityConflictError(seat.number, slot, holder, student.id)
                logger.warning("Occupancy conflict: %s", conflict)
                conflicts.append(conflict)
        seats[seat.number] = replace(seat, conflicts=tuple(conflicts), **changes)

    return SeatMap((seats[number] for number in sorted(seats)), unplaced=orphans)


def occupancy_conflicts(seats: Iterable[Seat]) -> List[DataIntegrityConflictError]:
    """All conflicts recorded during the last recomputation."""
    found = [conflict for seat in seats for conflict in seat.conflicts]
    return found + list(getattr(seats, 'unplaced', ()))


def assert_consistent(seats: Iterable[Seat]) -> None:
    """Raise the first recorded conflict, for callers that want strictness."""
    conflicts = occupancy_conflicts(seats)
    if conflicts:
        raise conflicts[0]


def find_available_seats(seats, gender_category, plan: AdmissionPlan) -> List[Seat]:
    """
    Seats of ``gender_category`` that can take ``plan``.

    Full-time needs both slots free. Half-time only needs its shift slot
    free, so a seat whose other slot is taken is still offered.
    """
    return [
        seat for seat in seats
        if seat.gender_category is gender_category
        and all(seat.is_slot_free(slot) for slot in plan.slots)
    ]


def get_seat(seats, number):
    for seat in seats:
        if seat.number == number:
            return seat
    return None


def seat_summary(seats) -> dict:
    """Counts for the seat matrix legend."""
    conflicts = len(occupancy_conflicts(seats))
    seats = list(seats)
    free = sum(1 for s in seats if s.is_free)
    full = sum(1 for s in seats if s.is_full)
    return {
        'total': len(seats),
        'free': free,
        'partial': len(seats) - free - full,
        'full': full,
        'morning_free': sum(1 for s in seats if s.is_slot_free(Shift.MORNING)),
        'evening_free': sum(1 for s in seats if s.is_slot_free(Shift.EVENING)),
        'conflicts': conflicts,
    }
