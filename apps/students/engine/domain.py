"""
Core value types for the seat and billing engine.

Everything here is plain Python (no Django), so the engine can be exercised
directly in unit tests with fixed dates. Records are frozen; operations
return updated copies built with ``dataclasses.replace``.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional

from ..exceptions import InvalidAdmissionTypeError


STUDENT_ID_PREFIX = 'S'
_STUDENT_ID_RE = re.compile(r'^[A-Za-z]*(\d+)$')


class GenderCategory(Enum):
    GIRL = 'girl'
    BOY = 'boy'


class AdmissionType(Enum):
    FULL_TIME = 'Full-time'
    HALF_TIME = 'Half-time'

    @classmethod
    def from_label(cls, label):
        """Accept 'Full-time', 'full_time', 'FULL_TIME' and similar spellings."""
        if isinstance(label, cls):
            return label
        normalized = str(label or '').strip().lower().replace('_', '-').replace(' ', '-')
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise InvalidAdmissionTypeError(f"Unknown admission type: {label!r}")


class Shift(Enum):
    """A half-day shift; also names the two occupancy slots of a seat."""

    MORNING = 'morning'
    EVENING = 'evening'

    @classmethod
    def from_label(cls, label):
        if isinstance(label, cls):
            return label
        normalized = str(label or '').strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise InvalidAdmissionTypeError(f"Unknown shift: {label!r}")


class StudentStatus(Enum):
    ACTIVE = 'active'
    DEPARTED = 'departed'


@dataclass(frozen=True)
class AdmissionPlan:
    """
    Closed variant of the billing plan.

    A plan is either full-time (no shift, occupies both slots) or half-time
    with exactly one shift. Use the ``full_time`` / ``half_time``
    constructors; the invariant is checked on every construction.
    """

    admission_type: AdmissionType
    shift: Optional[Shift] = None

    def __post_init__(self):
        if self.admission_type is AdmissionType.FULL_TIME and self.shift is not None:
            raise InvalidAdmissionTypeError("Full-time admission cannot have a shift")
        if self.admission_type is AdmissionType.HALF_TIME and self.shift is None:
            raise InvalidAdmissionTypeError("Half-time admission requires a shift")

    @classmethod
    def full_time(cls):
        return cls(AdmissionType.FULL_TIME)

    @classmethod
    def half_time(cls, shift):
        return cls(AdmissionType.HALF_TIME, Shift.from_label(shift))

    @classmethod
    def parse(cls, admission_type, shift=None):
        """Build a plan from user-supplied labels."""
        kind = AdmissionType.from_label(admission_type)
        if kind is AdmissionType.FULL_TIME:
            if shift:
                raise InvalidAdmissionTypeError("Full-time admission cannot have a shift")
            return cls.full_time()
        if not shift:
            raise InvalidAdmissionTypeError("Half-time admission requires a shift")
        return cls.half_time(shift)

    @property
    def is_full_time(self):
        return self.admission_type is AdmissionType.FULL_TIME

    @property
    def slots(self):
        """Seat slots this plan occupies."""
        if self.is_full_time:
            return (Shift.MORNING, Shift.EVENING)
        return (self.shift,)

    def __str__(self):
        if self.is_full_time:
            return self.admission_type.value
        return f"{self.admission_type.value} ({self.shift.value})"


@dataclass(frozen=True)
class Payment:
    date: date
    amount: Decimal
    method: str

    def to_dict(self):
        return {'date': self.date.isoformat(), 'amount': str(self.amount), 'method': self.method}

    @classmethod
    def from_dict(cls, data):
        return cls(
            date=date.fromisoformat(data['date']),
            amount=Decimal(str(data['amount'])),
            method=data.get('method', ''),
        )


@dataclass(frozen=True)
class CreditEntry:
    from_student_id: str
    from_name: str
    days_received: int
    date: date

    def to_dict(self):
        return {
            'from_student_id': self.from_student_id,
            'from_name': self.from_name,
            'days_received': self.days_received,
            'date': self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            from_student_id=data['from_student_id'],
            from_name=data.get('from_name', ''),
            days_received=int(data['days_received']),
            date=date.fromisoformat(data['date']),
        )


@dataclass(frozen=True)
class TransferLog:
    to_student_id: str
    to_name: str
    days_transferred: int

    def to_dict(self):
        return {
            'to_student_id': self.to_student_id,
            'to_name': self.to_name,
            'days_transferred': self.days_transferred,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            to_student_id=data['to_student_id'],
            to_name=data.get('to_name', ''),
            days_transferred=int(data['days_transferred']),
        )


@dataclass(frozen=True)
class StudentRecord:
    """Engine-side view of one student of an owning account."""

    id: str
    name: str
    mobile: str
    title: str
    plan: AdmissionPlan
    seat_number: int
    admission_date: date
    fee_amount: Decimal
    next_due_date: date
    father_name: str = ''
    photo_url: str = ''
    payment_history: tuple = ()
    received_credit_log: tuple = ()
    status: StudentStatus = StudentStatus.ACTIVE
    departure_date: Optional[date] = None
    departure_reason: Optional[str] = None
    transfer_log: Optional[TransferLog] = None

    @property
    def admission_type(self):
        return self.plan.admission_type

    @property
    def shift(self):
        return self.plan.shift

    @property
    def is_active(self):
        return self.status is StudentStatus.ACTIVE

    @property
    def number(self):
        return parse_student_number(self.id)

    def evolve(self, **changes):
        return replace(self, **changes)


@dataclass(frozen=True)
class Seat:
    number: int
    gender_category: GenderCategory
    morning: Optional[str] = None
    evening: Optional[str] = None
    conflicts: tuple = ()

    def occupant(self, slot):
        return self.morning if slot is Shift.MORNING else self.evening

    def is_slot_free(self, slot):
        return self.occupant(slot) is None

    @property
    def is_free(self):
        return self.morning is None and self.evening is None

    @property
    def is_full(self):
        return self.morning is not None and self.evening is not None

    @property
    def occupant_ids(self):
        return tuple(sorted({sid for sid in (self.morning, self.evening) if sid}))


@dataclass(frozen=True)
class SeatLayout:
    """Fixed seat pool: seats 1..girl_seats are for girls, the rest for boys."""

    total_seats: int = 50
    girl_seats: int = 15

    def __post_init__(self):
        if self.total_seats < 1:
            raise ValueError("A library needs at least one seat")
        if not 0 <= self.girl_seats <= self.total_seats:
            raise ValueError("girl_seats must be between 0 and total_seats")

    def category_for(self, number):
        return GenderCategory.GIRL if number <= self.girl_seats else GenderCategory.BOY

    def seats(self):
        return [Seat(number=n, gender_category=self.category_for(n))
                for n in range(1, self.total_seats + 1)]


@dataclass(frozen=True)
class FeeStructure:
    """Current monthly price per admission type."""

    prices: Mapping = field(default_factory=dict)

    @classmethod
    def from_labels(cls, mapping):
        return cls({AdmissionType.from_label(k): Decimal(str(v)) for k, v in mapping.items()})

    def amount_for(self, admission_type):
        kind = AdmissionType.from_label(admission_type)
        try:
            return self.prices[kind]
        except KeyError:
            raise InvalidAdmissionTypeError(f"No fee configured for {kind.value}")


def format_student_id(number):
    return f"{STUDENT_ID_PREFIX}{number:03d}"


def parse_student_number(student_id):
    """Numeric part of an id such as 'S007'; 0 when it has none."""
    match = _STUDENT_ID_RE.match(str(student_id or ''))
    return int(match.group(1)) if match else 0
