"""
Admission allocator.

Validates a new admission against current seat occupancy and builds the
new active student record. Persisting the record, uploading the photo and
choosing the title-to-category rule are the caller's concerns.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Mapping, Optional

from .dates import add_months, add_days, as_day
from .domain import (
    AdmissionPlan,
    FeeStructure,
    GenderCategory,
    StudentRecord,
    StudentStatus,
    format_student_id,
    parse_student_number,
)
from ..exceptions import MissingRequiredFieldError, NoSeatAvailableError
from .seat_registry import find_available_seats


DEFAULT_TITLE_CATEGORIES = {
    'mr.': GenderCategory.BOY,
    'mr': GenderCategory.BOY,
    'ms.': GenderCategory.GIRL,
    'ms': GenderCategory.GIRL,
    'miss': GenderCategory.GIRL,
    'mrs.': GenderCategory.GIRL,
    'mrs': GenderCategory.GIRL,
}


class DueDateRule(Enum):
    """How the first due date is seeded at admission."""

    ONE_MONTH_AFTER_ADMISSION = 'one_month_after_admission'
    ON_ADMISSION = 'on_admission'
    DAY_BEFORE_ADMISSION = 'day_before_admission'

    def first_due_date(self, admission_date):
        if self is DueDateRule.ON_ADMISSION:
            return as_day(admission_date)
        if self is DueDateRule.DAY_BEFORE_ADMISSION:
            return add_days(admission_date, -1)
        return add_months(admission_date, 1)


@dataclass(frozen=True)
class AdmissionRequest:
    title: str
    name: str
    mobile: str
    admission_type: str
    seat_number: Optional[int]
    admission_date: Optional[date]
    photo_url: str
    shift: Optional[str] = None
    father_name: str = ''


REQUIRED_FIELDS = ('name', 'mobile', 'admission_date', 'photo_url', 'seat_number')


def gender_category_for_title(title, title_categories: Mapping = None) -> GenderCategory:
    """Map a title such as 'Mr.' or 'Ms.' to the seat category it may use."""
    categories = DEFAULT_TITLE_CATEGORIES if title_categories is None else title_categories
    key = str(title or '').strip().lower()
    try:
        return categories[key]
    except KeyError:
        raise MissingRequiredFieldError(['title'])


def next_student_id(existing_ids: Iterable[str]) -> str:
    """Highest existing numeric id plus one, e.g. S013 after S012."""
    highest = max((parse_student_number(i) for i in existing_ids), default=0)
    return format_student_id(highest + 1)


def _missing_fields(request):
    missing = []
    for name in REQUIRED_FIELDS:
        value = getattr(request, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def admit(
    request: AdmissionRequest,
    seats,
    fee_structure: FeeStructure,
    *,
    existing_ids: Iterable[str] = (),
    due_date_rule: DueDateRule = DueDateRule.ONE_MONTH_AFTER_ADMISSION,
    title_categories: Mapping = None,
) -> StudentRecord:
    """
    Validate an admission and build the new active student.

    Args:
        request: Admission form data.
        seats: Current occupancy from ``compute_occupancy``.
        fee_structure: Current prices; the price is copied onto the student
            and never re-read.
        existing_ids: Student ids already used by the owning account.
        due_date_rule: First due date seeding rule.
        title_categories: Optional override of the title-to-category rule.

    Returns:
        The new StudentRecord (status ACTIVE, empty ledgers).

    Raises:
        MissingRequiredFieldError: Required field empty or unknown title.
        InvalidAdmissionTypeError: Unknown type, inconsistent shift or no price.
        NoSeatAvailableError: Seat not free for this category and plan.
    """
    missing = _missing_fields(request)
    if missing:
        raise MissingRequiredFieldError(missing)

    category = gender_category_for_title(request.title, title_categories)
    plan = AdmissionPlan.parse(request.admission_type, request.shift)
    fee_amount = fee_structure.amount_for(plan.admission_type)

    available = {seat.number for seat in find_available_seats(seats, category, plan)}
    if request.seat_number not in available:
        raise NoSeatAvailableError(
            f"Seat {request.seat_number} is not available for a "
            f"{category.value} {plan} admission"
        )

    admission_date = as_day(request.admission_date)
    return StudentRecord(
        id=next_student_id(existing_ids),
        name=request.name.strip(),
        father_name=(request.father_name or '').strip(),
        mobile=request.mobile.strip(),
        title=request.title,
        plan=plan,
        seat_number=request.seat_number,
        admission_date=admission_date,
        fee_amount=fee_amount,
        next_due_date=due_date_rule.first_due_date(admission_date),
        photo_url=request.photo_url,
        status=StudentStatus.ACTIVE,
    )
