"""Library-wide settings read from Django settings."""

from decimal import Decimal

from django.conf import settings

from apps.students.engine import DueDateRule, SeatLayout


def get_seat_layout() -> SeatLayout:
    return SeatLayout(
        total_seats=getattr(settings, 'LIBRARY_SEAT_COUNT', 50),
        girl_seats=getattr(settings, 'LIBRARY_GIRL_SEATS', 15),
    )


def get_due_date_rule() -> DueDateRule:
    return DueDateRule(
        getattr(settings, 'LIBRARY_DUE_DATE_RULE', DueDateRule.ONE_MONTH_AFTER_ADMISSION.value)
    )


def get_default_fees() -> dict:
    return {
        'full_time_fee': Decimal(str(getattr(settings, 'LIBRARY_DEFAULT_FULL_TIME_FEE', '1200'))),
        'half_time_fee': Decimal(str(getattr(settings, 'LIBRARY_DEFAULT_HALF_TIME_FEE', '600'))),
    }
