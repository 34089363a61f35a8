"""Day-granular date helpers shared by the ledger and the departure engine."""

from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta


def as_day(value):
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def add_months(day, months):
    """
    Calendar-month addition.

    The day of month is clamped to the target month's length, so
    2024-01-31 + 1 month is 2024-02-29 and 2023-01-31 + 1 month is 2023-02-28.
    """
    return as_day(day) + relativedelta(months=months)


def add_days(day, days):
    return as_day(day) + timedelta(days=days)


def days_until(later, earlier):
    """Whole days from ``earlier`` to ``later``; 0 if ``later`` is not after it."""
    delta = (as_day(later) - as_day(earlier)).days
    return max(0, delta)


def yesterday(today):
    return add_days(today, -1)
