"""
Billing ledger - fee due dates and payment history.

A student's fee is paid up to ``next_due_date``. Each recorded month appends
one payment entry and moves the due date one calendar month forward. The
ledger trusts the caller's per-month amount so payments at historic rates
remain representable.
"""

from decimal import Decimal
from typing import Iterable, List

from .dates import add_months, as_day, yesterday
from .domain import Payment, StudentRecord
from ..exceptions import InvalidPaymentError, StudentNotActiveError


PAYMENT_METHODS = ('UPI', 'Cash')


def payment_total(amount, months: int) -> Decimal:
    """Total charged for ``months`` payments of ``amount``."""
    return Decimal(str(amount)) * months


def record_payment(
    student: StudentRecord,
    *,
    amount,
    method: str,
    paid_on,
    months: int = 1,
) -> StudentRecord:
    """
    Record ``months`` monthly payments made on ``paid_on``.

    Raises:
        InvalidPaymentError: If months < 1 or amount <= 0.
        StudentNotActiveError: If the student has departed.
    """
    if not isinstance(months, int) or isinstance(months, bool) or months < 1:
        raise InvalidPaymentError("Months must be a whole number of at least 1")
    amount = Decimal(str(amount))
    if amount <= 0:
        raise InvalidPaymentError("Payment amount must be positive")
    if not student.is_active:
        raise StudentNotActiveError(f"Student {student.id} has departed")

    paid_on = as_day(paid_on)
    history = list(student.payment_history)
    due = student.next_due_date
    for _ in range(months):
        history.append(Payment(date=paid_on, amount=amount, method=method))
        due = add_months(due, 1)

    return student.evolve(payment_history=tuple(history), next_due_date=due)


def is_past_due(next_due_date, as_of) -> bool:
    """True once ``next_due_date`` has passed; a fee due today is not yet due."""
    return as_day(next_due_date) < as_day(as_of)


def is_due(student: StudentRecord, as_of) -> bool:
    return is_past_due(student.next_due_date, as_of)


def mark_as_due(student: StudentRecord, today) -> StudentRecord:
    """Administrative override: due date becomes yesterday. Nothing else changes."""
    return student.evolve(next_due_date=yesterday(today))


def fees_pending(students: Iterable[StudentRecord], as_of) -> List[StudentRecord]:
    """Active students whose fee is due as of ``as_of``."""
    return [s for s in students if s.is_active and is_due(s, as_of)]


def total_pending(students: Iterable[StudentRecord], as_of) -> Decimal:
    return sum((s.fee_amount for s in fees_pending(students, as_of)), Decimal('0'))
