"""
Seat and billing engine.

Pure functions over immutable student records: seat occupancy, admission,
fee ledger, departure with credit transfer, and reactivation. Nothing in
this package touches the database or the system clock; "today" is always
passed in by the caller.
"""

from .domain import (
    AdmissionPlan,
    AdmissionType,
    CreditEntry,
    FeeStructure,
    GenderCategory,
    Payment,
    Seat,
    SeatLayout,
    Shift,
    StudentRecord,
    StudentStatus,
    TransferLog,
    format_student_id,
    parse_student_number,
)
from .seat_registry import (
    SeatMap,
    assert_consistent,
    compute_occupancy,
    find_available_seats,
    occupancy_conflicts,
    seat_summary,
)
from .admission import (
    AdmissionRequest,
    DueDateRule,
    admit,
    gender_category_for_title,
    next_student_id,
)
from .billing_ledger import (
    fees_pending,
    is_due,
    is_past_due,
    mark_as_due,
    payment_total,
    record_payment,
    total_pending,
)
from .departure import (
    DepartureResult,
    depart,
    reactivate,
    remaining_days,
)
from .dashboard import dashboard_stats, find_student


__all__ = [
    # Types
    'AdmissionPlan',
    'AdmissionType',
    'CreditEntry',
    'FeeStructure',
    'GenderCategory',
    'Payment',
    'Seat',
    'SeatLayout',
    'Shift',
    'StudentRecord',
    'StudentStatus',
    'TransferLog',
    'format_student_id',
    'parse_student_number',

    # Seat registry
    'SeatMap',
    'assert_consistent',
    'compute_occupancy',
    'find_available_seats',
    'occupancy_conflicts',
    'seat_summary',

    # Admission
    'AdmissionRequest',
    'DueDateRule',
    'admit',
    'gender_category_for_title',
    'next_student_id',

    # Billing ledger
    'fees_pending',
    'is_due',
    'is_past_due',
    'mark_as_due',
    'payment_total',
    'record_payment',
    'total_pending',

    # Departure
    'DepartureResult',
    'depart',
    'reactivate',
    'remaining_days',

    # Dashboard
    'dashboard_stats',
    'find_student',
]
