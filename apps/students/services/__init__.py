"""
Students app services layer.

Services load an owner's students, run the pure engine in
``apps.students.engine`` with a single "today", and persist the results.
All state-changing operations use transactions and row locks.
"""

from apps.students.exceptions import (
    StudentServiceError,
    AdmissionError,
    NoSeatAvailableError,
    InvalidAdmissionTypeError,
    MissingRequiredFieldError,
    InvalidTransferTargetError,
    AlreadyDepartedError,
    StudentNotDepartedError,
    StudentNotActiveError,
    StudentNotFoundError,
    SeatNotAvailableForReactivationError,
    InvalidPaymentError,
    DataIntegrityConflictError,
)

from .fee_management import (
    get_fee_structure,
    update_fee_structure,
)

from .student_queries import (
    get_student,
    get_students,
    get_active_students,
    to_records,
    build_seat_map,
    get_seat_map,
    get_available_seats,
    filter_by_fee_status,
    get_dashboard,
    search_student,
)

from .student_management import (
    admit_student,
    update_student_details,
    delete_student,
)

from .ledger_management import (
    record_fee_payment,
    mark_fee_due,
)

from .lifecycle_management import (
    departure_preview,
    depart_student,
    reactivate_student,
)


__all__ = [
    # Exceptions
    'StudentServiceError',
    'AdmissionError',
    'NoSeatAvailableError',
    'InvalidAdmissionTypeError',
    'MissingRequiredFieldError',
    'InvalidTransferTargetError',
    'AlreadyDepartedError',
    'StudentNotDepartedError',
    'StudentNotActiveError',
    'StudentNotFoundError',
    'SeatNotAvailableForReactivationError',
    'InvalidPaymentError',
    'DataIntegrityConflictError',

    # Fee structure
    'get_fee_structure',
    'update_fee_structure',

    # Queries
    'get_student',
    'get_students',
    'get_active_students',
    'to_records',
    'build_seat_map',
    'get_seat_map',
    'get_available_seats',
    'filter_by_fee_status',
    'get_dashboard',
    'search_student',

    # Student management
    'admit_student',
    'update_student_details',
    'delete_student',

    # Ledger
    'record_fee_payment',
    'mark_fee_due',

    # Lifecycle
    'departure_preview',
    'depart_student',
    'reactivate_student',
]
