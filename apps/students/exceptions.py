"""
Domain exceptions for the students app.

These exceptions represent rejected input or invalid state transitions in
the seat/billing engine. They carry no HTTP concerns; views catch them and
convert them to responses.

Exception Hierarchy:
    StudentServiceError (base)
    ├── AdmissionError
    │   ├── NoSeatAvailableError
    │   ├── InvalidAdmissionTypeError
    │   └── MissingRequiredFieldError
    ├── InvalidTransferTargetError
    ├── AlreadyDepartedError
    ├── StudentNotDepartedError
    ├── StudentNotActiveError
    ├── StudentNotFoundError
    ├── SeatNotAvailableForReactivationError
    ├── InvalidPaymentError
    └── DataIntegrityConflictError
"""


class StudentServiceError(Exception):
    """Base exception for all student service errors."""

    code = 'student_service_error'


class AdmissionError(StudentServiceError):
    """Base exception for rejected admissions."""

    code = 'admission_error'


class NoSeatAvailableError(AdmissionError):
    """Raised when the requested seat is not free for the requested plan."""

    code = 'no_seat_available'


class InvalidAdmissionTypeError(AdmissionError):
    """Raised for an unknown admission type or an inconsistent shift."""

    code = 'invalid_admission_type'


class MissingRequiredFieldError(AdmissionError):
    """Raised when required admission fields are empty."""

    code = 'missing_required_field'

    def __init__(self, fields):
        self.fields = tuple(fields)
        super().__init__(f"Missing required field(s): {', '.join(self.fields)}")


class InvalidTransferTargetError(StudentServiceError):
    """Raised when a credit transfer target is not another active student."""

    code = 'invalid_transfer_target'


class AlreadyDepartedError(StudentServiceError):
    """Raised when departing a student who has already departed."""

    code = 'already_departed'


class StudentNotDepartedError(StudentServiceError):
    """Raised when reactivating a student who is still active."""

    code = 'student_not_departed'


class StudentNotActiveError(StudentServiceError):
    """Raised when a ledger operation targets a departed student."""

    code = 'student_not_active'


class StudentNotFoundError(StudentServiceError):
    """Raised when a student does not exist for the owning account."""

    code = 'student_not_found'


class SeatNotAvailableForReactivationError(StudentServiceError):
    """Raised when the reactivation seat has either slot occupied."""

    code = 'seat_not_available_for_reactivation'


class InvalidPaymentError(StudentServiceError):
    """Raised for a non-positive amount or month count."""

    code = 'invalid_payment'


class DataIntegrityConflictError(StudentServiceError):
    """
    Raised (or recorded) when stored data maps two students to one slot, or
    when a stored student row cannot be read as a valid record.

    The seat registry records these on the affected seat instead of raising,
    so one bad record never hides the occupancy of the other seats.
    """

    code = 'data_integrity_conflict'

    def __init__(self, seat_number, slot, holder_id, claimant_id, reason=None):
        self.seat_number = seat_number
        self.slot = slot
        self.holder_id = holder_id
        self.claimant_id = claimant_id
        self.reason = reason
        if reason is not None:
            message = f"Student {claimant_id} on seat {seat_number} has unreadable data: {reason}"
        elif slot is None:
            message = f"Student {claimant_id} is recorded on unknown seat {seat_number}"
        else:
            message = (
                f"Seat {seat_number} {slot.value} slot claimed by both "
                f"{holder_id} and {claimant_id}"
            )
        super().__init__(message)

    def __eq__(self, other):
        if not isinstance(other, DataIntegrityConflictError):
            return NotImplemented
        return (
            (self.seat_number, self.slot, self.holder_id, self.claimant_id, self.reason)
            == (other.seat_number, other.slot, other.holder_id, other.claimant_id, other.reason)
        )

    def __hash__(self):
        return hash((self.seat_number, self.slot, self.holder_id, self.claimant_id, self.reason))
