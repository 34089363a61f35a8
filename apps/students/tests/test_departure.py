import pytest
from datetime import date

from apps.students.engine import (
    AdmissionPlan,
    StudentStatus,
    compute_occupancy,
    depart,
    reactivate,
    remaining_days,
)
from apps.students.engine.domain import CreditEntry, TransferLog
from apps.students.engine.seat_registry import get_seat
from apps.students.exceptions import (
    AlreadyDepartedError,
    InvalidTransferTargetError,
    SeatNotAvailableForReactivationError,
    StudentNotDepartedError,
)


TODAY = date(2024, 3, 15)


class TestRemainingDays:

    def test_days_until_due(self, make_record):
        assert remaining_days(make_record(next_due_date=date(2024, 3, 25)), TODAY) == 10

    def test_due_today(self, make_record):
        assert remaining_days(make_record(next_due_date=TODAY), TODAY) == 0

    def test_overdue_is_zero(self, make_record):
        assert remaining_days(make_record(next_due_date=date(2024, 2, 1)), TODAY) == 0


class TestDepart:

    def test_departure_with_credit_transfer(self, make_record):
        leaver = make_record('S001', name='Anita', next_due_date=date(2024, 3, 25))
        target = make_record('S002', name='Rahul', seat_number=21, next_due_date=date(2024, 4, 1))

        result = depart(leaver, target, 'Moved away', TODAY)

        assert result.departed.status is StudentStatus.DEPARTED
        assert result.departed.departure_date == TODAY
        assert result.departed.departure_reason == 'Moved away'
        assert result.departed.transfer_log == TransferLog('S002', 'Rahul', 10)

        assert result.credited.next_due_date == date(2024, 4, 11)
        assert result.credited.received_credit_log == (
            CreditEntry('S001', 'Anita', 10, TODAY),
        )

    def test_inputs_are_not_modified(self, make_record):
        leaver = make_record('S001', next_due_date=date(2024, 3, 25))
        target = make_record('S002', seat_number=21)

        depart(leaver, target, None, TODAY)

        assert leaver.is_active
        assert target.received_credit_log == ()

    def test_zero_days_still_logs_the_transfer(self, make_record):
        leaver = make_record('S001', next_due_date=date(2024, 3, 1))
        target = make_record('S002', name='Rahul', seat_number=21)

        result = depart(leaver, target, None, TODAY)

        assert result.departed.transfer_log == TransferLog('S002', 'Rahul', 0)
        assert result.credited is None

    def test_departure_without_target(self, make_record):
        result = depart(make_record(next_due_date=date(2024, 3, 25)), None, '', TODAY)

        assert result.departed.transfer_log is None
        assert result.departed.departure_reason is None
        assert result.credited is None

    def test_departure_frees_the_seat(self, layout, make_record):
        result = depart(make_record('S001', seat_number=20), None, None, TODAY)

        seats = compute_occupancy([result.departed], layout)

        assert get_seat(seats, 20).is_free

    def test_already_departed(self, make_record):
        with pytest.raises(AlreadyDepartedError):
            depart(make_record(status=StudentStatus.DEPARTED), None, None, TODAY)

    def test_cannot_transfer_to_self(self, make_record):
        student = make_record('S001')

        with pytest.raises(InvalidTransferTargetError):
            depart(student, student, None, TODAY)

    def test_cannot_transfer_to_departed_student(self, make_record):
        target = make_record('S002', seat_number=21, status=StudentStatus.DEPARTED)

        with pytest.raises(InvalidTransferTargetError):
            depart(make_record('S001'), target, None, TODAY)


class TestReactivate:

    def departed(self, make_record):
        return make_record(
            'S001',
            seat_number=20,
            status=StudentStatus.DEPARTED,
            departure_date=date(2024, 2, 1),
            departure_reason='Exams over',
            transfer_log=TransferLog('S002', 'Rahul', 4),
        )

    def test_reactivate_on_free_seat(self, layout, make_record):
        student = self.departed(make_record)
        seats = compute_occupancy([], layout)

        back = reactivate(student, 25, seats)

        assert back.status is StudentStatus.ACTIVE
        assert back.seat_number == 25
        assert back.departure_date is None
        assert back.departure_reason is None
        assert back.transfer_log is None
        assert back.next_due_date == student.next_due_date
        assert back.payment_history == student.payment_history

    def test_partially_occupied_seat_is_rejected(self, layout, make_record):
        seats = compute_occupancy(
            [make_record('S005', seat_number=25, plan=AdmissionPlan.half_time('evening'))],
            layout,
        )

        with pytest.raises(SeatNotAvailableForReactivationError):
            reactivate(self.departed(make_record), 25, seats)

    def test_unknown_seat_is_rejected(self, layout, make_record):
        with pytest.raises(SeatNotAvailableForReactivationError):
            reactivate(self.departed(make_record), 99, compute_occupancy([], layout))

    def test_active_student_cannot_be_reactivated(self, layout, make_record):
        with pytest.raises(StudentNotDepartedError):
            reactivate(make_record(), 25, compute_occupancy([], layout))
