import pytest
from datetime import date
from decimal import Decimal

from apps.students.engine import (
    StudentStatus,
    dashboard_stats,
    fees_pending,
    find_student,
    is_due,
    is_past_due,
    mark_as_due,
    payment_total,
    record_payment,
    total_pending,
    AdmissionPlan,
)
from apps.students.engine.dates import add_months
from apps.students.engine.domain import Payment
from apps.students.exceptions import InvalidPaymentError, StudentNotActiveError


TODAY = date(2024, 3, 15)


class TestRecordPayment:

    def test_single_month(self, make_record):
        student = make_record(next_due_date=date(2024, 4, 1))

        paid = record_payment(student, amount=1200, method='UPI', paid_on=TODAY)

        assert paid.next_due_date == date(2024, 5, 1)
        assert paid.payment_history == (
            Payment(date=TODAY, amount=Decimal('1200'), method='UPI'),
        )
        # the input record is left as it was
        assert student.next_due_date == date(2024, 4, 1)
        assert student.payment_history == ()

    def test_three_months_at_once(self, make_record):
        student = make_record(next_due_date=date(2024, 1, 15))

        paid = record_payment(student, amount=600, method='Cash', paid_on=TODAY, months=3)

        assert paid.next_due_date == date(2024, 4, 15)
        assert len(paid.payment_history) == 3
        assert all(p.amount == Decimal('600') and p.method == 'Cash' for p in paid.payment_history)

    def test_appends_to_existing_history(self, make_record):
        earlier = Payment(date=date(2024, 2, 1), amount=Decimal('1000'), method='Cash')
        student = make_record(payment_history=(earlier,))

        paid = record_payment(student, amount=1200, method='UPI', paid_on=TODAY)

        assert paid.payment_history[0] == earlier
        assert len(paid.payment_history) == 2

    def test_leap_year_month_end(self, make_record):
        paid = record_payment(
            make_record(next_due_date=date(2024, 1, 31)), amount=1200, method='UPI', paid_on=TODAY
        )

        assert paid.next_due_date == date(2024, 2, 29)

    def test_non_leap_year_month_end(self, make_record):
        paid = record_payment(
            make_record(next_due_date=date(2023, 1, 31)), amount=1200, method='UPI', paid_on=TODAY
        )

        assert paid.next_due_date == date(2023, 2, 28)

    def test_months_are_added_one_at_a_time(self, make_record):
        paid = record_payment(
            make_record(next_due_date=date(2024, 1, 31)),
            amount=1200, method='UPI', paid_on=TODAY, months=2,
        )

        assert paid.next_due_date == date(2024, 3, 29)

    def test_overdue_student_keeps_anchor_date(self, make_record):
        paid = record_payment(
            make_record(next_due_date=date(2024, 1, 10)), amount=1200, method='UPI', paid_on=TODAY
        )

        assert paid.next_due_date == date(2024, 2, 10)

    @pytest.mark.parametrize('months', [0, -1])
    def test_rejects_bad_month_count(self, make_record, months):
        with pytest.raises(InvalidPaymentError):
            record_payment(make_record(), amount=1200, method='UPI', paid_on=TODAY, months=months)

    @pytest.mark.parametrize('amount', [0, -100])
    def test_rejects_non_positive_amount(self, make_record, amount):
        with pytest.raises(InvalidPaymentError):
            record_payment(make_record(), amount=amount, method='UPI', paid_on=TODAY)

    def test_rejects_departed_student(self, make_record):
        with pytest.raises(StudentNotActiveError):
            record_payment(
                make_record(status=StudentStatus.DEPARTED),
                amount=1200, method='UPI', paid_on=TODAY,
            )

    def test_payment_total(self):
        assert payment_total(600, 3) == Decimal('1800')


class TestDueStatus:

    def test_due_today_is_not_yet_due(self, make_record):
        assert not is_due(make_record(next_due_date=TODAY), TODAY)

    def test_due_yesterday_is_due(self, make_record):
        assert is_due(make_record(next_due_date=date(2024, 3, 14)), TODAY)

    def test_future_due_date(self, make_record):
        assert not is_due(make_record(next_due_date=date(2024, 4, 1)), TODAY)

    def test_past_due_on_plain_dates(self):
        assert is_past_due(date(2024, 3, 14), TODAY)
        assert not is_past_due(TODAY, TODAY)

    def test_mark_as_due(self, make_record):
        student = make_record(next_due_date=date(2024, 4, 1))

        marked = mark_as_due(student, TODAY)

        assert marked.next_due_date == date(2024, 3, 14)
        assert is_due(marked, TODAY)
        assert marked.evolve(next_due_date=student.next_due_date) == student

    def test_fees_pending_skips_departed(self, make_record):
        students = [
            make_record('S001', next_due_date=date(2024, 3, 1)),
            make_record('S002', next_due_date=date(2024, 3, 1), status=StudentStatus.DEPARTED),
            make_record('S003', next_due_date=date(2024, 4, 1)),
        ]

        assert [s.id for s in fees_pending(students, TODAY)] == ['S001']
        assert total_pending(students, TODAY) == Decimal('1200')

    def test_total_pending_when_nobody_owes(self, make_record):
        assert total_pending([make_record()], TODAY) == Decimal('0')

    def test_add_months_clamps(self):
        assert add_months(date(2024, 3, 31), 1) == date(2024, 4, 30)


class TestDashboard:

    def test_stats(self, make_record):
        students = [
            make_record('S001', seat_number=3, plan=AdmissionPlan.half_time('morning'),
                        next_due_date=date(2024, 3, 1)),
            make_record('S002', seat_number=3, plan=AdmissionPlan.half_time('evening')),
            make_record('S003', seat_number=20, next_due_date=date(2024, 3, 10)),
            make_record('S004', seat_number=21, status=StudentStatus.DEPARTED,
                        next_due_date=date(2024, 1, 1)),
        ]

        stats = dashboard_stats(students, TODAY)

        assert stats['total_students'] == 3
        assert stats['seats_occupied'] == 2
        assert stats['departed_students'] == 1
        assert [s.id for s in stats['fees_pending']] == ['S001', 'S003']
        assert stats['fees_pending_count'] == 2
        assert stats['total_fees_pending'] == Decimal('2400')

    def test_find_by_name_mobile_or_id(self, make_record):
        students = [
            make_record('S001', name='Anita Sharma'),
            make_record('S002', name='Rahul Verma', mobile='9123456789'),
        ]

        assert find_student(students, 'anita').id == 'S001'
        assert find_student(students, '91234').id == 'S002'
        assert find_student(students, 's002').id == 'S002'
        assert find_student(students, 'nobody') is None
        assert find_student(students, '   ') is None
