import pytest
from datetime import date
from decimal import Decimal

from apps.students.engine import (
    AdmissionPlan,
    AdmissionRequest,
    AdmissionType,
    DueDateRule,
    GenderCategory,
    Shift,
    StudentStatus,
    admit,
    compute_occupancy,
    gender_category_for_title,
    next_student_id,
)
from apps.students.exceptions import (
    InvalidAdmissionTypeError,
    MissingRequiredFieldError,
    NoSeatAvailableError,
)


def make_request(**overrides):
    data = {
        'title': 'Mr.',
        'name': 'Ravi Kumar',
        'mobile': '9876543210',
        'admission_type': 'Full-time',
        'seat_number': 20,
        'admission_date': date(2024, 3, 10),
        'photo_url': 'photos/ravi.jpg',
    }
    data.update(overrides)
    return AdmissionRequest(**data)


@pytest.fixture
def empty_seats(layout):
    return compute_occupancy([], layout)


class TestAdmit:

    def test_full_time_admission(self, empty_seats, fees):
        record = admit(make_request(), empty_seats, fees)

        assert record.id == 'S001'
        assert record.status is StudentStatus.ACTIVE
        assert record.plan == AdmissionPlan.full_time()
        assert record.seat_number == 20
        assert record.fee_amount == Decimal('1200')
        assert record.next_due_date == date(2024, 4, 10)
        assert record.payment_history == ()
        assert record.received_credit_log == ()

    def test_half_time_admission_copies_half_time_price(self, empty_seats, fees):
        record = admit(
            make_request(title='Ms.', seat_number=4, admission_type='Half-time', shift='evening'),
            empty_seats,
            fees,
        )

        assert record.admission_type is AdmissionType.HALF_TIME
        assert record.shift is Shift.EVENING
        assert record.fee_amount == Decimal('600')

    def test_next_id_follows_highest_existing(self, empty_seats, fees):
        record = admit(make_request(), empty_seats, fees, existing_ids=['S001', 'S012', 'S003'])

        assert record.id == 'S013'

    def test_due_date_clamps_to_month_end(self, empty_seats, fees):
        record = admit(make_request(admission_date=date(2024, 1, 31)), empty_seats, fees)

        assert record.next_due_date == date(2024, 2, 29)

    @pytest.mark.parametrize('rule, expected', [
        (DueDateRule.ONE_MONTH_AFTER_ADMISSION, date(2024, 4, 10)),
        (DueDateRule.ON_ADMISSION, date(2024, 3, 10)),
        (DueDateRule.DAY_BEFORE_ADMISSION, date(2024, 3, 9)),
    ])
    def test_due_date_rules(self, empty_seats, fees, rule, expected):
        record = admit(make_request(), empty_seats, fees, due_date_rule=rule)

        assert record.next_due_date == expected

    def test_half_time_fits_beside_other_shift(self, layout, fees, make_record):
        seats = compute_occupancy(
            [make_record('S001', seat_number=20, plan=AdmissionPlan.half_time('morning'))],
            layout,
        )

        record = admit(
            make_request(admission_type='Half-time', shift='evening'),
            seats,
            fees,
            existing_ids=['S001'],
        )

        assert record.id == 'S002'
        assert record.seat_number == 20


class TestAdmissionErrors:

    def test_missing_fields_are_all_reported(self, empty_seats, fees):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            admit(make_request(name='  ', photo_url=''), empty_seats, fees)

        assert exc_info.value.fields == ('name', 'photo_url')

    def test_missing_seat_number(self, empty_seats, fees):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            admit(make_request(seat_number=None), empty_seats, fees)

        assert exc_info.value.fields == ('seat_number',)

    def test_missing_fields_reported_before_bad_type(self, empty_seats, fees):
        with pytest.raises(MissingRequiredFieldError):
            admit(make_request(mobile='', admission_type='Weekend'), empty_seats, fees)

    def test_unknown_admission_type(self, empty_seats, fees):
        with pytest.raises(InvalidAdmissionTypeError):
            admit(make_request(admission_type='Weekend'), empty_seats, fees)

    def test_half_time_requires_shift(self, empty_seats, fees):
        with pytest.raises(InvalidAdmissionTypeError):
            admit(make_request(admission_type='Half-time'), empty_seats, fees)

    def test_full_time_rejects_shift(self, empty_seats, fees):
        with pytest.raises(InvalidAdmissionTypeError):
            admit(make_request(shift='morning'), empty_seats, fees)

    def test_type_checked_before_seat(self, layout, fees, make_record):
        seats = compute_occupancy([make_record('S001', seat_number=20)], layout)

        with pytest.raises(InvalidAdmissionTypeError):
            admit(make_request(admission_type='Half-time'), seats, fees)

    def test_boy_cannot_take_girl_seat(self, empty_seats, fees):
        with pytest.raises(NoSeatAvailableError):
            admit(make_request(seat_number=5), empty_seats, fees)

    def test_full_time_needs_whole_seat(self, layout, fees, make_record):
        seats = compute_occupancy(
            [make_record('S001', seat_number=20, plan=AdmissionPlan.half_time('morning'))],
            layout,
        )

        with pytest.raises(NoSeatAvailableError):
            admit(make_request(), seats, fees)

    def test_taken_shift_is_rejected(self, layout, fees, make_record):
        seats = compute_occupancy(
            [make_record('S001', seat_number=20, plan=AdmissionPlan.half_time('morning'))],
            layout,
        )

        with pytest.raises(NoSeatAvailableError):
            admit(make_request(admission_type='Half-time', shift='morning'), seats, fees)

    def test_seat_outside_layout(self, empty_seats, fees):
        with pytest.raises(NoSeatAvailableError):
            admit(make_request(seat_number=51), empty_seats, fees)

    def test_unknown_title(self, empty_seats, fees):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            admit(make_request(title='Dr.'), empty_seats, fees)

        assert exc_info.value.fields == ('title',)


class TestHelpers:

    @pytest.mark.parametrize('title, category', [
        ('Mr.', GenderCategory.BOY),
        ('Ms.', GenderCategory.GIRL),
        (' ms ', GenderCategory.GIRL),
        ('Mrs.', GenderCategory.GIRL),
    ])
    def test_gender_category_for_title(self, title, category):
        assert gender_category_for_title(title) is category

    def test_custom_title_rule(self):
        rule = {'dr.': GenderCategory.BOY}

        assert gender_category_for_title('Dr.', rule) is GenderCategory.BOY

    def test_next_student_id(self):
        assert next_student_id([]) == 'S001'
        assert next_student_id(['S009']) == 'S010'
        assert next_student_id(['S099', 'S100']) == 'S101'

    def test_plan_parse_accepts_loose_labels(self):
        assert AdmissionPlan.parse('full_time') == AdmissionPlan.full_time()
        assert AdmissionPlan.parse('half-time', 'Morning') == AdmissionPlan.half_time('morning')

    def test_plan_invariant_is_checked_on_construction(self):
        with pytest.raises(InvalidAdmissionTypeError):
            AdmissionPlan(AdmissionType.HALF_TIME)
        with pytest.raises(InvalidAdmissionTypeError):
            AdmissionPlan(AdmissionType.FULL_TIME, Shift.MORNING)
