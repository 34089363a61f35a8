import pytest
from datetime import date
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.students.engine import (
    AdmissionPlan,
    FeeStructure as FeeSchedule,
    SeatLayout,
    StudentRecord,
    StudentStatus,
)
from apps.students.engine.dates import add_months
from apps.students.models import Student


TODAY = date(2024, 3, 15)


# =============================================================================
# Engine fixtures (no database)
# =============================================================================

@pytest.fixture
def layout():
    """The standard 50-seat pool with 15 girl seats."""
    return SeatLayout(total_seats=50, girl_seats=15)


@pytest.fixture
def fees():
    return FeeSchedule.from_labels({'Full-time': 1200, 'Half-time': 600})


@pytest.fixture
def make_record():
    """Factory for engine student records."""
    def _make(
        id='S001',
        seat_number=20,
        plan=None,
        next_due_date=date(2024, 4, 1),
        status=StudentStatus.ACTIVE,
        name=None,
        mobile='9876500000',
        **extra
    ):
        return StudentRecord(
            id=id,
            name=name or f"Student {id}",
            mobile=mobile,
            title='Mr.' if seat_number > 15 else 'Ms.',
            plan=plan or AdmissionPlan.full_time(),
            seat_number=seat_number,
            admission_date=date(2024, 1, 1),
            fee_amount=Decimal('1200'),
            next_due_date=next_due_date,
            status=status,
            **extra
        )
    return _make


# =============================================================================
# Database fixtures
# =============================================================================

@pytest.fixture
def today(monkeypatch):
    """Pin timezone.localdate() so due-date arithmetic is deterministic."""
    monkeypatch.setattr(timezone, 'localdate', lambda *args, **kwargs: TODAY)
    return TODAY


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def owner(db):
    """Create and return a library owner."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Library Owner',
        library_name='Quiet Corner Library',
    )


@pytest.fixture
def other_owner(db):
    """Create and return a second, unrelated library owner."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Owner',
    )


@pytest.fixture
def authenticated_client(api_client, owner):
    """Return an API client authenticated as ``owner`` using JWT."""
    refresh = RefreshToken.for_user(owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def make_student(db):
    """Factory for stored students, bypassing the admission rules."""
    def _make(
        owner,
        student_id='S001',
        seat_number=20,
        admission_type='Full-time',
        shift=None,
        admission_date=date(2024, 3, 1),
        next_due_date=None,
        status='active',
        **extra
    ):
        defaults = {
            'title': 'Mr.' if seat_number > 15 else 'Ms.',
            'name': f"Student {student_id}",
            'mobile': '98765' + student_id[-3:].rjust(5, '0'),
            'photo_url': f"photos/{student_id}.jpg",
            'fee_amount': Decimal('1200.00') if admission_type == 'Full-time' else Decimal('600.00'),
        }
        defaults.update(extra)
        return Student.objects.create(
            owner=owner,
            student_id=student_id,
            seat_number=seat_number,
            admission_type=admission_type,
            shift=shift,
            admission_date=admission_date,
            next_due_date=next_due_date or add_months(admission_date, 1),
            status=status,
            **defaults
        )
    return _make


@pytest.fixture
def admission_data():
    """Valid admission form for a boy's full-time seat."""
    return {
        'title': 'Mr.',
        'name': 'Ravi Kumar',
        'father_name': 'Suresh Kumar',
        'mobile': '9876543210',
        'photo_url': 'photos/ravi.jpg',
        'admission_type': 'Full-time',
        'seat_number': 20,
    }
