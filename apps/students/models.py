from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid

from .engine.domain import (
    AdmissionPlan,
    AdmissionType,
    CreditEntry,
    FeeStructure as FeeSchedule,
    Payment,
    Shift,
    StudentRecord,
    StudentStatus,
    TransferLog,
)


class AdmissionTypeChoice(models.TextChoices):
    FULL_TIME = AdmissionType.FULL_TIME.value, 'Full-time'
    HALF_TIME = AdmissionType.HALF_TIME.value, 'Half-time'


class ShiftChoice(models.TextChoices):
    MORNING = Shift.MORNING.value, 'Morning'
    EVENING = Shift.EVENING.value, 'Evening'


class StudentStatusChoice(models.TextChoices):
    ACTIVE = StudentStatus.ACTIVE.value, 'Active'
    DEPARTED = StudentStatus.DEPARTED.value, 'Departed'


class Student(models.Model):
    """A study-library member holding a seat slot and a monthly fee."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='students'
    )
    # Sequential per owner: S001, S002, ...
    student_id = models.CharField(max_length=20, editable=False)

    # Identity
    title = models.CharField(max_length=10)
    name = models.CharField(max_length=150)
    father_name = models.CharField(max_length=150, blank=True)
    mobile = models.CharField(max_length=20)
    photo_url = models.CharField(max_length=500)

    # Plan and seat
    admission_type = models.CharField(max_length=20, choices=AdmissionTypeChoice.choices)
    shift = models.CharField(
        max_length=10,
        choices=ShiftChoice.choices,
        null=True,
        blank=True
    )
    seat_number = models.PositiveIntegerField()

    # Ledger
    admission_date = models.DateField()
    fee_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    next_due_date = models.DateField()
    payment_history = models.JSONField(default=list, blank=True)
    received_credit_log = models.JSONField(default=list, blank=True)

    # Lifecycle
    status = models.CharField(
        max_length=10,
        choices=StudentStatusChoice.choices,
        default=StudentStatusChoice.ACTIVE
    )
    departure_date = models.DateField(null=True, blank=True)
    departure_reason = models.CharField(max_length=255, null=True, blank=True)
    transfer_log = models.JSONField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        constraints = [
            models.UniqueConstraint(fields=['owner', 'student_id'], name='unique_student_id_per_owner'),
            # Full-time has no shift, half-time always has one
            models.CheckConstraint(
                condition=(
                    models.Q(admission_type=AdmissionTypeChoice.FULL_TIME, shift__isnull=True)
                    | models.Q(admission_type=AdmissionTypeChoice.HALF_TIME, shift__isnull=False)
                ),
                name='student_shift_matches_admission_type',
            ),
        ]
        indexes = [
            models.Index(fields=['owner', 'status'], name='students_owner_status_idx'),
            models.Index(fields=['owner', 'next_due_date'], name='students_owner_due_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.student_id} - {self.name} (seat {self.seat_number})"

    @property
    def is_active(self):
        return self.status == StudentStatusChoice.ACTIVE

    def to_record(self):
        """Engine view of this row."""
        return StudentRecord(
            id=self.student_id,
            name=self.name,
            father_name=self.father_name,
            mobile=self.mobile,
            title=self.title,
            photo_url=self.photo_url,
            plan=AdmissionPlan.parse(self.admission_type, self.shift),
            seat_number=self.seat_number,
            admission_date=self.admission_date,
            fee_amount=self.fee_amount,
            next_due_date=self.next_due_date,
            payment_history=tuple(Payment.from_dict(p) for p in self.payment_history or []),
            received_credit_log=tuple(
                CreditEntry.from_dict(c) for c in self.received_credit_log or []
            ),
            status=StudentStatus(self.status),
            departure_date=self.departure_date,
            departure_reason=self.departure_reason,
            transfer_log=TransferLog.from_dict(self.transfer_log) if self.transfer_log else None,
        )

    def apply_record(self, record):
        """Copy an engine record's mutable state back onto this row (unsaved)."""
        self.student_id = record.id
        self.name = record.name
        self.father_name = record.father_name
        self.mobile = record.mobile
        self.title = record.title
        self.photo_url = record.photo_url
        self.admission_type = record.admission_type.value
        self.shift = record.shift.value if record.shift else None
        self.seat_number = record.seat_number
        self.admission_date = record.admission_date
        self.fee_amount = record.fee_amount
        self.next_due_date = record.next_due_date
        self.payment_history = [p.to_dict() for p in record.payment_history]
        self.received_credit_log = [c.to_dict() for c in record.received_credit_log]
        self.status = record.status.value
        self.departure_date = record.departure_date
        self.departure_reason = record.departure_reason
        self.transfer_log = record.transfer_log.to_dict() if record.transfer_log else None
        return self


class FeeStructure(models.Model):
    """Current monthly prices of one library. Only affects future admissions."""

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='fee_structure'
    )
    full_time_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    half_time_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fee_structures'

    def __str__(self):
        return f"{self.owner}: {self.full_time_fee} / {self.half_time_fee}"

    def to_schedule(self):
        return FeeSchedule({
            AdmissionType.FULL_TIME: self.full_time_fee,
            AdmissionType.HALF_TIME: self.half_time_fee,
        })
