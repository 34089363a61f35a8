from django.utils import timezone
from rest_framework import serializers

from .engine.billing_ledger import PAYMENT_METHODS, is_past_due
from .models import Student, FeeStructure, StudentStatusChoice


# =============================================================================
# Input Serializers
# =============================================================================

class StudentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for student listing.

    Query Parameters:
        status (str): 'active' or 'departed'
        fee_status (str): 'due' or 'paid'
    """

    status = serializers.ChoiceField(choices=StudentStatusChoice.choices, required=False)
    fee_status = serializers.ChoiceField(choices=['due', 'paid'], required=False)


class AdmissionInputSerializer(serializers.Serializer):
    """
    Admission form.

    Required-field, plan and seat checks are left to the admission engine so
    each failure keeps its own error code.
    """

    title = serializers.CharField(max_length=10)
    name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    father_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    mobile = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    photo_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    admission_type = serializers.CharField(max_length=20)
    shift = serializers.CharField(max_length=10, required=False, allow_blank=True, allow_null=True)
    seat_number = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)
    admission_date = serializers.DateField(required=False, allow_null=True)


class StudentUpdateSerializer(serializers.Serializer):
    """Editable profile fields."""

    name = serializers.CharField(max_length=150, required=False)
    father_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    mobile = serializers.CharField(max_length=20, required=False)


class PaymentInputSerializer(serializers.Serializer):
    """
    Fee payment.

    Fields:
        method (str): 'UPI' or 'Cash'
        months (int): Months paid at once (default 1)
        amount (Decimal): Per-month amount; defaults to the student's fee
    """

    method = serializers.ChoiceField(choices=PAYMENT_METHODS, default='UPI')
    months = serializers.IntegerField(min_value=1, default=1)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)


class DepartureInputSerializer(serializers.Serializer):
    transfer_to = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class ReactivateInputSerializer(serializers.Serializer):
    seat_number = serializers.IntegerField(min_value=1)


class SeatFilterSerializer(serializers.Serializer):
    """
    Optional availability filter for the seat map.

    gender_category and admission_type (plus shift for half-time) narrow
    the map to seats that can take that admission.
    """

    gender_category = serializers.ChoiceField(choices=['girl', 'boy'], required=False)
    admission_type = serializers.CharField(max_length=20, required=False)
    shift = serializers.CharField(max_length=10, required=False, allow_blank=True)

    def validate(self, attrs):
        if bool(attrs.get('gender_category')) != bool(attrs.get('admission_type')):
            raise serializers.ValidationError(
                'gender_category and admission_type must be given together'
            )
        return attrs


class DashboardQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=150, required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class FeeDueMixin:
    """
    ``is_fee_due`` against one date per serialization.

    Views pass ``as_of`` in the context; otherwise today is read once and
    shared by every row through the root serializer's context.
    """

    def get_is_fee_due(self, obj):
        as_of = self.context.get('as_of')
        if as_of is None:
            as_of = self.context['as_of'] = timezone.localdate()
        return is_past_due(obj.next_due_date, as_of)


class StudentSerializer(FeeDueMixin, serializers.ModelSerializer):
    """Full student profile including ledgers."""

    is_fee_due = serializers.SerializerMethodField()

    class Meta:
        model = Student
        fields = [
            'student_id',
            'title',
            'name',
            'father_name',
            'mobile',
            'photo_url',
            'admission_type',
            'shift',
            'seat_number',
            'admission_date',
            'fee_amount',
            'next_due_date',
            'is_fee_due',
            'payment_history',
            'received_credit_log',
            'status',
            'departure_date',
            'departure_reason',
            'transfer_log',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields



class StudentListSerializer(FeeDueMixin, serializers.ModelSerializer):
    """Compact row for student tables."""

    is_fee_due = serializers.SerializerMethodField()

    class Meta:
        model = Student
        fields = [
            'student_id',
            'title',
            'name',
            'mobile',
            'admission_type',
            'shift',
            'seat_number',
            'fee_amount',
            'next_due_date',
            'is_fee_due',
            'status',
            'departure_date',
        ]
        read_only_fields = fields



class SeatSerializer(serializers.Serializer):
    """Serializer for engine Seat values."""

    number = serializers.IntegerField()
    gender_category = serializers.SerializerMethodField()
    morning = serializers.CharField(allow_null=True)
    evening = serializers.CharField(allow_null=True)
    is_free = serializers.BooleanField()
    conflicts = serializers.SerializerMethodField()

    def get_gender_category(self, obj):
        return obj.gender_category.value

    def get_conflicts(self, obj):
        return [str(conflict) for conflict in obj.conflicts]


class FeeStructureSerializer(serializers.ModelSerializer):
    class Meta:
        model = FeeStructure
        fields = ['full_time_fee', 'half_time_fee', 'updated_at']
        read_only_fields = ['updated_at']


class DeparturePreviewSerializer(serializers.Serializer):
    student_id = serializers.CharField()
    next_due_date = serializers.DateField()
    as_of = serializers.DateField()
    remaining_days = serializers.IntegerField()


class DepartureResponseSerializer(serializers.Serializer):
    departed = StudentSerializer()
    credited = StudentSerializer(allow_null=True)


class DashboardSerializer(serializers.Serializer):
    as_of = serializers.DateField()
    total_students = serializers.IntegerField()
    seats_occupied = serializers.IntegerField()
    departed_students = serializers.IntegerField()
    fees_pending_count = serializers.IntegerField()
    total_fees_pending = serializers.DecimalField(max_digits=12, decimal_places=2)
    fees_pending = StudentListSerializer(many=True)
    conflicts = serializers.SerializerMethodField()

    def get_conflicts(self, obj):
        return [str(conflict) for conflict in obj.get('conflicts', ())]
