# ==========================================
# apps/students/admin.py
# ==========================================

from django.contrib import admin
from django.db.models import BooleanField, ExpressionWrapper, Q
from django.utils import timezone

from apps.students.models import Student, FeeStructure


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    """
    Admin interface for Students.

    Plan, seat, due date and lifecycle fields are owned by the admission,
    payment and departure services and are shown read-only here.
    """

    list_display = [
        'student_id',
        'name',
        'owner',
        'seat_number',
        'admission_type',
        'shift',
        'next_due_date',
        'fee_due',
        'status',
    ]
    list_filter = ['status', 'admission_type', 'shift', 'admission_date']
    search_fields = ['student_id', 'name', 'mobile', 'owner__email']
    readonly_fields = [
        'owner',
        'student_id',
        'admission_type',
        'shift',
        'seat_number',
        'admission_date',
        'fee_amount',
        'next_due_date',
        'payment_history',
        'received_credit_log',
        'status',
        'departure_date',
        'departure_reason',
        'transfer_log',
        'created_at',
        'updated_at',
    ]
    date_hierarchy = 'admission_date'
    ordering = ['owner', 'student_id']

    fieldsets = (
        ('Identity', {
            'fields': ('owner', 'student_id', 'title', 'name', 'father_name', 'mobile', 'photo_url')
        }),
        ('Plan and Seat', {
            'fields': ('admission_type', 'shift', 'seat_number')
        }),
        ('Fees', {
            'fields': ('admission_date', 'fee_amount', 'next_due_date', 'payment_history', 'received_credit_log')
        }),
        ('Lifecycle', {
            'fields': ('status', 'departure_date', 'departure_reason', 'transfer_log'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def has_add_permission(self, request):
        # Admissions allocate ids and seats
        return False

    def fee_due(self, obj):
        """Show whether the fee is overdue today."""
        return obj.is_fee_due
    fee_due.boolean = True
    fee_due.short_description = 'Due'
    fee_due.admin_order_field = 'is_fee_due'

    def get_queryset(self, request):
        """Optimize query and compare due dates against one today."""
        qs = super().get_queryset(request)
        return qs.select_related('owner').annotate(
            is_fee_due=ExpressionWrapper(
                Q(next_due_date__lt=timezone.localdate()),
                output_field=BooleanField(),
            )
        )


@admin.register(FeeStructure)
class FeeStructureAdmin(admin.ModelAdmin):
    """Admin interface for fee structures."""

    list_display = ['owner', 'full_time_fee', 'half_time_fee', 'updated_at']
    search_fields = ['owner__email']
    readonly_fields = ['updated_at']
