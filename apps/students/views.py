from django.utils import timezone
from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .engine import seat_summary
from .serializers import (
    StudentSerializer,
    StudentListSerializer,
    SeatSerializer,
    FeeStructureSerializer,
    DeparturePreviewSerializer,
    DepartureResponseSerializer,
    DashboardSerializer,
    # Input serializers
    StudentFilterSerializer,
    AdmissionInputSerializer,
    StudentUpdateSerializer,
    PaymentInputSerializer,
    DepartureInputSerializer,
    ReactivateInputSerializer,
    SeatFilterSerializer,
    DashboardQuerySerializer,
)
from apps.students.services import (
    get_students,
    get_student,
    get_seat_map,
    get_available_seats,
    filter_by_fee_status,
    get_dashboard,
    search_student,
    get_fee_structure,
    update_fee_structure,
    admit_student,
    update_student_details,
    delete_student,
    record_fee_payment,
    mark_fee_due,
    departure_preview,
    depart_student,
    reactivate_student,
    # Exceptions
    StudentServiceError,
    StudentNotFoundError,
    MissingRequiredFieldError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    code = drf_serializers.CharField()


class SeatMapResponseSerializer(drf_serializers.Serializer):
    summary = drf_serializers.DictField()
    seats = SeatSerializer(many=True)
    unplaced = drf_serializers.ListField(child=drf_serializers.CharField())


def service_error_response(error):
    """Translate a domain exception into an HTTP response."""
    http_status = (
        status.HTTP_404_NOT_FOUND
        if isinstance(error, StudentNotFoundError)
        else status.HTTP_400_BAD_REQUEST
    )
    data = {'error': str(error), 'code': error.code}
    if isinstance(error, MissingRequiredFieldError):
        data['fields'] = list(error.fields)
    return Response(data, status=http_status)


class StudentPagination(PageNumberPagination):
    """Custom pagination for students."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class StudentViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the owner's students.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Students (filterable by status and fee status)
    create: Admit a new student
    retrieve: Full profile with payment and credit history
    partial_update: Edit name, father's name or mobile
    destroy: Delete a student (frees the seat)
    """

    serializer_class = StudentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StudentPagination
    lookup_field = 'student_id'
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """Return only the current owner's students."""
        filter_serializer = StudentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return get_students(owner=self.request.user, status=params.get('status'))

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return StudentListSerializer
        elif self.action == 'create':
            return AdmissionInputSerializer
        elif self.action == 'partial_update':
            return StudentUpdateSerializer
        return StudentSerializer

    def get_object(self):
        try:
            return get_student(owner=self.request.user, student_id=self.kwargs['student_id'])
        except StudentNotFoundError as e:
            raise NotFound(str(e))

    def list(self, request, *args, **kwargs):
        students = self.get_queryset()
        as_of = timezone.localdate()

        fee_status = request.query_params.get('fee_status')
        if fee_status:
            students = filter_by_fee_status(students, fee_status, as_of=as_of)

        context = {'as_of': as_of}
        page = self.paginate_queryset(students)
        if page is not None:
            serializer = StudentListSerializer(page, many=True, context=context)
            return self.get_paginated_response(serializer.data)
        return Response(StudentListSerializer(students, many=True, context=context).data)

    @extend_schema(request=AdmissionInputSerializer, responses={201: StudentSerializer, 400: ErrorResponseSerializer})
    def create(self, request, *args, **kwargs):
        """Admit a new student."""
        serializer = AdmissionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            student = admit_student(owner=request.user, **serializer.validated_data)
        except StudentServiceError as e:
            return service_error_response(e)

        return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=StudentUpdateSerializer, responses={200: StudentSerializer})
    def partial_update(self, request, *args, **kwargs):
        """Edit profile fields."""
        serializer = StudentUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            student = update_student_details(
                owner=request.user,
                student_id=kwargs['student_id'],
                **serializer.validated_data
            )
        except StudentServiceError as e:
            return service_error_response(e)

        return Response(StudentSerializer(student).data)

    def destroy(self, request, *args, **kwargs):
        """Delete a student."""
        try:
            delete_student(owner=request.user, student_id=kwargs['student_id'])
        except StudentServiceError as e:
            return service_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=PaymentInputSerializer, responses={200: StudentSerializer, 400: ErrorResponseSerializer})
    @action(detail=True, methods=['post'])
    def pay(self, request, student_id=None):
        """
        Record a fee payment for one or more months.

        POST /api/students/{student_id}/pay/
        Body: {"method": "UPI", "months": 1, "amount": "1200.00"}
        """
        serializer = PaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            student = record_fee_payment(
                owner=request.user,
                student_id=student_id,
                **serializer.validated_data
            )
        except StudentServiceError as e:
            return service_error_response(e)

        return Response(StudentSerializer(student).data)

    @extend_schema(request=None, responses={200: StudentSerializer})
    @action(detail=True, methods=['post'])
    def mark_due(self, request, student_id=None):
        """
        Force the student's fee to show as due.

        POST /api/students/{student_id}/mark_due/
        """
        try:
            student = mark_fee_due(owner=request.user, student_id=student_id)
        except StudentServiceError as e:
            return service_error_response(e)

        return Response(StudentSerializer(student).data)

    @extend_schema(responses={200: DeparturePreviewSerializer})
    @action(detail=True, methods=['get'])
    def departure_preview(self, request, student_id=None):
        """
        Remaining prepaid days that a departure today would free.

        GET /api/students/{student_id}/departure_preview/
        """
        try:
            preview = departure_preview(owner=request.user, student_id=student_id)
        except StudentServiceError as e:
            return service_error_response(e)

        return Response(DeparturePreviewSerializer(preview).data)

    @extend_schema(request=DepartureInputSerializer, responses={200: DepartureResponseSerializer, 400: ErrorResponseSerializer})
    @action(detail=True, methods=['post'])
    def depart(self, request, student_id=None):
        """
        Record a departure, optionally transferring unused days.

        POST /api/students/{student_id}/depart/
        Body: {"transfer_to": "S004", "reason": "Moved away"}
        """
        serializer = DepartureInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            departed, credited = depart_student(
                owner=request.user,
                student_id=student_id,
                transfer_to=serializer.validated_data.get('transfer_to'),
                reason=serializer.validated_data.get('reason'),
            )
        except StudentServiceError as e:
            return service_error_response(e)

        return Response(DepartureResponseSerializer({'departed': departed, 'credited': credited}).data)

    @extend_schema(request=ReactivateInputSerializer, responses={200: StudentSerializer, 400: ErrorResponseSerializer})
    @action(detail=True, methods=['post'])
    def reactivate(self, request, student_id=None):
        """
        Reactivate a departed student on a fully free seat.

        POST /api/students/{student_id}/reactivate/
        Body: {"seat_number": 12}
        """
        serializer = ReactivateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            student = reactivate_student(
                owner=request.user,
                student_id=student_id,
                seat_number=serializer.validated_data['seat_number'],
            )
        except StudentServiceError as e:
            return service_error_response(e)

        return Response(StudentSerializer(student).data)


@extend_schema(
    parameters=[SeatFilterSerializer],
    responses={200: SeatMapResponseSerializer},
    description="Seat matrix recomputed from active students, optionally narrowed to seats available for an admission.",
    tags=['students'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def seat_map(request):
    """Get the seat matrix."""
    filter_serializer = SeatFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)
    params = filter_serializer.validated_data

    try:
        seats = get_seat_map(owner=request.user)
        summary = seat_summary(seats)
        unplaced = [str(conflict) for conflict in seats.unplaced]
        if params.get('gender_category'):
            seats = get_available_seats(
                owner=request.user,
                gender_category=params['gender_category'],
                admission_type=params['admission_type'],
                shift=params.get('shift') or None,
            )
    except StudentServiceError as e:
        return service_error_response(e)

    return Response({
        'summary': summary,
        'seats': SeatSerializer(seats, many=True).data,
        'unplaced': unplaced,
    })


@extend_schema(
    methods=['GET'],
    responses={200: FeeStructureSerializer},
    tags=['students'],
)
@extend_schema(
    methods=['PUT'],
    request=FeeStructureSerializer,
    responses={200: FeeStructureSerializer},
    description="Change monthly prices. Existing students keep the fee captured at admission.",
    tags=['students'],
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def fee_structure(request):
    """Get or update the owner's fee structure."""
    if request.method == 'GET':
        return Response(FeeStructureSerializer(get_fee_structure(owner=request.user)).data)

    serializer = FeeStructureSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    fees = update_fee_structure(owner=request.user, **serializer.validated_data)
    return Response(FeeStructureSerializer(fees).data)


@extend_schema(
    parameters=[DashboardQuerySerializer],
    responses={200: DashboardSerializer},
    description="Dashboard cards; with ?q= also returns the matching student profile.",
    tags=['students'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Get dashboard statistics and optional profile search."""
    query_serializer = DashboardQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    stats = get_dashboard(owner=request.user)
    context = {'as_of': stats['as_of']}
    data = dict(DashboardSerializer(stats, context=context).data)

    query = query_serializer.validated_data.get('q')
    if query:
        profile = search_student(owner=request.user, query=query)
        data['profile'] = StudentSerializer(profile, context=context).data if profile else None

    return Response(data)
