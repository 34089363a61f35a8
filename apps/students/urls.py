from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'students'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.StudentViewSet, basename='student')

urlpatterns = [
    # Student ViewSet routes
    # GET    /api/students/                 - List students (?status=, ?fee_status=)
    # POST   /api/students/                 - Admit student
    # GET    /api/students/{id}/            - Student profile
    # PATCH  /api/students/{id}/            - Edit name / father's name / mobile
    # DELETE /api/students/{id}/            - Delete student

    # Custom student actions
    # POST   /api/students/{id}/pay/                 - Record payment
    # POST   /api/students/{id}/mark_due/            - Force fee due
    # GET    /api/students/{id}/departure_preview/   - Remaining prepaid days
    # POST   /api/students/{id}/depart/              - Depart (optional transfer)
    # POST   /api/students/{id}/reactivate/          - Reactivate on a free seat

    # Additional endpoints
    path('seats/', views.seat_map, name='seat-map'),
    path('fee-structure/', views.fee_structure, name='fee-structure'),
    path('dashboard/', views.dashboard, name='dashboard'),

    # Include router URLs
    path('', include(router.urls)),
]
