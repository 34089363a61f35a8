from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),

    # Owner profile
    path('me/', views.me, name='me'),
]
