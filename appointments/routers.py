"""
URL mappings for the appointments API.

Paths carry no trailing slash (``APPEND_SLASH = False``).
"""
from django.urls import path, include

from .auth_views import login_view, jwt_refresh_view, jwt_logout_view
from .views import appointments
from .views import health


urlpatterns = [
    # django_prometheus serves /metrics itself
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout_view'),
    # Appointments
    path('api/appointments/bulk', appointments.create_bulk, name='appointments_bulk'),
    path('api/appointments/latest', appointments.latest, name='appointments_latest'),
    path('api/appointments', appointments.appointments, name='appointments'),
]
