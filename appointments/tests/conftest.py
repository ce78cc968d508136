import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_throttle_cache():
    """Throttle counters live in the local-memory cache; start each test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def doctor(db):
    from appointments.models import User
    return User.objects.create_user(username='doctor1', password='P@ssw0rd1', role='doctor')


@pytest.fixture
def doctor_client(doctor):
    client = APIClient()
    client.force_authenticate(user=doctor)
    return client
