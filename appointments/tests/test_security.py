import pytest
from django.urls import reverse
from rest_framework.test import APIClient
from appointments.models import AuditEvent, User

pytestmark = pytest.mark.django_db

BULK = {
    'ssn': '123-45-6789',
    'patientName': 'John Doe',
    'appointmentDetails': [{'reason': 'Checkup', 'date': '2025-06-01T12:00:00'}],
}


def login(client, username, password):
    return client.post(reverse('login_view'), {'username': username, 'password': password}, format='json')


def test_login_returns_token_and_jwt_pair():
    User.objects.create_user(username='doc', password='P@ssw0rd1', role='doctor')
    r = login(APIClient(), 'doc', 'P@ssw0rd1')
    assert r.status_code == 200
    assert r.data['ok'] is True
    assert r.data['token']
    assert r.data['jwt_access'] and r.data['jwt_refresh']
    assert r.data['role'] == 'doctor'
    assert AuditEvent.objects.filter(action='login', detail__result='ok').exists()


def test_login_with_wrong_password_is_rejected_and_audited():
    User.objects.create_user(username='doc', password='P@ssw0rd1', role='doctor')
    r = login(APIClient(), 'doc', 'wrong')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'invalid_credentials'
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_login_requires_both_fields():
    r = APIClient().post(reverse('login_view'), {'username': 'doc'}, format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'validation_error'


def test_doctor_token_grants_access():
    User.objects.create_user(username='doc', password='P@ssw0rd1', role='doctor')
    client = APIClient()
    token = login(client, 'doc', 'P@ssw0rd1').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    r = client.post(reverse('appointments_bulk'), BULK, format='json')
    assert r.status_code == 200
    assert len(r.data) == 1


def test_doctor_jwt_grants_access():
    User.objects.create_user(username='doc', password='P@ssw0rd1', role='doctor')
    client = APIClient()
    access = login(client, 'doc', 'P@ssw0rd1').data['jwt_access']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
    r = client.get(reverse('appointments'), {'reason': 'Checkup'})
    assert r.status_code == 200
    assert r.data == []


def test_staff_token_is_forbidden():
    User.objects.create_user(username='staff', password='P@ssw0rd1', role='staff')
    client = APIClient()
    token = login(client, 'staff', 'P@ssw0rd1').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    r = client.post(reverse('appointments_bulk'), BULK, format='json')
    assert r.status_code == 403
    assert r.data['error']['code'] == 'permission_denied'


def test_anonymous_gets_401_with_challenge():
    r = APIClient().get(reverse('appointments_latest'), {'ssn': '123-45-6789'})
    assert r.status_code == 401
    assert r['WWW-Authenticate'] == 'Token'


def test_invalid_token_is_rejected():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Token not-a-real-token')
    r = client.get(reverse('appointments_latest'), {'ssn': '123-45-6789'})
    assert r.status_code == 401
    assert r.data['error']['code'] == 'authentication_failed'


def test_logout_blacklists_refresh_token():
    User.objects.create_user(username='doc', password='P@ssw0rd1', role='doctor')
    client = APIClient()
    data = login(client, 'doc', 'P@ssw0rd1').data
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['jwt_access']}")
    r = client.post(reverse('jwt_logout_view'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 200 and r.data['blacklisted'] == 1

    r = APIClient().post(reverse('jwt_refresh_view'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 401


def test_refresh_returns_new_access_token():
    User.objects.create_user(username='doc', password='P@ssw0rd1', role='doctor')
    data = login(APIClient(), 'doc', 'P@ssw0rd1').data
    r = APIClient().post(reverse('jwt_refresh_view'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['jwt_access']


def test_healthz_reports_database(client):
    r = client.get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}
