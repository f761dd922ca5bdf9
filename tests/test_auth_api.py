from unittest import mock

import pytest
from django.db import OperationalError
from rest_framework_simplejwt.tokens import AccessToken

from authentication.models import CustomUser

pytestmark = pytest.mark.django_db


def login(client, email, password):
    return client.post('/auth/login/', {'email': email, 'password': password}, format='json')


def test_login_returns_tokens_with_role(api_client, manager):
    response = login(api_client, 'manager@biryanihouse.in', 'Kitchen#2024')

    assert response.status_code == 200
    assert response.data['role'] == 'manager'
    assert response.data['user']['email'] == 'manager@biryanihouse.in'
    assert AccessToken(response.data['access'])['role'] == 'manager'

    manager.refresh_from_db()
    assert manager.last_login_at is not None


def test_access_token_authenticates_requests(api_client, staff):
    token = login(api_client, 'staff@biryanihouse.in', 'Counter#2024').data['access']
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    response = api_client.get('/profile/')

    assert response.status_code == 200
    assert response.data['role'] == 'staff'


@pytest.mark.parametrize('email, password, message', [
    ('stranger@example.com', 'whatever', 'This email is not authorized to access the system'),
    ('staff@biryanihouse.in', 'wrong-password', 'Invalid email or password'),
])
def test_login_failures(api_client, staff, email, password, message):
    response = login(api_client, email, password)

    assert response.status_code == 400
    assert response.data['details']['non_field_errors'] == [message]


def test_deactivated_account_cannot_log_in(api_client, staff):
    staff.is_active = False
    staff.save()

    response = login(api_client, 'staff@biryanihouse.in', 'Counter#2024')

    assert response.status_code == 400
    assert response.data['details']['non_field_errors'] == ['Account is deactivated']


def test_manager_preauthorizes_then_user_registers(manager_client, api_client):
    response = manager_client.post('/users/', {'email': 'cook@biryanihouse.in', 'role': 'staff'}, format='json')
    assert response.status_code == 201
    assert not CustomUser.objects.get(email='cook@biryanihouse.in').has_usable_password()

    response = api_client.post('/auth/register/', {
        'email': 'cook@biryanihouse.in', 'name': 'Imran', 'password': 'Dum-Pukht-77'
    }, format='json')
    assert response.status_code == 201
    assert response.data['display_name'] == 'Imran'

    assert login(api_client, 'cook@biryanihouse.in', 'Dum-Pukht-77').status_code == 200


def test_register_rejects_unknown_email(api_client):
    response = api_client.post('/auth/register/', {
        'email': 'walkin@example.com', 'password': 'Dum-Pukht-77'
    }, format='json')

    assert response.status_code == 400
    assert 'email' in response.data['details']


def test_register_rejects_already_registered(api_client, staff):
    response = api_client.post('/auth/register/', {
        'email': 'staff@biryanihouse.in', 'password': 'Dum-Pukht-77'
    }, format='json')
    assert response.status_code == 400


def test_staff_cannot_manage_users(staff_client):
    response = staff_client.get('/users/')

    assert response.status_code == 403
    assert response.data['message'] == 'Permission denied'


def test_manager_deactivates_user(manager_client, staff):
    response = manager_client.patch(f'/users/{staff.id}/', {'is_active': False}, format='json')

    assert response.status_code == 200
    staff.refresh_from_db()
    assert staff.is_active is False


def test_profile_cannot_change_own_role(staff_client, staff):
    response = staff_client.patch('/profile/', {'role': 'manager', 'name': 'Kiran'}, format='json')

    assert response.status_code == 200
    staff.refresh_from_db()
    assert staff.role == 'staff'
    assert staff.name == 'Kiran'


def test_unauthenticated_envelope(api_client):
    response = api_client.get('/profile/')

    assert response.status_code == 401
    assert response.data['error'] is True
    assert response.data['message'] == 'Authentication required'
    assert response.data['status_code'] == 401


def test_health_check(api_client):
    response = api_client.get('/health/')

    assert response.status_code == 200
    assert response.data['database'] == 'connected'


def test_health_check_reports_database_down(api_client):
    with mock.patch('authentication.views.connection') as connection:
        connection.cursor.side_effect = OperationalError('no such database')
        response = api_client.get('/health/')

    assert response.status_code == 503
    assert response.data['status'] == 'unhealthy'
