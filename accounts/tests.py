"""
Tests for admin login, logout and first-run setup
"""
from unittest.mock import patch

import pytest
from django.conf import settings
from django.contrib.sessions.backends.db import SessionStore
from django.db import DatabaseError
from django.test import Client

from accounts.models import AdminUser
from accounts.services import SetupClosed, authenticate_admin, create_first_admin, is_setup_open
from accounts.session import AdminSession
from conftest import ADMIN_PASSWORD

pytestmark = pytest.mark.django_db


class TestAdminLogin:
    """Test the login form."""

    def test_login_page_renders(self, client):
        response = client.get('/admin/login')

        assert response.status_code == 200
        assert b'name="username"' in response.content

    def test_login_success(self, client, admin_user):
        response = client.post('/admin/login', {'username': 'owner', 'password': ADMIN_PASSWORD})

        assert response.status_code == 302
        assert response.url == '/admin'
        assert client.session['admin_id'] == admin_user.pk
        assert client.session['admin_username'] == 'owner'

    def test_login_wrong_password(self, client, admin_user):
        response = client.post('/admin/login', {'username': 'owner', 'password': 'wrong-password'})

        assert response.status_code == 200
        assert response.context['error'] == 'Invalid username or password'
        assert 'admin_id' not in client.session

    def test_login_unknown_user(self, client, admin_user):
        response = client.post('/admin/login', {'username': 'nobody', 'password': ADMIN_PASSWORD})

        assert response.status_code == 200
        assert response.context['error'] == 'Invalid username or password'

    def test_login_missing_fields(self, client):
        response = client.post('/admin/login', {'username': 'owner'})

        assert response.status_code == 200
        assert response.context['error'] == 'Invalid username or password'

    def test_login_page_redirects_when_signed_in(self, admin_client):
        response = admin_client.get('/admin/login')

        assert response.status_code == 302
        assert response.url == '/admin'

    def test_login_database_error(self, client):
        with patch('accounts.views.authenticate_admin', side_effect=DatabaseError('down')):
            response = client.post('/admin/login', {'username': 'owner', 'password': ADMIN_PASSWORD})

        assert response.status_code == 200
        assert response.context['error'] == 'An error occurred. Please try again.'

    def test_session_key_rotates_on_login(self, client, admin_user):
        client.get('/admin/login')
        session = client.session
        session['visited'] = True
        session.save()
        anonymous_key = session.session_key

        client.post('/admin/login', {'username': 'owner', 'password': ADMIN_PASSWORD})

        assert client.session.session_key != anonymous_key

    def test_csrf_token_rotates_on_login(self, admin_user):
        client = Client(enforce_csrf_checks=True)
        client.get('/admin/login')
        anonymous_token = client.cookies['csrftoken'].value

        response = client.post('/admin/login', {
            'username': 'owner',
            'password': ADMIN_PASSWORD,
            'csrfmiddlewaretoken': anonymous_token,
        })

        assert response.status_code == 302
        assert client.cookies['csrftoken'].value != anonymous_token

    def test_session_lifetime_is_24_hours(self):
        assert settings.SESSION_COOKIE_AGE == 24 * 60 * 60


class TestAdminLogout:
    """Test ending the admin session."""

    def test_logout_ends_session(self, admin_client):
        response = admin_client.get('/admin/logout')

        assert response.status_code == 302
        assert response.url == '/admin/login'

        response = admin_client.get('/admin')
        assert response.status_code == 302
        assert response.url == '/admin/login'

    def test_logout_when_anonymous(self, client):
        response = client.get('/admin/logout')

        assert response.status_code == 302
        assert response.url == '/admin/login'


class TestAdminSetup:
    """Test first-run admin creation."""

    def test_setup_page_open_without_admins(self, client):
        response = client.get('/admin/setup')

        assert response.status_code == 200
        assert response.context['error'] is None

    def test_setup_creates_admin(self, client):
        response = client.post('/admin/setup', {
            'username': 'owner',
            'password': 'long-enough-password',
            'email': 'owner@healthscale.test',
        })

        assert response.status_code == 302
        assert response.url == '/admin/login'

        admin = AdminUser.objects.get()
        assert admin.username == 'owner'
        assert admin.email == 'owner@healthscale.test'
        assert admin.password_hash != 'long-enough-password'
        assert admin.check_password('long-enough-password')

    def test_setup_then_login(self, client):
        client.post('/admin/setup', {'username': 'owner', 'password': 'long-enough-password'})

        response = client.post('/admin/login', {'username': 'owner', 'password': 'long-enough-password'})

        assert response.status_code == 302
        assert response.url == '/admin'

    def test_setup_blank_email_stored_as_null(self, client):
        client.post('/admin/setup', {'username': 'owner', 'password': 'long-enough-password', 'email': ''})

        assert AdminUser.objects.get().email is None

    def test_setup_short_password(self, client):
        response = client.post('/admin/setup', {'username': 'owner', 'password': 'short'})

        assert response.status_code == 200
        assert response.context['error'] == 'Password must be at least 8 characters'
        assert AdminUser.objects.count() == 0

    def test_setup_password_of_minimum_length(self, client):
        response = client.post('/admin/setup', {'username': 'owner', 'password': '12345678'})

        assert response.status_code == 302
        assert AdminUser.objects.count() == 1

    @pytest.mark.parametrize('data', [
        {'username': 'owner'},
        {'password': 'long-enough-password'},
        {'username': '', 'password': ''},
    ])
    def test_setup_missing_fields(self, client, data):
        response = client.post('/admin/setup', data)

        assert response.status_code == 200
        assert response.context['error'] == 'Username and password are required'
        assert AdminUser.objects.count() == 0

    def test_setup_closed_once_admin_exists(self, client, admin_user):
        response = client.get('/admin/setup')

        assert response.status_code == 302
        assert response.url == '/admin/login'

    def test_setup_post_ignored_once_admin_exists(self, client, admin_user):
        response = client.post('/admin/setup', {'username': 'intruder', 'password': 'long-enough-password'})

        assert response.status_code == 302
        assert response.url == '/admin/login'
        assert list(AdminUser.objects.values_list('username', flat=True)) == ['owner']

    def test_setup_database_error(self, client):
        with patch('accounts.views.create_first_admin', side_effect=DatabaseError('down')):
            response = client.post('/admin/setup', {'username': 'owner', 'password': 'long-enough-password'})

        assert response.status_code == 200
        assert response.context['error'] == 'Failed to create admin user'


class TestAdminServices:
    """Test credential checks and admin creation."""

    def test_authenticate_admin(self, admin_user):
        assert authenticate_admin('owner', ADMIN_PASSWORD) == admin_user
        assert authenticate_admin('owner', 'wrong-password') is None
        assert authenticate_admin('nobody', ADMIN_PASSWORD) is None

    def test_create_first_admin_once(self):
        assert is_setup_open()

        create_first_admin('owner', 'long-enough-password')

        assert not is_setup_open()
        with pytest.raises(SetupClosed):
            create_first_admin('second', 'long-enough-password')
        assert AdminUser.objects.count() == 1

    def test_concurrent_setup_check_is_not_atomic(self):
        # Both requests pass the "no admins yet" check before either inserts
        with patch('accounts.services.is_setup_open', return_value=True):
            create_first_admin('first', 'long-enough-password')
            create_first_admin('second', 'long-enough-password')

        assert AdminUser.objects.count() == 2


class TestAdminSession:
    """Test the session wrapper."""

    def test_login_and_logout(self, admin_user):
        store = SessionStore()
        session = AdminSession(store)
        assert not session.is_authenticated

        session.login(admin_user)

        assert session.is_authenticated
        assert session.admin_id == admin_user.pk
        assert session.username == 'owner'

        session.logout()

        assert not session.is_authenticated
        assert session.username is None

    def test_anonymous_client_session(self):
        client = Client()
        client.get('/admin/login')

        assert AdminSession(client.session).admin_id is None

    def test_authentication_state_lives_in_session(self, admin_user):
        assert not hasattr(admin_user, 'is_authenticated')
        assert AdminSession(SessionStore()).is_authenticated is False
