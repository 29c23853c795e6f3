"""
Tests for site-wide error handling and the notification check command
"""
import importlib.util
import json
from io import StringIO
from unittest.mock import patch

import pytest
from django.conf import settings
from django.core.management import CommandError, call_command
from django.test import Client, RequestFactory

from conftest import StubSender
from core.notifications import ConnectionStatus
from core.views import server_error


class TestErrorHandlers:
    """Test the 404 page and the catch-all 500 response."""

    def test_unknown_route(self, client):
        response = client.get('/no-such-page')

        assert response.status_code == 404
        assert b'Page not found' in response.content

    def test_server_error(self):
        request = RequestFactory().post('/api/contact')

        response = server_error(request)

        assert response.status_code == 500
        assert json.loads(response.content) == {'success': False, 'message': 'Internal server error'}

    def test_unhandled_view_error(self, db):
        client = Client(raise_request_exception=False)
        with patch('contact.views.ContactFormSubmitSerializer', side_effect=RuntimeError('boom')):
            response = client.post('/api/contact', {'name': 'Jo'})

        assert response.status_code == 500
        assert response.json() == {'success': False, 'message': 'Internal server error'}

    def test_trailing_slash_not_appended(self, client):
        response = client.get('/admin/login/')

        assert response.status_code == 404


class TestApiErrorShape:
    """Framework errors on the API use the {success, message} body."""

    def test_method_not_allowed(self, api_client):
        response = api_client.put('/api/contact', {}, format='json')

        assert response.status_code == 405
        assert response.data == {'success': False, 'message': 'Method "PUT" not allowed.'}

    def test_unsupported_media_type(self, api_client):
        response = api_client.post('/api/contact', 'name=Jo', content_type='text/plain')

        assert response.status_code == 415
        assert response.data['success'] is False


class TestCheckNotificationsCommand:
    """Test the notification connectivity check."""

    def test_all_connected(self, stub_senders):
        stub_senders()
        out = StringIO()

        call_command('check_notifications', stdout=out)

        output = out.getvalue()
        assert 'Email: Connected' in output
        assert 'WhatsApp: Connected' in output

    def test_not_configured_is_not_an_error(self, stub_senders):
        stub_senders(
            whatsapp=StubSender('whatsapp', 'WhatsApp', connection=ConnectionStatus(configured=False)),
        )
        out = StringIO()

        call_command('check_notifications', stdout=out)

        assert 'WhatsApp: Not configured' in out.getvalue()

    def test_connection_failure(self, stub_senders):
        stub_senders(
            email=StubSender(
                'email', 'Email',
                connection=ConnectionStatus(configured=True, connected=False, error='Connection refused')
            ),
        )
        out = StringIO()

        with pytest.raises(CommandError, match='Unable to connect: Email'):
            call_command('check_notifications', stdout=out)

        assert 'Email: Connection failed - Connection refused' in out.getvalue()


class TestGunicornConfig:
    """Deployment settings come from the environment."""

    def load_config(self):
        path = settings.BASE_DIR / 'deployment' / 'gunicorn' / 'gunicorn_config.py'
        spec = importlib.util.spec_from_file_location('gunicorn_config', path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv('GUNICORN_BIND', '0.0.0.0:8000')
        monkeypatch.setenv('GUNICORN_USER', 'www-data')
        monkeypatch.setenv('GUNICORN_PIDFILE', '/tmp/healthscale.pid')
        monkeypatch.setenv('GUNICORN_WORKERS', '5')

        config = self.load_config()

        assert config.bind == '0.0.0.0:8000'
        assert config.user == 'www-data'
        assert config.pidfile == '/tmp/healthscale.pid'
        assert config.workers == 5
        assert config.wsgi_app == 'core.wsgi:application'

    def test_defaults(self, monkeypatch):
        for name in ('GUNICORN_BIND', 'GUNICORN_USER', 'GUNICORN_PIDFILE', 'GUNICORN_WORKERS'):
            monkeypatch.delenv(name, raising=False)

        config = self.load_config()

        assert config.bind == 'unix:/var/www/healthscale/backend/gunicorn.sock'
        assert config.user == 'deploy'
        assert config.workers == 3
