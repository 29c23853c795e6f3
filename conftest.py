"""
Shared pytest fixtures.
"""
from unittest.mock import patch

import pytest
from django.apps import apps
from django.test import Client
from rest_framework.test import APIClient

from accounts.models import AdminUser
from contact.models import ContactSubmission
from core.notifications import Configured, ConnectionStatus, NotificationSender, Sent

ADMIN_PASSWORD = 'correct-horse-battery'


class StubSender(NotificationSender):
    """Notification sender returning a fixed outcome or raising a fixed error."""

    def __init__(self, channel, label, outcome=None, error=None, connection=None):
        super().__init__(Configured(handle=None))
        self.channel = channel
        self.label = label
        self.outcome = outcome if outcome is not None else Sent(f'{channel}-ref')
        self.error = error
        self.connection = connection or ConnectionStatus(configured=True, connected=True)
        self.notices = []

    def send_notification(self, notice):
        self.notices.append(notice)
        if self.error is not None:
            raise self.error
        return self.outcome

    def verify_connection(self):
        return self.connection


@pytest.fixture(autouse=True)
def notification_dispatch():
    """Stop the contact view from queueing real Celery tasks."""
    with patch('contact.views.dispatch_notifications') as dispatch:
        yield dispatch


@pytest.fixture
def stub_senders(monkeypatch):
    """Install stub email and WhatsApp senders on the contact app."""
    def install(email=None, whatsapp=None):
        senders = (
            email or StubSender('email', 'Email'),
            whatsapp or StubSender('whatsapp', 'WhatsApp'),
        )
        monkeypatch.setattr(apps.get_app_config('contact'), 'notification_senders', senders)
        return senders
    return install


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    admin = AdminUser(username='owner', email='owner@healthscale.test')
    admin.set_password(ADMIN_PASSWORD)
    admin.save()
    return admin


@pytest.fixture
def admin_client(admin_user):
    """Django test client with an authenticated admin session."""
    client = Client()
    response = client.post('/admin/login', {'username': admin_user.username, 'password': ADMIN_PASSWORD})
    assert response.status_code == 302
    return client


@pytest.fixture
def sample_submission(db):
    return ContactSubmission.objects.create(
        name='John Doe',
        email='john@example.com',
        phone='+1 555 0100',
        company='Acme Clinics',
        message='We would like a new website for our clinic network.'
    )
