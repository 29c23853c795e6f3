"""
Tests for the contact form API and notification fan-out
"""
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from kombu.exceptions import OperationalError
from rest_framework import status

from conftest import StubSender
from contact.models import ContactSubmission, NotificationLog
from contact.tasks import dispatch_notifications, notify_submission
from core.notifications import DeliveryError, Sent, Skipped

pytestmark = pytest.mark.django_db

VALID_SUBMISSION = {
    'name': 'John Doe',
    'email': 'john@example.com',
    'message': 'Hello',
}


class TestContactFormSubmission:
    """Test public contact form submission."""

    def test_submit_valid_contact_form(self, api_client, notification_dispatch):
        response = api_client.post('/api/contact', VALID_SUBMISSION, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert response.data['message'] == 'Thank you for your message! We will get back to you soon.'

        submission = ContactSubmission.objects.get(pk=response.data['submissionId'])
        assert submission.status == 'new'
        assert submission.phone is None
        assert submission.company is None
        notification_dispatch.assert_called_once_with(submission.pk)

    def test_submit_all_fields(self, api_client):
        data = {
            'name': 'Jo',
            'email': 'a@b.co',
            'phone': '+233 20 000 0000',
            'company': 'Acme',
            'message': 'Hi',
        }

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        submission = ContactSubmission.objects.get()
        assert submission.phone == '+233 20 000 0000'
        assert submission.company == 'Acme'

    def test_submit_form_encoded(self, api_client):
        response = api_client.post('/api/contact', VALID_SUBMISSION)

        assert response.status_code == status.HTTP_201_CREATED
        assert ContactSubmission.objects.count() == 1

    def test_values_stored_as_submitted(self, api_client):
        data = dict(VALID_SUBMISSION, name='  John Doe  ')

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert ContactSubmission.objects.get().name == '  John Doe  '

    def test_empty_optional_fields_stored_as_null(self, api_client):
        data = dict(VALID_SUBMISSION, phone='', company=None)

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        submission = ContactSubmission.objects.get()
        assert submission.phone is None
        assert submission.company is None

    @pytest.mark.parametrize('missing', ['name', 'email', 'message'])
    def test_submit_missing_required_field(self, api_client, notification_dispatch, missing):
        data = {k: v for k, v in VALID_SUBMISSION.items() if k != missing}

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'success': False, 'message': 'Name, email, and message are required'}
        assert ContactSubmission.objects.count() == 0
        notification_dispatch.assert_not_called()

    @pytest.mark.parametrize('field', ['name', 'email', 'message'])
    def test_submit_null_required_field(self, api_client, field):
        data = dict(VALID_SUBMISSION, **{field: None})

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'success': False, 'message': 'Name, email, and message are required'}
        assert ContactSubmission.objects.count() == 0

    def test_submit_whitespace_only_field(self, api_client):
        data = dict(VALID_SUBMISSION, message='   ')

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Name, email, and message are required'

    @pytest.mark.parametrize('email', [
        'not-an-email',
        'john@example',
        'john doe@example.com',
        'john@@example.com',
        'john@example.com\n',
    ])
    def test_submit_invalid_email(self, api_client, email):
        data = dict(VALID_SUBMISSION, email=email)

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'success': False, 'message': 'Please provide a valid email address'}
        assert ContactSubmission.objects.count() == 0

    def test_submit_oversized_field(self, api_client):
        data = dict(VALID_SUBMISSION, name='x' * 256)

        response = api_client.post('/api/contact', data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert ContactSubmission.objects.count() == 0

    def test_submit_malformed_json(self, api_client):
        response = api_client.post('/api/contact', '{"name": ', content_type='application/json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False

    def test_get_not_allowed(self, api_client):
        response = api_client.get('/api/contact')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.data['success'] is False

    def test_store_failure(self, api_client, notification_dispatch):
        with patch('contact.serializers.ContactFormSubmitSerializer.save', side_effect=DatabaseError('down')):
            response = api_client.post('/api/contact', VALID_SUBMISSION, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'success': False, 'message': 'Failed to submit form. Please try again later.'}
        notification_dispatch.assert_not_called()


class TestNotifySubmission:
    """Test the notification fan-out task."""

    def test_both_channels_sent(self, sample_submission, stub_senders):
        email, whatsapp = stub_senders(
            email=StubSender('email', 'Email', outcome=Sent('<abc@healthscale.test>')),
            whatsapp=StubSender('whatsapp', 'WhatsApp', outcome=Sent('SM123')),
        )

        notify_submission(sample_submission.pk)

        logs = {log.channel: log for log in NotificationLog.objects.filter(submission=sample_submission)}
        assert set(logs) == {'email', 'whatsapp'}
        assert logs['email'].status == 'sent'
        assert logs['email'].details == 'Email notification sent successfully (<abc@healthscale.test>)'
        assert logs['whatsapp'].status == 'sent'
        assert 'SM123' in logs['whatsapp'].details
        assert email.notices[0].name == 'John Doe'
        assert whatsapp.notices[0].submission_id == sample_submission.pk

    def test_one_channel_failure_does_not_stop_the_other(self, sample_submission, stub_senders):
        stub_senders(
            email=StubSender('email', 'Email', error=DeliveryError('email', '535 Authentication failed')),
        )

        notify_submission(sample_submission.pk)

        email_log = NotificationLog.objects.get(submission=sample_submission, channel='email')
        whatsapp_log = NotificationLog.objects.get(submission=sample_submission, channel='whatsapp')
        assert email_log.status == 'failed'
        assert email_log.details == '535 Authentication failed'
        assert whatsapp_log.status == 'sent'

    def test_skipped_channel_logged_as_failed(self, sample_submission, stub_senders):
        stub_senders(
            whatsapp=StubSender('whatsapp', 'WhatsApp', outcome=Skipped('WhatsApp not configured')),
        )

        notify_submission(sample_submission.pk)

        log = NotificationLog.objects.get(submission=sample_submission, channel='whatsapp')
        assert log.status == 'failed'
        assert log.details == 'Skipped: WhatsApp not configured'

    def test_unexpected_error_logged_as_failed(self, sample_submission, stub_senders):
        stub_senders(
            whatsapp=StubSender('whatsapp', 'WhatsApp', error=RuntimeError('template exploded')),
        )

        notify_submission(sample_submission.pk)

        log = NotificationLog.objects.get(submission=sample_submission, channel='whatsapp')
        assert log.status == 'failed'
        assert log.details == 'template exploded'
        assert NotificationLog.objects.filter(submission=sample_submission).count() == 2

    def test_unconfigured_channels(self, sample_submission, settings):
        settings.SMTP_HOST = ''
        settings.TWILIO_ACCOUNT_SID = ''

        notify_submission(sample_submission.pk)

        logs = {log.channel: log for log in NotificationLog.objects.filter(submission=sample_submission)}
        assert logs['email'].status == 'failed'
        assert logs['email'].details == 'Skipped: Email not configured'
        assert logs['whatsapp'].status == 'failed'
        assert logs['whatsapp'].details == 'Skipped: WhatsApp not configured'

    def test_missing_submission(self, stub_senders):
        email, whatsapp = stub_senders()

        notify_submission(999999)

        assert NotificationLog.objects.count() == 0
        assert email.notices == []
        assert whatsapp.notices == []


class TestDispatchNotifications:
    """Test queueing the fan-out task."""

    def test_queues_task(self):
        with patch('contact.tasks.notify_submission') as task:
            dispatch_notifications(42)

        task.delay.assert_called_once_with(42)

    def test_broker_outage_is_ignored(self):
        with patch('contact.tasks.notify_submission') as task:
            task.delay.side_effect = OperationalError('connection refused')
            dispatch_notifications(42)

        task.delay.assert_called_once_with(42)

    def test_other_hand_off_failure_is_ignored(self):
        with patch('contact.tasks.notify_submission') as task:
            task.delay.side_effect = RuntimeError('serializer exploded')
            dispatch_notifications(42)

        task.delay.assert_called_once_with(42)

    def test_submission_succeeds_when_queueing_fails(self, api_client):
        with patch('contact.views.dispatch_notifications', dispatch_notifications), \
                patch('contact.tasks.notify_submission') as task:
            task.delay.side_effect = RuntimeError('serializer exploded')
            response = api_client.post('/api/contact', VALID_SUBMISSION, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        task.delay.assert_called_once_with(response.data['submissionId'])


class TestContactModels:
    """Test contact models."""

    def test_default_status(self, sample_submission):
        assert sample_submission.status == ContactSubmission.DEFAULT_STATUS == 'new'

    def test_notification_log_is_append_only(self, sample_submission):
        log = NotificationLog.record(sample_submission, NotificationLog.CHANNEL_EMAIL, NotificationLog.STATUS_SENT)
        log.details = 'rewritten'

        with pytest.raises(ValueError):
            log.save()

        assert NotificationLog.objects.get(pk=log.pk).details == ''
