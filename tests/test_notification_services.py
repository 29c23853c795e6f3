"""
Tests for the email and WhatsApp notification senders
"""
import smtplib
from unittest.mock import Mock

import pytest
import requests
from django.core.mail.backends.locmem import EmailBackend as LocMemEmailBackend
from django.core.mail.backends.smtp import EmailBackend as SMTPEmailBackend
from django.utils import timezone

from core.email_service import EmailNotificationSender
from core.notifications import (
    Configured,
    ConnectionStatus,
    DeliveryError,
    Sent,
    Skipped,
    SubmissionNotice,
    Unconfigured,
    resolve_notification_senders,
)
from core.whatsapp_service import WhatsAppNotificationSender


@pytest.fixture
def notice():
    return SubmissionNotice(
        submission_id=7,
        name='Jo',
        email='jo@example.com',
        message='Hi there',
        phone='+233 20 000 0000',
        company='Acme',
        submitted_at=timezone.now(),
    )


def email_sender(handle, recipient='owner@healthscale.test'):
    return EmailNotificationSender(Configured(handle), recipient, 'site@healthscale.test')


def whatsapp_sender(handle, from_number='whatsapp:+14155238886', to_number='whatsapp:+233200000000'):
    return WhatsAppNotificationSender(
        Configured(handle),
        account_sid='AC123',
        from_number=from_number,
        to_number=to_number,
        timeout=5,
    )


def twilio_response(status_code, payload):
    response = Mock(status_code=status_code, content=b'{}')
    response.json.return_value = payload
    return response


class TestEmailSenderSettings:
    """Test resolving the SMTP transport from settings."""

    def test_unconfigured_without_host(self, settings):
        settings.SMTP_HOST = ''

        sender = EmailNotificationSender.from_settings()

        assert not sender.is_configured
        assert sender.transport == Unconfigured('Email not configured')

    def test_configured_starttls(self, settings):
        settings.SMTP_HOST = 'smtp.example.com'
        settings.SMTP_PORT = 587
        settings.SMTP_SECURE = False
        settings.SMTP_STARTTLS = True
        settings.SMTP_USER = 'mailer'
        settings.SMTP_PASSWORD = 'secret'
        settings.SMTP_FROM = ''
        settings.NOTIFICATION_EMAIL = 'owner@healthscale.test'

        sender = EmailNotificationSender.from_settings()

        assert sender.is_configured
        connection = sender.transport.handle
        assert isinstance(connection, SMTPEmailBackend)
        assert connection.host == 'smtp.example.com'
        assert connection.port == 587
        assert connection.use_tls is True
        assert connection.use_ssl is False
        assert sender.recipient == 'owner@healthscale.test'
        assert sender.from_email == 'mailer'

    def test_configured_implicit_tls(self, settings):
        settings.SMTP_HOST = 'smtp.example.com'
        settings.SMTP_PORT = 465
        settings.SMTP_SECURE = True

        connection = EmailNotificationSender.from_settings().transport.handle

        assert connection.use_ssl is True
        assert connection.use_tls is False

    def test_resolve_notification_senders_order(self):
        email, whatsapp = resolve_notification_senders()

        assert email.channel == 'email'
        assert whatsapp.channel == 'whatsapp'


class TestEmailSender:
    """Test sending the staff notification email."""

    def test_send_notification(self, notice, mailoutbox):
        result = email_sender(LocMemEmailBackend()).send_notification(notice)

        assert isinstance(result, Sent)
        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert message.subject == 'New Contact Form Submission from Jo'
        assert message.to == ['owner@healthscale.test']
        assert message.from_email == 'site@healthscale.test'
        assert message.reply_to == ['jo@example.com']
        assert message.extra_headers['Message-ID'] == result.reference
        assert 'Hi there' in message.body

        html, mimetype = message.alternatives[0]
        assert mimetype == 'text/html'
        assert 'Acme' in html

    def test_html_escapes_submitted_values(self, mailoutbox):
        notice = SubmissionNotice(submission_id=7, name='<b>Jo</b>', email='jo@example.com', message='<i>hi</i>')

        email_sender(LocMemEmailBackend()).send_notification(notice)

        html = mailoutbox[0].alternatives[0][0]
        assert '<b>Jo</b>' not in html
        assert '&lt;b&gt;Jo&lt;/b&gt;' in html

    def test_unconfigured_is_skipped(self, notice, mailoutbox):
        sender = EmailNotificationSender(Unconfigured('Email not configured'), 'owner@healthscale.test')

        assert sender.send_notification(notice) == Skipped('Email not configured')
        assert mailoutbox == []

    def test_missing_recipient_is_skipped(self, notice, mailoutbox):
        sender = email_sender(LocMemEmailBackend(), recipient=None)

        assert sender.send_notification(notice) == Skipped('Notification email not set')
        assert mailoutbox == []

    def test_smtp_failure(self, notice):
        connection = Mock()
        connection.send_messages.side_effect = smtplib.SMTPAuthenticationError(535, b'Authentication failed')

        with pytest.raises(DeliveryError) as excinfo:
            email_sender(connection).send_notification(notice)

        assert excinfo.value.channel == 'email'
        assert '535' in excinfo.value.detail

    def test_connection_refused(self, notice):
        connection = Mock()
        connection.send_messages.side_effect = ConnectionRefusedError('Connection refused')

        with pytest.raises(DeliveryError) as excinfo:
            email_sender(connection).send_notification(notice)

        assert excinfo.value.detail == 'Connection refused'

    def test_verify_connection(self):
        connection = Mock()

        assert email_sender(connection).verify_connection() == ConnectionStatus(configured=True, connected=True)
        connection.open.assert_called_once_with()
        connection.close.assert_called_once_with()

    def test_verify_connection_failure(self):
        connection = Mock()
        connection.open.side_effect = smtplib.SMTPConnectError(421, 'Service not available')

        status = email_sender(connection).verify_connection()

        assert status.configured is True
        assert status.connected is False
        assert '421' in status.error

    def test_verify_unconfigured(self):
        sender = EmailNotificationSender(Unconfigured('Email not configured'))

        assert sender.verify_connection() == ConnectionStatus(configured=False)


class TestWhatsAppSenderSettings:
    """Test resolving the Twilio transport from settings."""

    def test_unconfigured_without_credentials(self, settings):
        settings.TWILIO_ACCOUNT_SID = 'AC123'
        settings.TWILIO_AUTH_TOKEN = ''

        sender = WhatsAppNotificationSender.from_settings()

        assert sender.transport == Unconfigured('WhatsApp not configured')

    def test_configured(self, settings):
        settings.TWILIO_ACCOUNT_SID = 'AC123'
        settings.TWILIO_AUTH_TOKEN = 'token'
        settings.TWILIO_WHATSAPP_FROM = 'whatsapp:+14155238886'
        settings.WHATSAPP_NOTIFICATION_TO = 'whatsapp:+233200000000'

        sender = WhatsAppNotificationSender.from_settings()

        assert sender.is_configured
        assert isinstance(sender.transport.handle, requests.Session)
        assert sender.transport.handle.auth == ('AC123', 'token')
        assert sender.messages_url == 'https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json'


class TestWhatsAppSender:
    """Test sending the WhatsApp alert."""

    def test_send_notification(self, notice):
        session = Mock()
        session.post.return_value = twilio_response(201, {'sid': 'SM123'})
        sender = whatsapp_sender(session)

        result = sender.send_notification(notice)

        assert result == Sent('SM123')
        session.post.assert_called_once_with(
            sender.messages_url,
            data={
                'From': 'whatsapp:+14155238886',
                'To': 'whatsapp:+233200000000',
                'Body': WhatsAppNotificationSender.format_message(notice),
            },
            timeout=5,
        )

    def test_unconfigured_is_skipped(self, notice):
        sender = WhatsAppNotificationSender(Unconfigured('WhatsApp not configured'))

        assert sender.send_notification(notice) == Skipped('WhatsApp not configured')

    def test_missing_numbers_is_skipped(self, notice):
        session = Mock()

        result = whatsapp_sender(session, to_number=None).send_notification(notice)

        assert result == Skipped('WhatsApp numbers not set')
        session.post.assert_not_called()

    def test_api_error(self, notice):
        session = Mock()
        session.post.return_value = twilio_response(400, {'code': 21211, 'message': "The 'To' number is not valid"})

        with pytest.raises(DeliveryError) as excinfo:
            whatsapp_sender(session).send_notification(notice)

        assert excinfo.value.channel == 'whatsapp'
        assert excinfo.value.detail == "The 'To' number is not valid"

    def test_api_error_without_body(self, notice):
        session = Mock()
        session.post.return_value = Mock(status_code=503, content=b'')

        with pytest.raises(DeliveryError) as excinfo:
            whatsapp_sender(session).send_notification(notice)

        assert excinfo.value.detail == 'Twilio API returned HTTP 503'

    def test_timeout(self, notice):
        session = Mock()
        session.post.side_effect = requests.exceptions.Timeout()

        with pytest.raises(DeliveryError) as excinfo:
            whatsapp_sender(session).send_notification(notice)

        assert excinfo.value.detail == 'Request timeout'

    def test_network_error(self, notice):
        session = Mock()
        session.post.side_effect = requests.exceptions.ConnectionError('Name or service not known')

        with pytest.raises(DeliveryError) as excinfo:
            whatsapp_sender(session).send_notification(notice)

        assert excinfo.value.detail == 'Network error: Name or service not known'

    def test_verify_connection(self):
        session = Mock()
        session.get.return_value = twilio_response(200, {'sid': 'AC123', 'status': 'active'})
        sender = whatsapp_sender(session)

        assert sender.verify_connection() == ConnectionStatus(configured=True, connected=True)
        session.get.assert_called_once_with(sender.account_url, timeout=5)

    def test_verify_connection_bad_credentials(self):
        session = Mock()
        session.get.return_value = twilio_response(401, {'message': 'Authenticate'})

        status = whatsapp_sender(session).verify_connection()

        assert status == ConnectionStatus(configured=True, connected=False, error='Authenticate')

    def test_format_message(self, notice):
        text = WhatsAppNotificationSender.format_message(notice)

        assert 'New Contact Form Submission' in text
        assert 'Name: Jo' in text
        assert 'Phone: +233 20 000 0000' in text
        assert text.endswith('Hi there')

    def test_format_message_optional_fields(self):
        notice = SubmissionNotice(submission_id=1, name='Jo', email='a@b.co', message='Hi')

        text = WhatsAppNotificationSender.format_message(notice)

        assert 'Phone: N/A' in text
        assert 'Company: N/A' in text
