"""
SMTP Email Notification Service.

Sends new contact submission notifications to the site owner's inbox.
Any SMTP provider works (Gmail app password, SendGrid, Mailgun, Amazon SES,
Resend).

Settings:
- SMTP_HOST: SMTP server hostname (empty disables email notifications)
- SMTP_PORT: SMTP server port (usually 587 or 465)
- SMTP_SECURE: use implicit TLS (port 465)
- SMTP_USER / SMTP_PASSWORD: SMTP credentials
- SMTP_FROM: sender address (defaults to SMTP_USER)
- NOTIFICATION_EMAIL: address that receives notifications
"""
import logging
import smtplib
from email.utils import make_msgid
from typing import Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.core.mail.backends.smtp import EmailBackend
from django.core.mail.utils import DNS_NAME
from django.template.loader import render_to_string
from django.utils.html import strip_tags

from core.notifications import (
    Configured,
    ConnectionStatus,
    DeliveryError,
    NotificationSender,
    Sent,
    Skipped,
    SubmissionNotice,
    Transport,
    Unconfigured,
)

logger = logging.getLogger(__name__)


class EmailNotificationSender(NotificationSender):
    """
    Email channel backed by an explicit Django SMTP connection.

    The connection object is the transport handle; it only connects when a
    message is sent or the connection is verified.
    """

    channel = 'email'
    label = 'Email'

    NOT_CONFIGURED = 'Email not configured'
    NO_RECIPIENT = 'Notification email not set'

    def __init__(self, transport: Transport, recipient: Optional[str] = None, from_email: Optional[str] = None):
        super().__init__(transport)
        self.recipient = recipient
        self.from_email = from_email

    @classmethod
    def from_settings(cls) -> 'EmailNotificationSender':
        """Resolve the SMTP transport from Django settings."""
        host = getattr(settings, 'SMTP_HOST', '')
        recipient = getattr(settings, 'NOTIFICATION_EMAIL', '') or None
        from_email = getattr(settings, 'SMTP_FROM', '') or getattr(settings, 'SMTP_USER', '') or None

        if not host:
            return cls(Unconfigured(cls.NOT_CONFIGURED), recipient, from_email)

        secure = getattr(settings, 'SMTP_SECURE', False)
        connection = EmailBackend(
            host=host,
            port=getattr(settings, 'SMTP_PORT', 587),
            username=getattr(settings, 'SMTP_USER', '') or None,
            password=getattr(settings, 'SMTP_PASSWORD', '') or None,
            use_ssl=secure,
            use_tls=not secure and getattr(settings, 'SMTP_STARTTLS', True),
            timeout=getattr(settings, 'SMTP_TIMEOUT', 30),
            fail_silently=False,
        )
        return cls(Configured(connection), recipient, from_email)

    def send_notification(self, notice: SubmissionNotice):
        """
        Send the staff notification for a contact submission.

        Returns:
            Sent with the generated Message-ID, or Skipped when email is not set up.

        Raises:
            DeliveryError: the SMTP server rejected the message or was unreachable.
        """
        if not self.is_configured:
            logger.info("Email not configured - skipping notification. "
                        "To enable: set SMTP_HOST, SMTP_USER, SMTP_PASS, NOTIFICATION_EMAIL")
            return Skipped(self.transport.reason)

        if not self.recipient:
            logger.info("NOTIFICATION_EMAIL not set - skipping notification")
            return Skipped(self.NO_RECIPIENT)

        html_content = render_to_string('contact/emails/staff_notification.html', {'notice': notice})
        message_id = make_msgid(domain=DNS_NAME)

        email = EmailMultiAlternatives(
            subject=f"New Contact Form Submission from {notice.name}",
            body=strip_tags(html_content).strip(),
            from_email=self.from_email,
            to=[self.recipient],
            reply_to=[notice.email],
            headers={'Message-ID': message_id},
            connection=self.transport.handle,
        )
        email.attach_alternative(html_content, "text/html")

        try:
            email.send(fail_silently=False)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"Email notification for submission {notice.submission_id} failed: {exc}")
            raise DeliveryError(self.channel, str(exc)) from exc

        logger.info(f"Email sent: {message_id}")
        return Sent(message_id)

    def verify_connection(self) -> ConnectionStatus:
        """Open and close an SMTP connection to check host and credentials."""
        if not self.is_configured:
            return ConnectionStatus(configured=False)

        connection = self.transport.handle
        try:
            connection.open()
        except (smtplib.SMTPException, OSError) as exc:
            return ConnectionStatus(configured=True, connected=False, error=str(exc))
        connection.close()
        return ConnectionStatus(configured=True, connected=True)
