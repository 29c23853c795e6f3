"""
Twilio WhatsApp Notification Service.

Sends new contact submission alerts to a WhatsApp number through the Twilio
Messages REST API.

Official Twilio API Documentation:
https://www.twilio.com/docs/whatsapp/api

Setup:
1. Create a Twilio account at https://www.twilio.com
2. Go to Messaging > Try it out > Send a WhatsApp message
3. Follow the sandbox setup instructions
4. For production, apply for a WhatsApp Business API number
"""
import logging
from typing import Optional

import requests
from django.conf import settings

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


class WhatsAppNotificationSender(NotificationSender):
    """
    WhatsApp channel backed by an authenticated requests session.

    Numbers use Twilio's channel-address format: ``whatsapp:+14155238886``.
    """

    channel = 'whatsapp'
    label = 'WhatsApp'

    # Twilio API endpoints
    API_BASE_URL = "https://api.twilio.com/2010-04-01"

    NOT_CONFIGURED = 'WhatsApp not configured'
    NO_NUMBERS = 'WhatsApp numbers not set'

    def __init__(
        self,
        transport: Transport,
        account_sid: Optional[str] = None,
        from_number: Optional[str] = None,
        to_number: Optional[str] = None,
        timeout: int = 10
    ):
        super().__init__(transport)
        self.account_sid = account_sid
        self.from_number = from_number
        self.to_number = to_number
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> 'WhatsAppNotificationSender':
        """Resolve the Twilio transport from Django settings."""
        account_sid = getattr(settings, 'TWILIO_ACCOUNT_SID', '')
        auth_token = getattr(settings, 'TWILIO_AUTH_TOKEN', '')
        options = {
            'account_sid': account_sid or None,
            'from_number': getattr(settings, 'TWILIO_WHATSAPP_FROM', '') or None,
            'to_number': getattr(settings, 'WHATSAPP_NOTIFICATION_TO', '') or None,
            'timeout': getattr(settings, 'TWILIO_API_TIMEOUT', 10),
        }

        if not account_sid or not auth_token:
            return cls(Unconfigured(cls.NOT_CONFIGURED), **options)

        session = requests.Session()
        session.auth = (account_sid, auth_token)
        return cls(Configured(session), **options)

    @property
    def messages_url(self) -> str:
        return f"{self.API_BASE_URL}/Accounts/{self.account_sid}/Messages.json"

    @property
    def account_url(self) -> str:
        return f"{self.API_BASE_URL}/Accounts/{self.account_sid}.json"

    def send_notification(self, notice: SubmissionNotice):
        """
        Send the WhatsApp alert for a contact submission.

        Returns:
            Sent with the Twilio message SID, or Skipped when WhatsApp is not set up.

        Raises:
            DeliveryError: Twilio rejected the message or could not be reached.
        """
        if not self.is_configured:
            logger.info("WhatsApp not configured - skipping notification. "
                        "To enable: set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, "
                        "TWILIO_WHATSAPP_FROM, WHATSAPP_NOTIFICATION_TO")
            return Skipped(self.transport.reason)

        if not self.from_number or not self.to_number:
            logger.info("WhatsApp numbers not configured - skipping notification")
            return Skipped(self.NO_NUMBERS)

        payload = {
            'From': self.from_number,
            'To': self.to_number,
            'Body': self.format_message(notice),
        }

        try:
            response = self.transport.handle.post(self.messages_url, data=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as exc:
            logger.error(f"Timeout sending WhatsApp notification for submission {notice.submission_id}")
            raise DeliveryError(self.channel, 'Request timeout') from exc
        except requests.exceptions.RequestException as exc:
            logger.error(f"Network error sending WhatsApp notification: {str(exc)}")
            raise DeliveryError(self.channel, f'Network error: {str(exc)}') from exc

        if response.status_code != 201:
            error_message = self._error_message(response)
            logger.error(
                f"Failed to send WhatsApp notification. "
                f"Status: {response.status_code}, Error: {error_message}"
            )
            raise DeliveryError(self.channel, error_message)

        sid = response.json().get('sid', '')
        logger.info(f"WhatsApp sent: {sid}")
        return Sent(sid)

    def verify_connection(self) -> ConnectionStatus:
        """Fetch the Twilio account resource to check the credentials."""
        if not self.is_configured:
            return ConnectionStatus(configured=False)

        try:
            response = self.transport.handle.get(self.account_url, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            return ConnectionStatus(configured=True, connected=False, error=str(exc))

        if response.status_code != 200:
            return ConnectionStatus(configured=True, connected=False, error=self._error_message(response))
        return ConnectionStatus(configured=True, connected=True)

    @staticmethod
    def format_message(notice: SubmissionNotice) -> str:
        return (
            "🔔 New Contact Form Submission\n\n"
            f"👤 Name: {notice.name}\n"
            f"📧 Email: {notice.email}\n"
            f"📱 Phone: {notice.phone or 'N/A'}\n"
            f"🏢 Company: {notice.company or 'N/A'}\n\n"
            f"💬 Message:\n{notice.message}"
        )

    @staticmethod
    def _error_message(response) -> str:
        try:
            error_data = response.json() if response.content else {}
        except ValueError:
            error_data = {}
        return error_data.get('message') or f'Twilio API returned HTTP {response.status_code}'
