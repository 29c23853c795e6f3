"""
Notification channel primitives.

Each channel (email, WhatsApp) is a NotificationSender whose transport is
resolved once from settings into either ``Unconfigured`` or
``Configured(handle)``. Sending returns ``Sent`` or ``Skipped`` and raises
``DeliveryError`` when the transport itself fails.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from django.utils import timezone


class DeliveryError(Exception):
    """A notification transport failed to deliver a message."""

    def __init__(self, channel: str, detail: str):
        self.channel = channel
        self.detail = detail
        super().__init__(detail)


@dataclass(frozen=True)
class Unconfigured:
    reason: str


@dataclass(frozen=True)
class Configured:
    handle: Any


Transport = Union[Unconfigured, Configured]


@dataclass(frozen=True)
class Sent:
    reference: str


@dataclass(frozen=True)
class Skipped:
    reason: str


SendOutcome = Union[Sent, Skipped]


@dataclass(frozen=True)
class ConnectionStatus:
    configured: bool
    connected: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class SubmissionNotice:
    """The contact submission data every channel formats its message from."""

    submission_id: int
    name: str
    email: str
    message: str
    phone: Optional[str] = None
    company: Optional[str] = None
    submitted_at: Optional[datetime] = None

    @classmethod
    def from_submission(cls, submission) -> 'SubmissionNotice':
        return cls(
            submission_id=submission.pk,
            name=submission.name,
            email=submission.email,
            message=submission.message,
            phone=submission.phone,
            company=submission.company,
            submitted_at=submission.created_at or timezone.now(),
        )


class NotificationSender:
    """
    Base class for notification channels.

    Subclasses set ``channel``/``label`` and implement ``send_notification``
    and ``verify_connection``. ``transport`` is fixed at construction.
    """

    channel = ''
    label = ''

    def __init__(self, transport: Transport):
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return isinstance(self.transport, Configured)

    def send_notification(self, notice: SubmissionNotice) -> SendOutcome:
        raise NotImplementedError

    def verify_connection(self) -> ConnectionStatus:
        raise NotImplementedError


def resolve_notification_senders():
    """Build every notification sender from the current settings, email first."""
    from core.email_service import EmailNotificationSender
    from core.whatsapp_service import WhatsAppNotificationSender

    return (
        EmailNotificationSender.from_settings(),
        WhatsAppNotificationSender.from_settings(),
    )
