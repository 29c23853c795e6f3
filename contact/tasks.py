"""
Contact Notification Tasks

Celery task that fans a new submission out to every notification channel.
The task is launched without waiting for it; its only observable result is
the notification log table.
"""
import logging

from celery import shared_task
from django.apps import apps
from kombu.exceptions import OperationalError

from core.notifications import DeliveryError, Sent, SubmissionNotice
from .models import ContactSubmission, NotificationLog

logger = logging.getLogger(__name__)


def get_notification_senders():
    """Senders resolved by the contact app at startup."""
    return apps.get_app_config('contact').notification_senders


@shared_task(ignore_result=True, max_retries=0)
def notify_submission(submission_id):
    """
    Send email and WhatsApp notifications for a contact submission.

    Args:
        submission_id: primary key of the ContactSubmission
    """
    try:
        submission = ContactSubmission.objects.get(pk=submission_id)
    except ContactSubmission.DoesNotExist:
        logger.warning(f"Contact submission {submission_id} not found - skipping notifications")
        return

    notice = SubmissionNotice.from_submission(submission)

    for sender in get_notification_senders():
        deliver_notification(sender, submission, notice)


def deliver_notification(sender, submission, notice):
    """
    Make one delivery attempt on one channel and log its outcome.

    Skipped channels and failed deliveries are both recorded as failed;
    neither stops the remaining channels.
    """
    try:
        outcome = sender.send_notification(notice)
    except DeliveryError as exc:
        logger.error(f"{sender.label} notification failed for submission {submission.pk}: {exc.detail}")
        return NotificationLog.record(submission, sender.channel, NotificationLog.STATUS_FAILED, exc.detail)
    except Exception as exc:
        logger.exception(f"{sender.label} notification crashed for submission {submission.pk}")
        return NotificationLog.record(submission, sender.channel, NotificationLog.STATUS_FAILED, str(exc))

    if isinstance(outcome, Sent):
        details = f"{sender.label} notification sent successfully ({outcome.reference})"
        return NotificationLog.record(submission, sender.channel, NotificationLog.STATUS_SENT, details)

    return NotificationLog.record(
        submission, sender.channel, NotificationLog.STATUS_FAILED, f"Skipped: {outcome.reason}"
    )


def dispatch_notifications(submission_id):
    """
    Queue the notification fan-out without waiting for it.

    A broker outage or any other hand-off failure is logged and otherwise
    ignored so the submitter's response never depends on notification delivery.
    """
    try:
        notify_submission.delay(submission_id)
    except OperationalError:
        logger.exception(f"Broker unavailable - could not queue notifications for submission {submission_id}")
    except Exception:
        logger.exception(f"Could not queue notifications for submission {submission_id}")
