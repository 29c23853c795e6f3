"""
Contact Management Signals

Django signals for contact-related events.
"""
import logging

from django.apps import apps
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.test.signals import setting_changed

from .models import ContactSubmission

logger = logging.getLogger(__name__)

NOTIFICATION_SETTINGS = {
    'SMTP_HOST', 'SMTP_PORT', 'SMTP_SECURE', 'SMTP_STARTTLS', 'SMTP_USER',
    'SMTP_PASSWORD', 'SMTP_FROM', 'SMTP_TIMEOUT', 'NOTIFICATION_EMAIL',
    'TWILIO_ACCOUNT_SID', 'TWILIO_AUTH_TOKEN', 'TWILIO_WHATSAPP_FROM',
    'WHATSAPP_NOTIFICATION_TO', 'TWILIO_API_TIMEOUT',
}


@receiver(post_save, sender=ContactSubmission)
def contact_submission_post_save(sender, instance, created, **kwargs):
    """Log new contact submissions."""
    if created:
        logger.info(f"New contact submission #{instance.pk} from {instance.email}")


@receiver(setting_changed)
def reload_notification_senders(setting, **kwargs):
    """Re-resolve notification channels when their settings are overridden."""
    if setting in NOTIFICATION_SETTINGS:
        apps.get_app_config('contact').load_notification_senders()
