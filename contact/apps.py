import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class ContactConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'contact'
    verbose_name = 'Contact Management'

    notification_senders = ()

    def ready(self):
        """Resolve notification channels once and import signals."""
        import contact.signals  # noqa

        self.load_notification_senders()
        for sender in self.notification_senders:
            logger.info(
                f"{sender.label} notifications: "
                f"{'Configured' if sender.is_configured else 'Not configured'}"
            )

    def load_notification_senders(self):
        from core.notifications import resolve_notification_senders

        self.notification_senders = resolve_notification_senders()
