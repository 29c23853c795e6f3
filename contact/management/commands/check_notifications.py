"""
Management command to check notification channel configuration and connectivity.
"""
from django.apps import apps
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Check email and WhatsApp notification configuration and connectivity'

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('\n=== NOTIFICATION CHANNEL CHECK ===\n'))

        failed = []
        for sender in apps.get_app_config('contact').notification_senders:
            result = sender.verify_connection()

            if not result.configured:
                self.stdout.write(self.style.WARNING(f'  {sender.label}: Not configured (notifications skipped)'))
            elif result.connected:
                self.stdout.write(self.style.SUCCESS(f'  {sender.label}: Connected'))
            else:
                self.stdout.write(self.style.ERROR(f'  {sender.label}: Connection failed - {result.error}'))
                failed.append(sender.label)

        if failed:
            raise CommandError(f"Unable to connect: {', '.join(failed)}")

        self.stdout.write(self.style.SUCCESS('\n=== CHECK COMPLETED ===\n'))
