"""
Contact Management Models

Database schema for contact form submissions and their notification log.
"""
from django.db import models


class ContactSubmission(models.Model):
    """
    Contact form submissions from the public website.

    Status is a free-form label managed from the admin dashboard.
    """

    DEFAULT_STATUS = 'new'

    # Contact Information
    name = models.CharField(
        max_length=255,
        help_text="Name of the person contacting us"
    )

    email = models.CharField(
        max_length=255,
        help_text="Email address for follow-up"
    )

    phone = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Optional phone number"
    )

    company = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Optional company name"
    )

    message = models.TextField(
        help_text="The actual message content"
    )

    # Status (free text, no enforced lifecycle)
    status = models.CharField(
        max_length=50,
        default=DEFAULT_STATUS,
        help_text="Current status of the submission"
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the submission was received"
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the submission was last updated"
    )

    class Meta:
        db_table = 'contact_submissions'
        ordering = ['-created_at', '-id']
        verbose_name = 'Contact Submission'
        verbose_name_plural = 'Contact Submissions'

    def __str__(self):
        return f"{self.name} <{self.email}> ({self.status})"


class NotificationLog(models.Model):
    """
    Outcome of one notification attempt for a submission.

    Append-only: one row per attempted channel per submission.
    """

    CHANNEL_EMAIL = 'email'
    CHANNEL_WHATSAPP = 'whatsapp'
    CHANNEL_CHOICES = [
        (CHANNEL_EMAIL, 'Email'),
        (CHANNEL_WHATSAPP, 'WhatsApp'),
    ]

    STATUS_SENT = 'sent'
    STATUS_FAILED = 'failed'
    STATUS_CHOICES = [
        (STATUS_SENT, 'Sent'),
        (STATUS_FAILED, 'Failed'),
    ]

    # Log rows must be deleted before their submission
    submission = models.ForeignKey(
        ContactSubmission,
        on_delete=models.PROTECT,
        related_name='notification_logs',
        help_text="The submission this notification was about"
    )

    channel = models.CharField(
        max_length=50,
        choices=CHANNEL_CHOICES,
        db_column='type',
        help_text="Notification channel"
    )

    status = models.CharField(
        max_length=50,
        choices=STATUS_CHOICES,
        help_text="Delivery outcome"
    )

    details = models.TextField(
        blank=True,
        default='',
        help_text="Provider reference or raw error detail"
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the attempt finished"
    )

    class Meta:
        db_table = 'notification_logs'
        ordering = ['-created_at', '-id']
        verbose_name = 'Notification Log'
        verbose_name_plural = 'Notification Logs'
        indexes = [
            models.Index(fields=['submission', 'created_at'], name='notif_log_submission_idx'),
        ]

    def __str__(self):
        return f"{self.channel} {self.status} for submission {self.submission_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Notification log entries are append-only")
        super().save(*args, **kwargs)

    @classmethod
    def record(cls, submission, channel, status, details=''):
        return cls.objects.create(
            submission=submission,
            channel=channel,
            status=status,
            details=details
        )
