"""
Contact Submission Dashboard Service

Store access behind the admin dashboard:
- All submissions, newest first
- One submission with its notification log
- Status updates (free text, last write wins)
- Deletion of a submission and its log rows
"""

from django.utils import timezone

from contact.models import ContactSubmission, NotificationLog


class SubmissionDashboardService:
    """Service for the contact submission dashboard"""

    def list_submissions(self):
        """
        Get every submission for the dashboard table.

        Returns:
            list: ContactSubmission rows ordered newest first
        """
        return list(ContactSubmission.objects.order_by('-created_at', '-id'))

    def get_submission_with_logs(self, submission_id):
        """
        Get one submission and its notification attempts.

        Returns:
            tuple: (submission, logs newest first), or (None, []) if it does not exist
        """
        submission = ContactSubmission.objects.filter(pk=submission_id).first()
        if submission is None:
            return None, []

        logs = list(
            NotificationLog.objects.filter(submission_id=submission_id).order_by('-created_at', '-id')
        )
        return submission, logs

    def update_status(self, submission_id, status):
        """
        Set a submission's status label.

        Any string is accepted. Unknown ids update nothing.

        Returns:
            int: number of rows updated (0 or 1)
        """
        return ContactSubmission.objects.filter(pk=submission_id).update(
            status=status,
            updated_at=timezone.now()
        )

    def delete_submission(self, submission_id):
        """
        Delete a submission's notification log rows, then the submission.

        The two deletes are separate statements. Unknown ids delete nothing.

        Returns:
            int: number of submission rows deleted (0 or 1)
        """
        NotificationLog.objects.filter(submission_id=submission_id).delete()
        deleted, _ = ContactSubmission.objects.filter(pk=submission_id).delete()
        return deleted
