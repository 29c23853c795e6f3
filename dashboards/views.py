"""
Admin Dashboard Views

Session-gated pages for reviewing and managing contact submissions.
HTML pages for the list and detail views; small JSON endpoints for the
status update and delete actions.
"""
import json
import logging

from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import admin_login_required
from contact.models import ContactSubmission

from .services.submissions import SubmissionDashboardService

logger = logging.getLogger(__name__)

STATUS_MAX_LENGTH = ContactSubmission._meta.get_field('status').max_length


@admin_login_required
@require_GET
def dashboard(request):
    """
    GET /admin

    All contact submissions, newest first.
    """
    context = {'username': request.admin_session.username}

    try:
        context['submissions'] = SubmissionDashboardService().list_submissions()
    except DatabaseError:
        logger.exception("Dashboard error")
        context['submissions'] = []
        context['error'] = 'Failed to load submissions'

    return render(request, 'dashboards/dashboard.html', context)


@method_decorator(admin_login_required, name='dispatch')
class SubmissionView(View):
    """
    GET    /admin/submission/:id - submission details and notification log
    DELETE /admin/submission/:id - delete the submission and its log rows
    """

    def get(self, request, submission_id):
        try:
            submission, logs = SubmissionDashboardService().get_submission_with_logs(submission_id)
        except DatabaseError:
            logger.exception("Submission view error")
            return redirect('dashboards:index')

        if submission is None:
            return redirect('dashboards:index')

        return render(request, 'dashboards/submission.html', {
            'submission': submission,
            'logs': logs,
            'username': request.admin_session.username,
        })

    def delete(self, request, submission_id):
        try:
            SubmissionDashboardService().delete_submission(submission_id)
        except DatabaseError:
            logger.exception("Delete error")
            return JsonResponse(
                {'success': False, 'message': 'Failed to delete submission'},
                status=500
            )

        logger.info(f"Submission {submission_id} deleted by '{request.admin_session.username}'")
        return JsonResponse({'success': True})


@admin_login_required
@require_POST
def update_status(request, submission_id):
    """
    POST /admin/submission/:id/status

    Body (JSON or form): {"status": "<any label>"}
    """
    status = _read_status(request)

    if not isinstance(status, str):
        return JsonResponse({'success': False, 'message': 'Status is required'}, status=400)

    if len(status) > STATUS_MAX_LENGTH:
        return JsonResponse(
            {'success': False, 'message': f'Status must be at most {STATUS_MAX_LENGTH} characters'},
            status=400
        )

    try:
        SubmissionDashboardService().update_status(submission_id, status)
    except DatabaseError:
        logger.exception("Status update error")
        return JsonResponse({'success': False, 'message': 'Failed to update status'}, status=500)

    return JsonResponse({'success': True})


def _read_status(request):
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except ValueError:
            return None
        return data.get('status') if isinstance(data, dict) else None
    return request.POST.get('status')
