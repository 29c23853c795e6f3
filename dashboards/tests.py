"""
Tests for the admin submission dashboard
"""
import json
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.test import Client
from django.utils import timezone

from conftest import ADMIN_PASSWORD
from contact.models import ContactSubmission, NotificationLog
from dashboards.services import SubmissionDashboardService

pytestmark = pytest.mark.django_db


def make_submission(name, **kwargs):
    return ContactSubmission.objects.create(
        name=name,
        email=f'{name.lower()}@example.com',
        message=f'Message from {name}',
        **kwargs
    )


@pytest.fixture
def csrf_client():
    """Test client that enforces CSRF checks like a browser request would."""
    return Client(enforce_csrf_checks=True)


def login_with_csrf(client):
    """Sign in through the login form and return the current CSRF token."""
    client.get('/admin/login')
    response = client.post('/admin/login', {
        'username': 'owner',
        'password': ADMIN_PASSWORD,
        'csrfmiddlewaretoken': client.cookies['csrftoken'].value,
    })
    assert response.status_code == 302
    return client.cookies['csrftoken'].value


class TestDashboardAccess:
    """Anonymous visitors are sent to the login page."""

    @pytest.mark.parametrize('method, url', [
        ('get', '/admin'),
        ('get', '/admin/submission/1'),
        ('delete', '/admin/submission/1'),
        ('post', '/admin/submission/1/status'),
    ])
    def test_requires_login(self, csrf_client, sample_submission, method, url):
        response = getattr(csrf_client, method)(url)

        assert response.status_code == 302
        assert response.url == '/admin/login'

    def test_anonymous_status_update_changes_nothing(self, csrf_client, sample_submission):
        response = csrf_client.post(
            f'/admin/submission/{sample_submission.pk}/status',
            json.dumps({'status': 'closed'}),
            content_type='application/json'
        )

        assert response.status_code == 302
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'new'

    def test_anonymous_delete_keeps_submission(self, csrf_client, sample_submission):
        response = csrf_client.delete(f'/admin/submission/{sample_submission.pk}')

        assert response.status_code == 302
        assert ContactSubmission.objects.filter(pk=sample_submission.pk).exists()


class TestDashboardCsrf:
    """Signed-in mutations need the CSRF token the detail page sends."""

    def test_status_update_with_token(self, csrf_client, admin_user, sample_submission):
        token = login_with_csrf(csrf_client)

        response = csrf_client.post(
            f'/admin/submission/{sample_submission.pk}/status',
            json.dumps({'status': 'contacted'}),
            content_type='application/json',
            HTTP_X_CSRFTOKEN=token
        )

        assert response.status_code == 200
        assert response.json() == {'success': True}
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'contacted'

    def test_status_update_without_token(self, csrf_client, admin_user, sample_submission):
        login_with_csrf(csrf_client)

        response = csrf_client.post(
            f'/admin/submission/{sample_submission.pk}/status',
            json.dumps({'status': 'contacted'}),
            content_type='application/json'
        )

        assert response.status_code == 403
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'new'

    def test_delete_with_token(self, csrf_client, admin_user, sample_submission):
        token = login_with_csrf(csrf_client)

        response = csrf_client.delete(f'/admin/submission/{sample_submission.pk}', HTTP_X_CSRFTOKEN=token)

        assert response.status_code == 200
        assert not ContactSubmission.objects.filter(pk=sample_submission.pk).exists()

    def test_delete_without_token(self, csrf_client, admin_user, sample_submission):
        login_with_csrf(csrf_client)

        response = csrf_client.delete(f'/admin/submission/{sample_submission.pk}')

        assert response.status_code == 403
        assert ContactSubmission.objects.filter(pk=sample_submission.pk).exists()

    def test_detail_page_sets_token(self, csrf_client, admin_user, sample_submission):
        login_with_csrf(csrf_client)

        response = csrf_client.get(f'/admin/submission/{sample_submission.pk}')

        assert response.status_code == 200
        assert b'csrfmiddlewaretoken' in response.content


class TestDashboardList:
    """Test the submissions table."""

    def test_lists_newest_first(self, admin_client):
        first = make_submission('Ama')
        second = make_submission('Kofi')
        third = make_submission('Esi')

        response = admin_client.get('/admin')

        assert response.status_code == 200
        assert [s.pk for s in response.context['submissions']] == [third.pk, second.pk, first.pk]
        assert response.context['username'] == 'owner'
        assert b'Kofi' in response.content

    def test_empty_list(self, admin_client):
        response = admin_client.get('/admin')

        assert response.status_code == 200
        assert response.context['submissions'] == []

    def test_escapes_submitted_values(self, admin_client):
        make_submission('Mallory', company='<script>alert(1)</script>')

        response = admin_client.get('/admin')

        assert b'<script>alert(1)</script>' not in response.content
        assert b'&lt;script&gt;' in response.content

    def test_load_failure(self, admin_client):
        with patch.object(SubmissionDashboardService, 'list_submissions', side_effect=DatabaseError('down')):
            response = admin_client.get('/admin')

        assert response.status_code == 200
        assert response.context['submissions'] == []
        assert response.context['error'] == 'Failed to load submissions'


class TestSubmissionDetail:
    """Test the submission detail page."""

    def test_shows_submission_and_logs(self, admin_client, sample_submission):
        older = NotificationLog.record(sample_submission, 'email', 'sent', 'Email notification sent successfully (<1@x>)')
        newer = NotificationLog.record(sample_submission, 'whatsapp', 'failed', 'Skipped: WhatsApp not configured')

        response = admin_client.get(f'/admin/submission/{sample_submission.pk}')

        assert response.status_code == 200
        assert response.context['submission'] == sample_submission
        assert [log.pk for log in response.context['logs']] == [newer.pk, older.pk]
        assert b'Skipped: WhatsApp not configured' in response.content

    def test_only_own_logs(self, admin_client, sample_submission):
        other = make_submission('Ama')
        NotificationLog.record(other, 'email', 'sent')

        response = admin_client.get(f'/admin/submission/{sample_submission.pk}')

        assert response.context['logs'] == []

    def test_missing_submission_redirects(self, admin_client):
        response = admin_client.get('/admin/submission/999999')

        assert response.status_code == 302
        assert response.url == '/admin'


class TestStatusUpdate:
    """Test changing a submission's status label."""

    def post_status(self, client, submission_id, payload):
        return client.post(
            f'/admin/submission/{submission_id}/status',
            json.dumps(payload),
            content_type='application/json'
        )

    def test_update_status(self, admin_client, sample_submission):
        before = sample_submission.updated_at

        response = self.post_status(admin_client, sample_submission.pk, {'status': 'contacted'})

        assert response.status_code == 200
        assert response.json() == {'success': True}
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'contacted'
        assert sample_submission.updated_at >= before

    def test_any_label_accepted(self, admin_client, sample_submission):
        response = self.post_status(admin_client, sample_submission.pk, {'status': 'waiting on budget'})

        assert response.status_code == 200
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'waiting on budget'

    def test_form_encoded_body(self, admin_client, sample_submission):
        response = admin_client.post(f'/admin/submission/{sample_submission.pk}/status', {'status': 'closed'})

        assert response.status_code == 200
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'closed'

    def test_last_write_wins(self, admin_client, sample_submission):
        self.post_status(admin_client, sample_submission.pk, {'status': 'contacted'})
        self.post_status(admin_client, sample_submission.pk, {'status': 'closed'})

        sample_submission.refresh_from_db()
        assert sample_submission.status == 'closed'

    def test_unknown_submission(self, admin_client):
        response = self.post_status(admin_client, 999999, {'status': 'closed'})

        assert response.status_code == 200
        assert response.json() == {'success': True}

    @pytest.mark.parametrize('payload', [{}, {'status': None}, {'status': 5}])
    def test_status_required(self, admin_client, sample_submission, payload):
        response = self.post_status(admin_client, sample_submission.pk, payload)

        assert response.status_code == 400
        assert response.json() == {'success': False, 'message': 'Status is required'}

    def test_status_too_long(self, admin_client, sample_submission):
        response = self.post_status(admin_client, sample_submission.pk, {'status': 'x' * 51})

        assert response.status_code == 400
        sample_submission.refresh_from_db()
        assert sample_submission.status == 'new'

    def test_get_not_allowed(self, admin_client, sample_submission):
        response = admin_client.get(f'/admin/submission/{sample_submission.pk}/status')

        assert response.status_code == 405

    def test_update_failure(self, admin_client, sample_submission):
        with patch.object(SubmissionDashboardService, 'update_status', side_effect=DatabaseError('down')):
            response = self.post_status(admin_client, sample_submission.pk, {'status': 'closed'})

        assert response.status_code == 500
        assert response.json() == {'success': False, 'message': 'Failed to update status'}


class TestSubmissionDelete:
    """Test deleting a submission."""

    def test_delete_with_logs(self, admin_client, sample_submission):
        for channel in ('email', 'whatsapp', 'email'):
            NotificationLog.record(sample_submission, channel, 'failed', 'Skipped: not configured')

        response = admin_client.delete(f'/admin/submission/{sample_submission.pk}')

        assert response.status_code == 200
        assert response.json() == {'success': True}
        assert not ContactSubmission.objects.filter(pk=sample_submission.pk).exists()
        assert NotificationLog.objects.filter(submission_id=sample_submission.pk).count() == 0

    def test_delete_leaves_other_submissions(self, admin_client, sample_submission):
        other = make_submission('Ama')
        NotificationLog.record(other, 'email', 'sent')

        admin_client.delete(f'/admin/submission/{sample_submission.pk}')

        assert ContactSubmission.objects.filter(pk=other.pk).exists()
        assert NotificationLog.objects.filter(submission=other).count() == 1

    def test_delete_unknown_submission(self, admin_client):
        response = admin_client.delete('/admin/submission/999999')

        assert response.status_code == 200
        assert response.json() == {'success': True}

    def test_delete_failure(self, admin_client, sample_submission):
        with patch.object(SubmissionDashboardService, 'delete_submission', side_effect=DatabaseError('down')):
            response = admin_client.delete(f'/admin/submission/{sample_submission.pk}')

        assert response.status_code == 500
        assert response.json() == {'success': False, 'message': 'Failed to delete submission'}
        assert ContactSubmission.objects.filter(pk=sample_submission.pk).exists()


class TestSubmissionDashboardService:
    """Test the dashboard service directly."""

    def test_update_status_counts(self, sample_submission):
        service = SubmissionDashboardService()

        assert service.update_status(sample_submission.pk, 'closed') == 1
        assert service.update_status(999999, 'closed') == 0

    def test_update_status_touches_updated_at(self, sample_submission):
        ContactSubmission.objects.filter(pk=sample_submission.pk).update(
            updated_at=timezone.now() - timedelta(days=1)
        )
        stale = ContactSubmission.objects.get(pk=sample_submission.pk).updated_at

        SubmissionDashboardService().update_status(sample_submission.pk, 'closed')

        assert ContactSubmission.objects.get(pk=sample_submission.pk).updated_at > stale

    def test_delete_counts(self, sample_submission):
        service = SubmissionDashboardService()

        assert service.delete_submission(sample_submission.pk) == 1
        assert service.delete_submission(sample_submission.pk) == 0

    def test_get_missing(self):
        assert SubmissionDashboardService().get_submission_with_logs(999999) == (None, [])
