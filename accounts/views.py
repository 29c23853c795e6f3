"""
Admin authentication views: login, logout and first-run setup.
"""
import logging

from django.db import DatabaseError
from django.shortcuts import redirect, render
from django.views import View

from .forms import AdminLoginForm, AdminSetupForm
from .services import SetupClosed, authenticate_admin, create_first_admin, is_setup_open
from .session import AdminSession

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid username or password'


class AdminLoginView(View):
    """
    GET  /admin/login - show the login form
    POST /admin/login - check credentials and start a session
    """

    template_name = 'accounts/login.html'

    def get(self, request):
        if AdminSession.for_request(request).is_authenticated:
            return redirect('dashboards:index')
        return render(request, self.template_name, {'error': None})

    def post(self, request):
        form = AdminLoginForm(request.POST)
        admin = None

        try:
            if form.has_credentials():
                admin = authenticate_admin(form.cleaned_data['username'], form.cleaned_data['password'])
        except DatabaseError:
            logger.exception("Login error")
            return render(request, self.template_name, {'error': 'An error occurred. Please try again.'})

        if admin is None:
            return render(request, self.template_name, {'error': INVALID_CREDENTIALS})

        AdminSession.for_request(request).login(admin)
        logger.info(f"Admin '{admin.username}' logged in")
        return redirect('dashboards:index')


def admin_logout(request):
    """GET /admin/logout - end the session."""
    AdminSession.for_request(request).logout()
    return redirect('accounts:login')


class AdminSetupView(View):
    """
    GET  /admin/setup - first-run form, only while no admin exists
    POST /admin/setup - create the first admin
    """

    template_name = 'accounts/setup.html'

    def get(self, request):
        try:
            if not is_setup_open():
                return redirect('accounts:login')
        except DatabaseError:
            logger.exception("Setup check failed")
            return render(request, self.template_name, {'error': 'Database not ready. Please try again.'})

        return render(request, self.template_name, {'error': None})

    def post(self, request):
        form = AdminSetupForm(request.POST)

        try:
            if not is_setup_open():
                return redirect('accounts:login')

            if not form.is_valid():
                return render(request, self.template_name, {'error': form.first_error()})

            create_first_admin(
                form.cleaned_data['username'],
                form.cleaned_data['password'],
                form.cleaned_data.get('email'),
            )
        except SetupClosed:
            return redirect('accounts:login')
        except DatabaseError:
            logger.exception("Setup error")
            return render(request, self.template_name, {'error': 'Failed to create admin user'})

        return redirect('accounts:login')
