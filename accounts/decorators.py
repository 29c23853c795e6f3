"""
Authorization Decorators

Session gate for the admin dashboard views.
"""
from functools import wraps

from django.shortcuts import redirect
from django.views.decorators.csrf import csrf_exempt, csrf_protect

from .session import AdminSession


def admin_login_required(view_func):
    """
    Redirect anonymous visitors to the login page.

    The session is checked before the CSRF token, so anonymous POST and
    DELETE requests are redirected rather than rejected with 403.
    Authenticated requests get CSRF protection and the session wrapper as
    ``request.admin_session``.

    Usage:
        @admin_login_required
        def dashboard(request):
            ...
    """
    protected_view = csrf_protect(view_func)

    @csrf_exempt
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        session = AdminSession.for_request(request)
        if not session.is_authenticated:
            return redirect('accounts:login')

        request.admin_session = session
        return protected_view(request, *args, **kwargs)
    return wrapper
