"""
Site-wide error views.
"""
import logging

from django.http import JsonResponse
from django.shortcuts import render

logger = logging.getLogger(__name__)


def page_not_found(request, exception=None):
    return render(request, '404.html', status=404)


def server_error(request):
    """Catch-all for unhandled errors. Details stay in the server log."""
    logger.error(f"Unhandled error on {request.method} {request.path}")
    return JsonResponse(
        {'success': False, 'message': 'Internal server error'},
        status=500
    )
