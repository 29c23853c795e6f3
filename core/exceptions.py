"""
API error responses.

Framework-level API errors (malformed JSON, unsupported method) use the same
``{success, message}`` body as the contact endpoint.
"""
from rest_framework.views import exception_handler


def api_exception_handler(exc, context):
    """Reshape DRF error responses; unhandled exceptions fall through to handler500."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    response.data = {
        'success': False,
        'message': str(detail) if detail else 'Invalid request',
    }
    return response
