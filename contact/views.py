"""
Contact Management Views

Public API endpoint for contact form submissions.
"""
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import ContactFormSubmitSerializer, first_error_message
from .tasks import dispatch_notifications

logger = logging.getLogger(__name__)


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact

    No authentication required. Notifications are sent in the background
    after the submission is stored.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        """Submit a contact form."""
        serializer = ContactFormSubmitSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(
                {
                    'success': False,
                    'message': first_error_message(serializer.errors),
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            submission = serializer.save()
        except DatabaseError:
            logger.exception("Contact form error: failed to store submission")
            return Response(
                {
                    'success': False,
                    'message': 'Failed to submit form. Please try again later.',
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        # Fire and forget
        dispatch_notifications(submission.pk)

        return Response(
            {
                'success': True,
                'message': 'Thank you for your message! We will get back to you soon.',
                'submissionId': submission.pk,
            },
            status=status.HTTP_201_CREATED
        )
