"""
Contact Management Serializers

Validation for public contact form submissions.
"""
import re

from rest_framework import serializers
from rest_framework.settings import api_settings

from .models import ContactSubmission

# local@domain.tld with no whitespace and exactly one @
EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')

REQUIRED_FIELDS_MESSAGE = 'Name, email, and message are required'
INVALID_EMAIL_MESSAGE = 'Please provide a valid email address'


class ContactFormSubmitSerializer(serializers.ModelSerializer):
    """
    Public contact form submission serializer.

    Values are stored exactly as submitted; blank checks ignore surrounding
    whitespace.
    """

    name = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
    )

    email = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
    )

    message = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
    )

    phone = serializers.CharField(
        max_length=50,
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
    )

    company = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
    )

    class Meta:
        model = ContactSubmission
        fields = ['name', 'email', 'phone', 'company', 'message']

    def validate(self, attrs):
        """Check required fields first, then the email shape."""
        if not all((attrs.get(field) or '').strip() for field in ('name', 'email', 'message')):
            raise serializers.ValidationError(REQUIRED_FIELDS_MESSAGE)

        if not EMAIL_PATTERN.fullmatch(attrs['email']):
            raise serializers.ValidationError(INVALID_EMAIL_MESSAGE)

        # Empty optional fields are stored as NULL
        attrs['phone'] = attrs.get('phone') or None
        attrs['company'] = attrs.get('company') or None
        return attrs


def first_error_message(errors):
    """Flatten serializer errors into the single message shown to the submitter."""
    non_field = errors.get(api_settings.NON_FIELD_ERRORS_KEY)
    if non_field:
        return str(non_field[0])

    for field, field_errors in errors.items():
        if field_errors:
            return f"{field}: {field_errors[0]}"
    return 'Invalid submission'
