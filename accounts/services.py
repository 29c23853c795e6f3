"""
Administrator authentication and one-time setup.
"""
import logging

from django.contrib.auth.hashers import make_password
from django.db import transaction

from .models import AdminUser

logger = logging.getLogger(__name__)


class SetupClosed(Exception):
    """An administrator already exists, so setup is no longer available."""


def authenticate_admin(username, password):
    """
    Return the AdminUser for valid credentials, otherwise None.

    Unknown usernames still hash the password so both failure paths take
    about the same time.
    """
    try:
        admin = AdminUser.objects.get(username=username)
    except AdminUser.DoesNotExist:
        make_password(password)
        return None

    if not admin.check_password(password):
        return None
    return admin


def is_setup_open():
    return AdminUser.objects.count() == 0


def create_first_admin(username, password, email=None):
    """
    Create the first administrator while none exist.

    The count check and the insert are separate statements: two concurrent
    setup requests can both pass the check. Only the unique username stops an
    identical second account.

    Raises:
        SetupClosed: an administrator already exists.
    """
    if not is_setup_open():
        raise SetupClosed()

    admin = AdminUser(username=username, email=email or None)
    admin.set_password(password)
    with transaction.atomic():
        admin.save()

    logger.info(f"Created first admin user '{username}'")
    return admin
