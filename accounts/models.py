from django.contrib.auth.hashers import check_password, make_password
from django.db import models


class AdminUser(models.Model):
    """
    Dashboard administrator.

    Only the salted password hash is stored. Accounts are created through the
    one-time setup page, which closes once any administrator exists.
    """

    username = models.CharField(
        max_length=100,
        unique=True,
        help_text="Login name"
    )

    password_hash = models.CharField(
        max_length=255,
        help_text="Salted password hash (Django hasher format)"
    )

    email = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Optional contact email"
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the account was created"
    )

    class Meta:
        db_table = 'admin_users'
        ordering = ['created_at']
        verbose_name = 'Admin User'
        verbose_name_plural = 'Admin Users'

    def __str__(self):
        return self.username

    def set_password(self, raw_password):
        self.password_hash = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password_hash)
