"""
Admin session state.

Wraps the request's session backend (``request.session``) so views read and
change the signed-in administrator through one small interface. The backend is
chosen by ``SESSION_ENGINE``; the cookie lifetime by ``SESSION_COOKIE_AGE``.
"""
from django.middleware.csrf import rotate_token


class AdminSession:
    ADMIN_ID_KEY = 'admin_id'
    USERNAME_KEY = 'admin_username'

    def __init__(self, store, request=None):
        self.store = store
        self.request = request

    @classmethod
    def for_request(cls, request):
        return cls(request.session, request)

    @property
    def admin_id(self):
        return self.store.get(self.ADMIN_ID_KEY)

    @property
    def username(self):
        return self.store.get(self.USERNAME_KEY)

    @property
    def is_authenticated(self):
        return self.admin_id is not None

    def login(self, admin):
        # New session key and CSRF token on privilege change
        self.store.cycle_key()
        if self.request is not None:
            rotate_token(self.request)
        self.store[self.ADMIN_ID_KEY] = admin.pk
        self.store[self.USERNAME_KEY] = admin.username

    def logout(self):
        self.store.flush()
