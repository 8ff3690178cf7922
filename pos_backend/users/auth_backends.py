"""
PATH: users/auth_backends.py

AUTH BACKEND: email OR username login

- An identifier containing "@" is looked up as an email, anything else as a username.
- Inactive users never authenticate.

Used by Django auth() and by the SimpleJWT token endpoint.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

User = get_user_model()


class EmailOrUsernameBackend(ModelBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        identifier = (username or kwargs.get(User.USERNAME_FIELD) or "").strip()
        if not identifier or password is None:
            return None

        lookup = "email__iexact" if "@" in identifier else "username__iexact"
        user = User.objects.filter(**{lookup: identifier}).first()
        if user is None:
            # keep timing close to a real check
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
