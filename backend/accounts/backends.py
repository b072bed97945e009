"""
Custom authentication backend for e-mail login.

Users authenticate with their e-mail address (case-insensitive) and
password.  Registered in ``settings.AUTHENTICATION_BACKENDS`` so that
Django's ``authenticate(email=..., password=...)`` dispatches to it.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

User = get_user_model()


class EmailAuthBackend(ModelBackend):
    """
    Authenticate against ``User.email``.

    Also accepts Django's standard ``username`` keyword (which carries the
    e-mail for this user model) so the admin site login keeps working.
    """

    def authenticate(self, request, email=None, password=None, username=None, **kwargs):
        """
        Resolve the user by *email* and verify *password*.

        Returns
        -------
        User | None
            The authenticated user, or ``None`` on failure.
        """
        email = email or username
        if email is None or password is None:
            return None

        try:
            user = User.objects.get(email__iexact=email.strip())
        except User.DoesNotExist:
            # Run the default password hasher to mitigate timing attacks
            User().set_password(password)
            return None
        except User.MultipleObjectsReturned:
            # Should not happen given the unique constraint, but guard anyway
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
