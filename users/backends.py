# users/backends.py
from django.contrib.auth.backends import ModelBackend
from django.contrib.auth import get_user_model
from django.db.models import Q

User = get_user_model()


class EmailBackend(ModelBackend):
    """Authenticates with either the email address or the username."""

    def authenticate(self, request, username=None, password=None, **kwargs):
        login = username or kwargs.get(User.USERNAME_FIELD)
        if not login or password is None:
            return None

        candidates = User.objects.filter(Q(email__iexact=login) | Q(username=login)).order_by('id')
        user = candidates.first()
        if user is None:
            # Run the hasher anyway so missing accounts cost the same time
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
