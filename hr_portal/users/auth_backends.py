from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class UsernameOrEmailBackend(ModelBackend):
    """Authenticate with either the email address or the username.

    Sign-in forms on the portal only ask for an email, while admin and
    service accounts keep using usernames.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        usermodel = get_user_model()
        if username is None:
            username = kwargs.get(usermodel.USERNAME_FIELD) or kwargs.get("email")
        if not username or password is None:
            return None
        try:
            user = usermodel.objects.get(email__iexact=username)
        except usermodel.DoesNotExist:
            try:
                user = usermodel.objects.get(username__iexact=username)
            except usermodel.DoesNotExist:
                return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user

        return None
