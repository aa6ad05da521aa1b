from django.contrib.auth.signals import user_logged_in
from django.contrib.auth.signals import user_login_failed
from django.dispatch import receiver

from .utils import client_ip
from .utils import log_action


@receiver(user_logged_in)
def record_login(sender, request, user, **kwargs):
    agent = request.META.get("HTTP_USER_AGENT", "-") if request else "-"
    log_action(
        "login",
        actor=user,
        instance=user,
        message=f"user_type={getattr(user, 'user_type', '')} ua={agent}",
        ip_address=client_ip(request),
    )


@receiver(user_login_failed)
def record_failed_login(sender, credentials, request=None, **kwargs):
    log_action(
        "login_failed",
        message=f"username={credentials.get('username', '')}",
        model_name="User",
        ip_address=client_ip(request),
    )
