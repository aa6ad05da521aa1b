import datetime as dt

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

DEFAULT_MORNING_TIME = dt.time(9, 0)
DEFAULT_EVENING_TIME = dt.time(18, 0)
DEFAULT_MORNING_MESSAGE = "Time to check in!"
DEFAULT_EVENING_MESSAGE = "Time to check out!"


def default_reminder_user_types():
    return ["employee", "intern", "team-lead"]


class Notification(models.Model):
    class Type(models.TextChoices):
        LEAVE_REQUEST = "leave_request", _("Leave Request")
        LEAVE_UPDATE = "leave_request_update", _("Leave Request Update")
        PERMISSION_REQUEST = "permission_request", _("Permission Request")
        PERMISSION_UPDATE = "permission_request_update", _(
            "Permission Request Update"
        )
        WORK_SUBMISSION = "work_submission", _("Work Submission")
        WORK_REJECTION = "work_rejection", _("Work Rejection")
        FINAL_APPROVAL = "final_approval", _("Final Approval")
        FINAL_REJECTION = "final_rejection", _("Final Rejection")
        OVERTIME = "overtime", _("Overtime")
        REMINDER = "reminder", _("Reminder")
        OTHER = "other", _("Other")

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications"
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    notification_type = models.CharField(
        max_length=50, choices=Type.choices, default=Type.OTHER
    )
    reference_id = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text=_("Primary key of the request this notification is about"),
    )
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.title} - {self.recipient}"


class PushSubscription(models.Model):
    """A browser Web Push endpoint registered by a user."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="push_subscriptions",
    )
    endpoint = models.TextField()
    p256dh = models.CharField(max_length=255)
    auth = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "endpoint"], name="unique_user_push_endpoint"
            ),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"PushSubscription({self.user_id})"

    def as_subscription_info(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }


class NotificationSetting(models.Model):
    """Daily check-in / check-out reminder schedule owned by an admin."""

    admin = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notification_setting",
    )
    morning_enabled = models.BooleanField(default=True)
    morning_time = models.TimeField(default=DEFAULT_MORNING_TIME)
    morning_message = models.CharField(
        max_length=255, default=DEFAULT_MORNING_MESSAGE
    )
    morning_user_types = models.JSONField(default=default_reminder_user_types)
    evening_enabled = models.BooleanField(default=True)
    evening_time = models.TimeField(default=DEFAULT_EVENING_TIME)
    evening_message = models.CharField(
        max_length=255, default=DEFAULT_EVENING_MESSAGE
    )
    evening_user_types = models.JSONField(default=default_reminder_user_types)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):  # pragma: no cover - trivial
        return f"NotificationSetting({self.admin_id})"
