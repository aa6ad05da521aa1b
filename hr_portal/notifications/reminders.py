from __future__ import annotations

import datetime as dt
import logging

from django.contrib.auth import get_user_model
from django.utils import timezone

from hr_portal.notifications.models import Notification
from hr_portal.notifications.models import NotificationSetting
from hr_portal.notifications.push import push_to_users
from hr_portal.policies.accessors import portal_time_zone

logger = logging.getLogger(__name__)

MORNING_TITLE = "Morning Check-in Reminder"
EVENING_TITLE = "Evening Check-out Reminder"


def _due_slots(setting: NotificationSetting, hhmm: str):
    if setting.morning_enabled and setting.morning_time.strftime("%H:%M") == hhmm:
        yield MORNING_TITLE, setting.morning_message, setting.morning_user_types
    if setting.evening_enabled and setting.evening_time.strftime("%H:%M") == hhmm:
        yield EVENING_TITLE, setting.evening_message, setting.evening_user_types


def send_scheduled_reminders(now: dt.datetime | None = None) -> dict[str, int]:
    """Create and push the reminders whose time matches the current minute."""

    now = (now or timezone.now()).astimezone(portal_time_zone())
    hhmm = now.strftime("%H:%M")
    user_model = get_user_model()
    result = {"sent": 0, "failed": 0, "notifications": 0}
    for setting in NotificationSetting.objects.all():
        for title, message, user_types in _due_slots(setting, hhmm):
            user_ids = list(
                user_model.objects.filter(
                    is_active=True, user_type__in=user_types or []
                ).values_list("id", flat=True)
            )
            for user_id in user_ids:
                Notification.objects.create(
                    recipient_id=user_id,
                    title=title,
                    message=message,
                    notification_type=Notification.Type.REMINDER,
                )
            sent, failed = push_to_users(
                user_ids, {"title": title, "body": message, "type": "reminder"}
            )
            result["notifications"] += len(user_ids)
            result["sent"] += sent
            result["failed"] += failed
            logger.info(
                "Reminder %r at %s: %d users, %d pushed, %d failed",
                title,
                hhmm,
                len(user_ids),
                sent,
                failed,
            )
    return result
