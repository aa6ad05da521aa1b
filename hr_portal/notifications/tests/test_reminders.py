import datetime as dt
from unittest import mock
from zoneinfo import ZoneInfo

import pytest
from pywebpush import WebPushException
from rest_framework import status
from rest_framework.test import APIClient

from hr_portal.notifications.models import Notification
from hr_portal.notifications.models import NotificationSetting
from hr_portal.notifications.models import PushSubscription
from hr_portal.notifications.reminders import EVENING_TITLE
from hr_portal.notifications.reminders import MORNING_TITLE
from hr_portal.notifications.reminders import send_scheduled_reminders
from hr_portal.notifications.tasks import send_scheduled_reminders as reminder_task
from tests.factories import create_user_with_role

IST = ZoneInfo("Asia/Kolkata")


@pytest.fixture
def setup(db):
    admin = create_user_with_role("admin", user_type="admin", is_staff=True).user
    worker = create_user_with_role("worker").user
    intern = create_user_with_role("trainee", user_type="intern").user
    NotificationSetting.objects.create(
        admin=admin,
        morning_time=dt.time(9, 0),
        morning_user_types=["employee"],
        evening_time=dt.time(18, 0),
        evening_user_types=["employee", "intern"],
    )
    PushSubscription.objects.create(
        user=worker, endpoint="https://push.example.com/w", p256dh="k", auth="a"
    )
    return {"worker": worker, "intern": intern}


def _gone(status_code):
    response = mock.Mock(status_code=status_code)
    return WebPushException("push failed", response=response)


@pytest.mark.django_db
@mock.patch("hr_portal.notifications.push.webpush")
def test_morning_reminder_matches_portal_time(webpush, setup):
    result = send_scheduled_reminders(dt.datetime(2026, 3, 9, 9, 0, tzinfo=IST))
    assert result == {"sent": 1, "failed": 0, "notifications": 1}
    note = Notification.objects.get(recipient=setup["worker"])
    assert note.title == MORNING_TITLE
    assert note.message == "Time to check in!"
    assert note.notification_type == Notification.Type.REMINDER


@pytest.mark.django_db
@mock.patch("hr_portal.notifications.push.webpush")
def test_utc_input_is_converted(webpush, setup):
    # 12:30 UTC is 18:00 in Asia/Kolkata.
    now = dt.datetime(2026, 3, 9, 12, 30, tzinfo=dt.UTC)
    result = send_scheduled_reminders(now)
    assert result["notifications"] == 2  # noqa: PLR2004
    assert set(Notification.objects.values_list("title", flat=True)) == {
        EVENING_TITLE
    }


@pytest.mark.django_db
@mock.patch("hr_portal.notifications.push.webpush")
def test_nothing_due(webpush, setup):
    result = send_scheduled_reminders(dt.datetime(2026, 3, 9, 11, 17, tzinfo=IST))
    assert result == {"sent": 0, "failed": 0, "notifications": 0}
    webpush.assert_not_called()


@pytest.mark.django_db
@mock.patch("hr_portal.notifications.push.webpush")
def test_expired_subscription_is_removed(webpush, setup):
    webpush.side_effect = _gone(410)
    result = send_scheduled_reminders(dt.datetime(2026, 3, 9, 9, 0, tzinfo=IST))
    assert result["failed"] == 1
    assert not PushSubscription.objects.exists()


@pytest.mark.django_db
@mock.patch("hr_portal.notifications.push.webpush")
def test_other_push_failures_keep_subscription(webpush, setup):
    webpush.side_effect = _gone(500)
    result = send_scheduled_reminders(dt.datetime(2026, 3, 9, 9, 0, tzinfo=IST))
    assert result["failed"] == 1
    assert PushSubscription.objects.count() == 1


@pytest.mark.django_db
@mock.patch("hr_portal.notifications.tasks.sweep")
def test_celery_task_runs_sweep(sweep):
    sweep.return_value = {"sent": 0, "failed": 0, "notifications": 0}
    assert reminder_task.apply().get() == sweep.return_value


@pytest.mark.django_db
@mock.patch("hr_portal.notifications.api.views.send_scheduled_reminders")
def test_cron_endpoint_requires_secret(sweep):
    sweep.return_value = {"sent": 0, "failed": 0, "notifications": 0}
    client = APIClient()
    assert client.get("/cron/send-notifications/").status_code == (
        status.HTTP_401_UNAUTHORIZED
    )
    wrong = client.post(
        "/cron/send-notifications/", HTTP_AUTHORIZATION="Bearer nope"
    )
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED
    ok = client.post(
        "/cron/send-notifications/", HTTP_AUTHORIZATION="Bearer test-cron-secret"
    )
    assert ok.status_code == status.HTTP_200_OK
    assert ok.data == sweep.return_value
    sweep.assert_called_once_with()
