from unittest import mock

import pytest
from rest_framework import status
from rest_framework.test import APIClient

from hr_portal.notifications.models import Notification
from hr_portal.notifications.models import NotificationSetting
from hr_portal.notifications.models import PushSubscription
from tests.factories import create_user_with_role

ENDPOINT = "https://push.example.com/send/abc"


def _client(user=None):
    client = APIClient()
    if user is not None:
        client.force_authenticate(user=user)
    return client


@pytest.fixture
def employee(db):
    return create_user_with_role("worker").user


@pytest.fixture
def manager(db):
    return create_user_with_role("boss", user_type="manager").user


@pytest.mark.django_db
def test_list_returns_only_own_notifications(employee, manager):
    Notification.objects.create(recipient=employee, title="Mine", message="m")
    Notification.objects.create(recipient=manager, title="Theirs", message="t")
    res = _client(employee).get("/api/v1/notifications/")
    assert res.status_code == status.HTTP_200_OK
    assert [row["title"] for row in res.data] == ["Mine"]


@pytest.mark.django_db
def test_list_is_capped_at_fifty(employee):
    Notification.objects.bulk_create(
        Notification(recipient=employee, title=f"n{i}", message="x") for i in range(55)
    )
    res = _client(employee).get("/api/v1/notifications/")
    assert len(res.data) == 50  # noqa: PLR2004


@pytest.mark.django_db
def test_mark_read_and_mark_all_read(employee):
    first = Notification.objects.create(recipient=employee, title="a", message="a")
    Notification.objects.create(recipient=employee, title="b", message="b")
    client = _client(employee)

    res = client.post(f"/api/v1/notifications/{first.pk}/mark-read/")
    assert res.status_code == status.HTTP_200_OK
    first.refresh_from_db()
    assert first.is_read is True
    assert first.read_at is not None

    res = client.post("/api/v1/notifications/mark-all-read/")
    assert res.data["updated_count"] == 1
    assert not Notification.objects.filter(recipient=employee, is_read=False).exists()


@pytest.mark.django_db
def test_cannot_mark_someone_elses_notification(employee, manager):
    other = Notification.objects.create(recipient=manager, title="x", message="x")
    res = _client(employee).post(f"/api/v1/notifications/{other.pk}/mark-read/")
    assert res.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
@mock.patch("hr_portal.notifications.push.webpush")
def test_broadcast_by_user_type(webpush, employee, manager):
    PushSubscription.objects.create(
        user=employee, endpoint=ENDPOINT, p256dh="key", auth="secret"
    )
    res = _client(manager).post(
        "/api/v1/notifications/",
        {"title": "Town hall", "message": "At 4pm", "user_types": ["employee"]},
        format="json",
    )
    assert res.status_code == status.HTTP_201_CREATED
    assert res.data == {"notifications": 1, "sent": 1, "failed": 0}
    assert Notification.objects.get(recipient=employee).title == "Town hall"
    webpush.assert_called_once()


@pytest.mark.django_db
def test_broadcast_requires_targets(manager):
    res = _client(manager).post(
        "/api/v1/notifications/", {"title": "t", "message": "m"}, format="json"
    )
    assert res.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
def test_broadcast_is_admin_or_manager_only(employee, manager):
    res = _client(employee).post(
        "/api/v1/notifications/",
        {"title": "t", "message": "m", "user_ids": [manager.pk]},
        format="json",
    )
    assert res.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
def test_subscribe_upserts_and_unsubscribe_deletes(employee):
    client = _client(employee)
    payload = {"endpoint": ENDPOINT, "keys": {"p256dh": "k1", "auth": "a1"}}
    res = client.post("/api/v1/notifications/subscribe/", payload, format="json")
    assert res.status_code == status.HTTP_201_CREATED

    payload["keys"]["auth"] = "a2"
    res = client.post("/api/v1/notifications/subscribe/", payload, format="json")
    assert res.status_code == status.HTTP_200_OK
    assert PushSubscription.objects.get(user=employee).auth == "a2"

    res = client.post(
        "/api/v1/notifications/unsubscribe/", {"endpoint": ENDPOINT}, format="json"
    )
    assert res.data == {"deleted": 1}
    assert not PushSubscription.objects.exists()


@pytest.mark.django_db
def test_vapid_key_is_public():
    res = _client().get("/api/v1/notifications/vapid-key/")
    assert res.status_code == status.HTTP_200_OK
    assert res.data == {"public_key": "test-public-key"}


@pytest.mark.django_db
def test_settings_default_then_upsert(manager, employee):
    client = _client(manager)
    res = client.get("/api/v1/notifications/settings/")
    assert res.data["morning_time"] == "09:00"
    assert res.data["evening_time"] == "18:00"

    res = client.post(
        "/api/v1/notifications/settings/",
        {
            "morning_enabled": True,
            "morning_time": "08:30",
            "morning_message": "Good morning",
            "morning_user_types": ["employee"],
            "evening_enabled": False,
            "evening_time": "17:45",
            "evening_message": "Bye",
            "evening_user_types": ["employee"],
        },
        format="json",
    )
    assert res.status_code == status.HTTP_200_OK
    setting = NotificationSetting.objects.get(admin=manager)
    assert setting.morning_time.strftime("%H:%M") == "08:30"
    assert setting.evening_enabled is False

    denied = _client(employee).post(
        "/api/v1/notifications/settings/", {"morning_time": "07:00"}, format="json"
    )
    assert denied.status_code == status.HTTP_403_FORBIDDEN
