from unittest import mock

import pytest

from hr_portal.notifications.models import Notification
from hr_portal.realtime.events.approvals import publish_request_status_changed
from hr_portal.realtime.socketio import PortalSession
from hr_portal.realtime.socketio import room_for_role
from hr_portal.realtime.socketio import token_from_handshake
from tests.factories import create_user_with_role


@pytest.mark.parametrize(
    ("environ", "auth", "expected"),
    [
        ({"asgi.scope": {"query_string": b"token=abc&EIO=4"}}, None, "abc"),
        ({"QUERY_STRING": "token=xyz"}, None, "xyz"),
        (
            {"asgi.scope": {"query_string": b"EIO=4"}},
            {"token": "from-auth"},
            "from-auth",
        ),
        ({"asgi.scope": {"query_string": b""}}, {"token": ""}, None),
        ({}, None, None),
    ],
)
def test_token_from_handshake(environ, auth, expected):
    assert token_from_handshake(environ, auth) == expected


def test_session_rooms():
    session = PortalSession(user_id=7, user_type="team-lead", employee_id=3, unread=0)
    assert session.rooms() == ["user_7", "role_team-lead", "employee_3"]
    assert room_for_role(" Team Lead ") == "role_team_lead"

    unlinked = PortalSession(user_id=8, user_type="intern", employee_id=None, unread=2)
    assert unlinked.rooms() == ["user_8", "role_intern"]


@pytest.mark.django_db
def test_new_notification_is_pushed_after_commit(django_capture_on_commit_callbacks):
    ctx = create_user_with_role("member")
    target = "hr_portal.realtime.events.notifications.emit_event_to_user"
    with mock.patch(target) as emit:
        with django_capture_on_commit_callbacks(execute=True):
            notification = Notification.objects.create(
                recipient=ctx.user,
                title="Leave Approved",
                message="Your leave was approved.",
                notification_type=Notification.Type.LEAVE_UPDATE,
            )
    emit.assert_called_once()
    user_id, event, payload = emit.call_args.args
    assert (user_id, event) == (ctx.user.pk, "notification")
    assert payload["id"] == notification.pk
    assert payload["type"] == Notification.Type.LEAVE_UPDATE


def test_status_publisher_swallows_emit_errors():
    module = "hr_portal.realtime.events.approvals"
    with (
        mock.patch(f"{module}.emit_event_to_employee", side_effect=RuntimeError),
        mock.patch(f"{module}.logger") as logger,
    ):
        publish_request_status_changed(
            kind="leave", request_id=1, employee_id=2, status="Approved"
        )
    logger.exception.assert_called_once()
