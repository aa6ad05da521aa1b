import datetime as dt
from decimal import Decimal

import pytest
from rest_framework import status
from rest_framework.test import APIClient

from hr_portal.notifications.models import Notification
from hr_portal.overtime.models import OvertimeRequest
from hr_portal.overtime.services import BULK_REJECT_REMARKS
from tests.factories import add_to_team
from tests.factories import create_user_with_role
from tests.factories import png_upload

OT_DATE = dt.date(2026, 3, 10)


@pytest.fixture
def team(db):
    manager = create_user_with_role("manager", user_type="manager")
    lead = create_user_with_role(
        "lead", user_type="team-lead", manager=manager.employee
    )
    member = create_user_with_role("member", manager=manager.employee)
    add_to_team(lead.employee, member.employee)
    return {"manager": manager, "lead": lead, "member": member}


def _client(ctx):
    client = APIClient()
    client.force_authenticate(user=ctx.user)
    return client


def _start(client, start="18:00"):
    return client.post(
        "/api/v1/overtime/start/",
        {"ot_date": OT_DATE.isoformat(), "start_time": start},
        format="json",
    )


def _document(client, pk):
    return client.post(
        f"/api/v1/overtime/{pk}/submit-work/",
        {
            "work_type": "Release",
            "work_description": "Deployed 2.4",
            "image1": png_upload("before.png"),
            "image2": png_upload("after.png"),
        },
        format="multipart",
    )


def _completed_session(team, start="18:00", end="21:30"):
    client = _client(team["member"])
    pk = _start(client, start).data["id"]
    _document(client, pk)
    client.post(f"/api/v1/overtime/{pk}/end/", {"end_time": end}, format="json")
    return OvertimeRequest.objects.get(pk=pk)


@pytest.mark.django_db
def test_start_resumes_active_session(team):
    client = _client(team["member"])
    first = _start(client)
    assert first.status_code == status.HTTP_201_CREATED
    assert first.data["resumed"] is False

    again = _start(client, "19:00")
    assert again.status_code == status.HTTP_200_OK
    assert again.data["resumed"] is True
    assert again.data["id"] == first.data["id"]
    assert OvertimeRequest.objects.count() == 1


@pytest.mark.django_db
def test_cannot_end_before_work_is_documented(team):
    client = _client(team["member"])
    pk = _start(client).data["id"]
    res = client.post(f"/api/v1/overtime/{pk}/end/", {"end_time": "20:00"})
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert OvertimeRequest.objects.get(pk=pk).is_active is True


@pytest.mark.django_db
def test_full_session_computes_hours(team):
    session = _completed_session(team)
    assert session.is_active is False
    assert session.total_hours == Decimal("3.50")
    assert session.reason == "Release: Deployed 2.4"
    assert session.image1
    assert session.image2


@pytest.mark.django_db
def test_session_crossing_midnight(team):
    session = _completed_session(team, start="22:00", end="01:00")
    assert session.total_hours == Decimal("3.00")


@pytest.mark.django_db
def test_upload_size_limit(team, settings):
    settings.OVERTIME_MAX_UPLOAD_BYTES = 10
    client = _client(team["member"])
    pk = _start(client).data["id"]
    res = _document(client, pk)
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert "File too large" in str(res.data)


@pytest.mark.django_db
def test_forward_and_bulk_approve(team):
    session = _completed_session(team)

    forward = _client(team["lead"]).post(
        f"/api/v1/overtime/{session.pk}/team-lead-forward/"
    )
    assert forward.status_code == status.HTTP_200_OK
    assert forward.data["status"] == OvertimeRequest.Status.FORWARDED
    assert Notification.objects.filter(
        recipient=team["manager"].user,
        notification_type=Notification.Type.OVERTIME,
    ).exists()

    res = _client(team["manager"]).post(
        "/api/v1/overtime/bulk-approve/",
        {"ids": [session.pk], "batch_id": "MAR-2026"},
        format="json",
    )
    assert res.status_code == status.HTTP_200_OK
    assert res.data["updated_count"] == 1
    session.refresh_from_db()
    assert session.status == OvertimeRequest.Status.APPROVED
    assert session.batch_id == "MAR-2026"
    assert session.final_approved_by == team["manager"].employee


@pytest.mark.django_db
def test_bulk_reject_skips_unforwarded(team):
    forwarded = _completed_session(team)
    pending = _completed_session(team)
    OvertimeRequest.objects.filter(pk=forwarded.pk).update(
        status=OvertimeRequest.Status.FORWARDED
    )
    res = _client(team["manager"]).post(
        "/api/v1/overtime/bulk-reject/",
        {"ids": [forwarded.pk, pending.pk]},
        format="json",
    )
    assert res.data["updated_count"] == 1
    forwarded.refresh_from_db()
    pending.refresh_from_db()
    assert forwarded.status == OvertimeRequest.Status.REJECTED
    assert forwarded.manager_remarks == BULK_REJECT_REMARKS
    assert pending.status == OvertimeRequest.Status.PENDING


@pytest.mark.django_db
def test_forward_requires_completed_session(team):
    pk = _start(_client(team["member"])).data["id"]
    res = _client(team["lead"]).post(f"/api/v1/overtime/{pk}/team-lead-forward/")
    assert res.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
def test_bulk_actions_are_manager_only(team):
    res = _client(team["lead"]).post(
        "/api/v1/overtime/bulk-approve/", {"ids": [1]}, format="json"
    )
    assert res.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
def test_monthly_summary_counts_approved_only(team):
    approved = _completed_session(team)
    _completed_session(team)
    OvertimeRequest.objects.filter(pk=approved.pk).update(
        status=OvertimeRequest.Status.APPROVED
    )
    res = _client(team["member"]).get(
        "/api/v1/overtime-summary/",
        {
            "employeeId": team["member"].employee.employee_id,
            "month": OT_DATE.month,
            "year": OT_DATE.year,
        },
    )
    assert res.status_code == status.HTTP_200_OK
    assert res.data["total_hours"] == 3.5  # noqa: PLR2004
    assert res.data["records_count"] == 1


@pytest.mark.django_db
def test_settled_session_cannot_be_reopened(team):
    session = _completed_session(team, start="18:00", end="19:00")
    _client(team["lead"]).post(f"/api/v1/overtime/{session.pk}/team-lead-forward/")
    _client(team["manager"]).post(
        "/api/v1/overtime/bulk-approve/", {"ids": [session.pk]}, format="json"
    )

    owner = _client(team["member"])
    end = owner.post(
        f"/api/v1/overtime/{session.pk}/end/", {"end_time": "23:59"}, format="json"
    )
    assert end.status_code == status.HTTP_400_BAD_REQUEST
    assert "current status: approved" in str(end.data["detail"])
    assert _document(owner, session.pk).status_code == status.HTTP_400_BAD_REQUEST

    session.refresh_from_db()
    assert session.status == OvertimeRequest.Status.APPROVED
    assert session.end_time == dt.time(19, 0)
    assert session.total_hours == Decimal("1.00")
    assert session.reason == "Release: Deployed 2.4"


@pytest.mark.django_db
def test_ended_session_cannot_be_ended_again(team):
    session = _completed_session(team)
    res = _client(team["member"]).post(
        f"/api/v1/overtime/{session.pk}/end/", {"end_time": "23:00"}, format="json"
    )
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    session.refresh_from_db()
    assert session.total_hours == Decimal("3.50")
