import datetime as dt
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework import status
from rest_framework.test import APIClient

from hr_portal.audit.models import AuditLog
from hr_portal.interns.models import Intern
from hr_portal.interns.models import InternWorkLog
from tests.factories import create_user_with_role
from tests.factories import png_upload

INTERNS_URL = "/api/v1/interns/"


@pytest.fixture
def people(db):
    return {
        "manager": create_user_with_role("manager", user_type="manager"),
        "lead": create_user_with_role("lead", user_type="team-lead"),
        "employee": create_user_with_role("staffer"),
        "intern": create_user_with_role(
            "trainee", user_type="intern", with_employee=False
        ),
    }


def _client(ctx):
    client = APIClient()
    client.force_authenticate(user=ctx.user)
    return client


def _pdf(name):
    return SimpleUploadedFile(name, b"%PDF-1.4 test", content_type="application/pdf")


def _registration(email="trainee@example.com", **overrides):
    payload = {
        "name": "Trainee",
        "email": email,
        "phoneNumber": "9876543210",
        "college": "City College",
        "yearOrPassedOut": "2025",
        "department": "Engineering",
        "domainInOffice": "Backend",
        "paidOrUnpaid": "Paid",
        "mentorName": "Lead",
        "aadhar": _pdf("aadhar.pdf"),
        "photo": png_upload("photo.png"),
        "marksheet": _pdf("marksheet.pdf"),
    }
    payload.update(overrides)
    return payload


def _register(client, **kwargs):
    return client.post(INTERNS_URL, _registration(**kwargs), format="multipart")


def test_manager_registers_intern_with_documents(people):
    response = _register(_client(people["manager"]))
    assert response.status_code == status.HTTP_201_CREATED, response.data
    intern = Intern.objects.get(email="trainee@example.com")
    assert intern.phone_number == "9876543210"
    assert intern.domain_in_office == "Backend"
    assert intern.paid_or_unpaid == Intern.Compensation.PAID
    assert intern.photo.name.startswith("intern_documents/trainee@example.com/")
    assert AuditLog.objects.filter(action="intern_created").exists()


def test_registration_requires_documents(people):
    payload = _registration()
    del payload["aadhar"]
    del payload["marksheet"]
    response = _client(people["manager"]).post(
        INTERNS_URL, payload, format="multipart"
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert set(response.data) == {"aadhar", "marksheet"}


def test_duplicate_email_conflicts(people):
    client = _client(people["manager"])
    assert _register(client).status_code == status.HTTP_201_CREATED
    response = _register(client, email="TRAINEE@example.com")
    assert response.status_code == status.HTTP_409_CONFLICT


def test_only_elevated_users_register(people):
    response = _register(_client(people["lead"]))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_scoping_and_status_filter(people):
    manager = _client(people["manager"])
    _register(manager)
    _register(manager, email="second@example.com")
    Intern.objects.filter(email="second@example.com").update(
        status=Intern.Status.COMPLETED
    )

    everyone = manager.get(INTERNS_URL, {"status": "all"})
    assert everyone.data["pagination"]["total"] == 2
    completed = manager.get(INTERNS_URL, {"status": "Completed"})
    assert [row["email"] for row in completed.data["results"]] == [
        "second@example.com"
    ]

    own = _client(people["intern"]).get(INTERNS_URL)
    assert [row["email"] for row in own.data["results"]] == ["trainee@example.com"]

    assert _client(people["employee"]).get(INTERNS_URL).data["results"] == []


def test_status_change(people):
    manager = _client(people["manager"])
    pk = _register(manager).data["id"]
    response = manager.patch(
        f"{INTERNS_URL}{pk}/status/", {"status": "Completed"}, format="json"
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.data["status"] == Intern.Status.COMPLETED

    response = manager.patch(
        f"{INTERNS_URL}{pk}/status/", {"status": "Paused"}, format="json"
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_rejects_taken_email(people):
    manager = _client(people["manager"])
    _register(manager)
    pk = _register(manager, email="second@example.com").data["id"]
    response = manager.patch(
        f"{INTERNS_URL}{pk}/", {"email": "trainee@example.com"}, format="json"
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_profile_by_email(people):
    _register(_client(people["manager"]))
    url = f"{INTERNS_URL}profile/"

    own = _client(people["intern"]).get(url, {"email": "trainee@example.com"})
    assert own.status_code == status.HTTP_200_OK
    assert own.data["name"] == "Trainee"

    lead = _client(people["lead"]).get(url, {"email": "trainee@example.com"})
    assert lead.status_code == status.HTTP_200_OK

    other = _client(people["employee"]).get(url, {"email": "trainee@example.com"})
    assert other.status_code == status.HTTP_403_FORBIDDEN

    missing = _client(people["manager"]).get(url, {"email": "ghost@example.com"})
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_intern_records_work_log(people):
    pk = _register(_client(people["manager"])).data["id"]
    client = _client(people["intern"])
    url = f"{INTERNS_URL}{pk}/worklog/"

    first = client.post(
        url,
        {"checkInTime": "2026-03-10T09:00:00+05:30", "workType": "Training"},
        format="json",
    )
    assert first.status_code == status.HTTP_201_CREATED, first.data
    assert first.data["date"] == "2026-03-10"

    second = client.post(
        url,
        {
            "checkInTime": "2026-03-10T09:45:00+05:30",
            "checkOutTime": "2026-03-10T19:30:00+05:30",
            "workDescription": "Wrote tests",
        },
        format="json",
    )
    assert second.status_code == status.HTTP_200_OK
    assert Decimal(second.data["total_hours"]) == Decimal("10.50")
    assert Decimal(second.data["overtime_hours"]) == Decimal("2.50")
    assert second.data["work_type"] == "Training"
    assert InternWorkLog.objects.count() == 1

    by_day = client.get(url, {"date": "2026-03-10"})
    assert by_day.data["description"] == "Wrote tests"
    assert client.get(url, {"date": "2026-03-11"}).data is None
    assert client.get(url, {"date": "10/03/2026"}).status_code == 400
    assert len(client.get(url).data["work_logs"]) == 1


def test_work_log_requires_check_in(people):
    pk = _register(_client(people["manager"])).data["id"]
    response = _client(people["intern"]).post(
        f"{INTERNS_URL}{pk}/worklog/", {"workType": "Training"}, format="json"
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_work_log_rejects_check_out_before_check_in(people):
    pk = _register(_client(people["manager"])).data["id"]
    client = _client(people["intern"])
    url = f"{INTERNS_URL}{pk}/worklog/"
    client.post(
        url,
        {
            "checkInTime": "2026-03-10T09:00:00+05:30",
            "checkOutTime": "2026-03-10T18:00:00+05:30",
        },
        format="json",
    )

    backwards = client.post(
        url,
        {
            "checkInTime": "2026-03-10T09:00:00+05:30",
            "checkOutTime": "2026-03-10T08:30:00+05:30",
        },
        format="json",
    )
    assert backwards.status_code == status.HTTP_400_BAD_REQUEST
    assert "check_out" in backwards.data

    # Later than the posted check-in but earlier than the stored one.
    stale = client.post(
        url,
        {
            "checkInTime": "2026-03-10T06:00:00+05:30",
            "checkOutTime": "2026-03-10T07:00:00+05:30",
        },
        format="json",
    )
    assert stale.status_code == status.HTTP_400_BAD_REQUEST

    log = InternWorkLog.objects.get()
    assert log.total_hours == Decimal("9.00")
    assert log.check_out == dt.datetime.fromisoformat("2026-03-10T18:00:00+05:30")
