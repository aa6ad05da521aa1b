"""Overtime session lifecycle and manager settlement."""

from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from hr_portal.approvals.workflow import APPROVE
from hr_portal.approvals.workflow import InvalidTransition
from hr_portal.approvals.workflow import NotAuthorizedForStep
from hr_portal.approvals.workflow import StepNotFound
from hr_portal.approvals.workflow import notify
from hr_portal.attendance.services import hours_between
from hr_portal.employees.services import leads_employee
from hr_portal.notifications.models import Notification
from hr_portal.overtime.models import OvertimeRequest
from hr_portal.policies.accessors import overtime_max_upload_bytes

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hr_portal.employees.models import Employee

logger = logging.getLogger(__name__)

BULK_REJECT_REMARKS = "Bulk rejected by manager"


@transaction.atomic
def start_session(
    employee: Employee, *, ot_date: dt.date, start_time: dt.time
) -> tuple[OvertimeRequest, bool]:
    """Start an overtime session, or resume the one already running."""

    active = (
        OvertimeRequest.objects.select_for_update()
        .filter(employee=employee, is_active=True)
        .order_by("-created_at")
        .first()
    )
    if active is not None:
        return active, True
    session = OvertimeRequest.objects.create(
        employee=employee,
        ot_date=ot_date,
        start_time=start_time.replace(microsecond=0),
        reason="OT in progress - work details pending",
    )
    logger.info("Overtime %s started for employee %s", session.pk, employee.pk)
    return session, False


def _check_upload_size(name: str, upload) -> None:
    limit = overtime_max_upload_bytes()
    if upload is not None and upload.size > limit:
        megabytes = limit // (1024 * 1024)
        raise ValidationError(
            {name: f"File too large. Max size is {megabytes}MB."}
        )


def _ensure_open(session: OvertimeRequest) -> None:
    if not session.is_active or session.status != OvertimeRequest.Status.PENDING:
        msg = f"Overtime session is closed (current status: {session.status})"
        raise InvalidTransition(msg)


def submit_work(
    session: OvertimeRequest,
    *,
    work_type: str,
    work_description: str,
    image1=None,
    image2=None,
) -> OvertimeRequest:
    _ensure_open(session)
    _check_upload_size("image1", image1)
    _check_upload_size("image2", image2)
    session.work_type = work_type
    session.work_description = work_description
    session.reason = f"{work_type}: {work_description}"
    if image1 is not None:
        session.image1 = image1
    if image2 is not None:
        session.image2 = image2
    session.save()
    return session


def end_session(session: OvertimeRequest, *, end_time: dt.time) -> OvertimeRequest:
    _ensure_open(session)
    if not (session.image1 and session.image2):
        raise ValidationError(
            {"detail": "Work must be submitted before ending OT"}
        )
    start = dt.datetime.combine(session.ot_date, session.start_time)
    end = dt.datetime.combine(session.ot_date, end_time)
    if end <= start:
        # Session ran past midnight.
        end += dt.timedelta(days=1)
    session.end_time = end_time.replace(microsecond=0)
    session.total_hours = hours_between(start, end)
    session.is_active = False
    session.save(
        update_fields=["end_time", "total_hours", "is_active", "updated_at"]
    )
    logger.info("Overtime %s ended: %sh", session.pk, session.total_hours)
    return session


@transaction.atomic
def forward_to_manager(pk, *, team_lead: Employee | None) -> OvertimeRequest:
    """Team lead sign-off: a completed pending session goes to the managers."""

    try:
        session = OvertimeRequest.objects.select_for_update().get(pk=pk)
    except (OvertimeRequest.DoesNotExist, ValueError, TypeError) as exc:
        raise StepNotFound from exc
    if not leads_employee(team_lead, session.employee):
        msg = "Employee is not in your team"
        raise NotAuthorizedForStep(msg)
    if session.status != OvertimeRequest.Status.PENDING or session.is_active:
        msg = "Only completed pending overtime can be forwarded"
        raise InvalidTransition(msg)
    session.status = OvertimeRequest.Status.FORWARDED
    session.save(update_fields=["status", "updated_at"])
    employee = session.employee
    notify(
        [employee.manager],
        title="Overtime Pending Approval",
        message=(
            f"{employee.name}'s overtime on {session.ot_date} "
            f"({session.total_hours}h) was forwarded by their Team Lead."
        ),
        notification_type=Notification.Type.OVERTIME,
        reference_id=session.pk,
    )
    return session


@transaction.atomic
def settle(
    ids: Iterable[int],
    *,
    action: str,
    manager: Employee | None,
    batch_id: str = "",
    manager_remarks: str = "",
) -> int:
    """Approve or reject forwarded sessions; returns how many were updated."""

    approve = action == APPROVE
    changes = {
        "status": (
            OvertimeRequest.Status.APPROVED
            if approve
            else OvertimeRequest.Status.REJECTED
        ),
        "final_approved_by": manager,
        "final_approved_at": timezone.now(),
        "updated_at": timezone.now(),
    }
    if approve:
        changes["batch_id"] = batch_id or ""
        changes["manager_remarks"] = manager_remarks or ""
    else:
        changes["manager_remarks"] = manager_remarks or BULK_REJECT_REMARKS
    updated = OvertimeRequest.objects.filter(
        pk__in=list(ids), status=OvertimeRequest.Status.FORWARDED
    ).update(**changes)
    logger.info("Overtime bulk %s: %s records", action, updated)
    return updated


def monthly_summary(employee: Employee, month: int, year: int) -> dict:
    records = OvertimeRequest.objects.filter(
        employee=employee,
        status=OvertimeRequest.Status.APPROVED,
        ot_date__month=month,
        ot_date__year=year,
    ).order_by("ot_date")
    total = sum((record.total_hours for record in records), start=0)
    return {
        "total_hours": round(float(total), 2),
        "records_count": len(records),
        "records": records,
    }
