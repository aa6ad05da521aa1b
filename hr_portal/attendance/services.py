"""Monthly summaries, work logs and the daily attendance board."""

from __future__ import annotations

import datetime as dt
import logging
from decimal import ROUND_HALF_UP
from decimal import Decimal
from typing import TYPE_CHECKING

from django.db import transaction
from django.db.models import F

from hr_portal.attendance.models import DailyWorkLog
from hr_portal.attendance.models import MonthlyAttendance
from hr_portal.attendance.models import MonthlySetting
from hr_portal.employees.models import Employee
from hr_portal.leaves.models import LeaveRequest
from hr_portal.leaves.models import PermissionRequest
from hr_portal.policies.accessors import default_month_total_days
from hr_portal.policies.accessors import late_after
from hr_portal.policies.accessors import portal_time_zone
from hr_portal.policies.accessors import worklog_month_total_days

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")

PRESENT = "Present"
ABSENT = "Absent"
LATE = "Late"
MISSED = "Missed"
LEAVE = "Leave"
PERMISSION = "Permission"


def hours_between(start: dt.datetime, end: dt.datetime) -> Decimal:
    """Elapsed hours, rounded to two decimals."""

    seconds = Decimal(str((end - start).total_seconds()))
    return (seconds / Decimal(3600)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def month_total_days(month: int, year: int) -> int:
    setting = MonthlySetting.objects.filter(month=month, year=year).first()
    if setting is None:
        return default_month_total_days()
    return setting.total_days


def ensure_month_summary(
    employee: Employee, month: int, year: int
) -> MonthlyAttendance:
    summary, _ = MonthlyAttendance.objects.get_or_create(
        employee=employee,
        month=month,
        year=year,
        defaults={"total_days": month_total_days(month, year)},
    )
    return summary


@transaction.atomic
def upsert_monthly_setting(
    month: int, year: int, total_days: int
) -> tuple[MonthlySetting, int]:
    """Store the month's total days and apply it to that month's summaries.

    Returns the setting and the number of summaries updated.
    """

    setting, _ = MonthlySetting.objects.update_or_create(
        month=month, year=year, defaults={"total_days": total_days}
    )
    updated = MonthlyAttendance.objects.filter(month=month, year=year).update(
        total_days=total_days
    )
    logger.info(
        "Monthly setting %02d/%s set to %s days (%s summaries updated)",
        month,
        year,
        total_days,
        updated,
    )
    return setting, updated


@transaction.atomic
def record_work_log(
    employee: Employee,
    *,
    check_in: dt.datetime,
    check_out: dt.datetime,
    work_type: str,
    description: str,
) -> tuple[DailyWorkLog, bool]:
    """Upsert the day's log; the first log of a day counts a working day."""

    local_in = check_in.astimezone(portal_time_zone())
    local_out = check_out.astimezone(portal_time_zone())
    day = local_in.date()
    log, created = DailyWorkLog.objects.update_or_create(
        employee=employee,
        date=day,
        defaults={
            "check_in": local_in.time().replace(microsecond=0),
            "check_out": local_out.time().replace(microsecond=0),
            "hours": hours_between(check_in, check_out),
            "project": work_type,
            "status": DailyWorkLog.Status.PRESENT,
            "description": description,
        },
    )
    if created:
        summary = MonthlyAttendance.objects.filter(
            employee=employee, month=day.month, year=day.year
        )
        if not summary.update(working_days=F("working_days") + 1):
            MonthlyAttendance.objects.create(
                employee=employee,
                month=day.month,
                year=day.year,
                total_days=worklog_month_total_days(),
                working_days=1,
            )
    return log, created


def resolve_day_status(
    log: DailyWorkLog | None,
    *,
    on_leave: bool = False,
    on_permission: bool = False,
) -> str:
    if on_permission:
        return PERMISSION
    if on_leave:
        return LEAVE
    if log is None or log.check_in is None:
        return ABSENT
    if log.check_out is None:
        return MISSED
    if log.check_in > late_after():
        return LATE
    return PRESENT


def _permission_employee_ids(day: dt.date) -> set[int]:
    return set(
        PermissionRequest.objects.filter(
            date=day,
            status__in=[
                PermissionRequest.Status.APPROVED,
                PermissionRequest.Status.PENDING_MANAGER,
            ],
        ).values_list("employee_id", flat=True)
    )


def _leave_employee_ids(day: dt.date) -> set[int]:
    return set(
        LeaveRequest.objects.filter(start_date__lte=day, end_date__gte=day)
        .exclude(status=LeaveRequest.Status.REJECTED)
        .values_list("employee_id", flat=True)
    )


def _record(employee: Employee, log: DailyWorkLog | None, status: str) -> dict:
    return {
        "id": employee.pk,
        "employee_id": employee.employee_id,
        "name": employee.name,
        "designation": employee.designation,
        "work_mode": employee.work_mode,
        "attendance_status": status,
        "check_in": log.check_in.strftime("%H:%M") if log and log.check_in else None,
        "check_out": log.check_out.strftime("%H:%M")
        if log and log.check_out
        else None,
        "total_hours": float(log.hours) if log else 0,
        "project": log.project if log else "",
        "description": log.description if log else "",
    }


def summarize(records: Iterable[dict]) -> dict[str, int]:
    counts = {
        "total": 0,
        "present": 0,
        "absent": 0,
        "late": 0,
        "missed": 0,
        "leave": 0,
        "permission": 0,
    }
    for row in records:
        counts["total"] += 1
        counts[row["attendance_status"].lower()] += 1
    return counts


def build_daily_report(
    day: dt.date,
    *,
    search: str = "",
    work_mode: str | None = None,
    attendance_status: str | None = None,
) -> dict:
    """Board of every active employee's attendance for ``day``."""

    employees = Employee.objects.filter(is_active=True).order_by("name")
    logs = {
        log.employee_id: log for log in DailyWorkLog.objects.filter(date=day)
    }
    on_permission = _permission_employee_ids(day)
    on_leave = _leave_employee_ids(day)

    records = []
    for employee in employees:
        log = logs.get(employee.pk)
        status = resolve_day_status(
            log,
            on_leave=employee.pk in on_leave,
            on_permission=employee.pk in on_permission,
        )
        records.append(_record(employee, log, status))

    search = (search or "").strip().lower()
    if search:
        records = [
            r
            for r in records
            if search in r["name"].lower()
            or search in r["employee_id"].lower()
            or search in (r["designation"] or "").lower()
        ]
    if work_mode and work_mode.lower() != "all":
        records = [r for r in records if r["work_mode"] == work_mode]
    if attendance_status and attendance_status.lower() != "all":
        wanted = attendance_status.lower()
        records = [r for r in records if r["attendance_status"].lower() == wanted]

    return {"date": day.isoformat(), "records": records, "summary": summarize(records)}


def summaries_by_employee(
    employee_ids: Iterable[int], month: int, year: int
) -> dict[int, MonthlyAttendance]:
    rows = MonthlyAttendance.objects.filter(
        employee_id__in=list(employee_ids), month=month, year=year
    )
    return {row.employee_id: row for row in rows}
