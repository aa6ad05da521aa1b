from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone


def portal_time_zone() -> ZoneInfo:
    """Wall-clock zone used for attendance dates and reminder times."""

    return ZoneInfo(getattr(settings, "PORTAL_TIME_ZONE", "Asia/Kolkata"))


def portal_now() -> dt.datetime:
    return timezone.now().astimezone(portal_time_zone())


def late_after() -> dt.time:
    """Check-ins strictly after this time are reported as Late (default 09:00)."""

    raw = getattr(settings, "ATTENDANCE_LATE_AFTER", "09:00")
    try:
        return dt.time.fromisoformat(str(raw))
    except ValueError:
        return dt.time(9, 0)


def default_month_total_days() -> int:
    """Total days assumed for a month with no MonthlySetting row."""

    return int(getattr(settings, "DEFAULT_MONTH_TOTAL_DAYS", 28))


def worklog_month_total_days() -> int:
    """Total days for a summary created implicitly by a work log entry."""

    return int(getattr(settings, "WORKLOG_MONTH_TOTAL_DAYS", 30))


def standard_work_hours_per_day() -> int:
    """Hours after which a logged day counts as overtime."""

    return int(getattr(settings, "STANDARD_WORK_HOURS_PER_DAY", 8))


def overtime_max_upload_bytes() -> int:
    return int(getattr(settings, "OVERTIME_MAX_UPLOAD_BYTES", 50 * 1024 * 1024))
