from __future__ import annotations

import datetime as dt
from decimal import Decimal

from django.db import transaction
from rest_framework.exceptions import ValidationError

from hr_portal.attendance.services import hours_between
from hr_portal.interns.models import Intern
from hr_portal.interns.models import InternWorkLog
from hr_portal.policies.accessors import portal_time_zone
from hr_portal.policies.accessors import standard_work_hours_per_day


@transaction.atomic
def record_intern_work_log(
    intern: Intern,
    *,
    check_in: dt.datetime,
    check_out: dt.datetime | None = None,
    work_type: str | None = None,
    description: str | None = None,
) -> tuple[InternWorkLog, bool]:
    """Upsert the log for the check-in's day.

    A stored check-in is kept; later posts only add the check-out and notes.
    """

    day = check_in.astimezone(portal_time_zone()).date()
    log, created = InternWorkLog.objects.select_for_update().get_or_create(
        intern=intern, date=day, defaults={"check_in": check_in}
    )
    if log.check_in is None:
        log.check_in = check_in
    if check_out is not None:
        if check_out <= log.check_in:
            # The stored check-in wins over the one just posted.
            raise ValidationError(
                {"check_out": "Check-out must be after check-in."}
            )
        log.check_out = check_out
    if work_type is not None:
        log.work_type = work_type
    if description is not None:
        log.description = description
    if log.check_out is not None:
        total = hours_between(log.check_in, log.check_out)
        log.total_hours = total
        log.overtime_hours = max(
            Decimal(0), total - Decimal(standard_work_hours_per_day())
        )
    log.save()
    return log, created
