"""Portal-wide policy accessors.

Backend apps (attendance, overtime, notifications, etc.) should import policy
values from here instead of embedding constants locally.
"""

from .accessors import default_month_total_days
from .accessors import late_after
from .accessors import overtime_max_upload_bytes
from .accessors import portal_now
from .accessors import portal_time_zone
from .accessors import standard_work_hours_per_day
from .accessors import worklog_month_total_days

__all__ = [
    "default_month_total_days",
    "late_after",
    "overtime_max_upload_bytes",
    "portal_now",
    "portal_time_zone",
    "standard_work_hours_per_day",
    "worklog_month_total_days",
]
