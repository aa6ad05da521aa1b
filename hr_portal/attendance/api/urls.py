from django.urls import path

from hr_portal.attendance.api.views import AttendanceSummaryView
from hr_portal.attendance.api.views import DailyAttendanceView
from hr_portal.attendance.api.views import EmployeeWorkLogView
from hr_portal.attendance.api.views import MonthlySettingView

urlpatterns = [
    path(
        "attendance-summary/",
        AttendanceSummaryView.as_view(),
        name="attendance-summary",
    ),
    path("daily-attendance/", DailyAttendanceView.as_view(), name="daily-attendance"),
    path("monthly-settings/", MonthlySettingView.as_view(), name="monthly-settings"),
    path(
        "employees/<str:identifier>/worklog/",
        EmployeeWorkLogView.as_view(),
        name="employee-worklog",
    ),
]
