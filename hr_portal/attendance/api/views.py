"""Attendance summaries, monthly settings, work logs and the daily board."""

import logging

from django.http import QueryDict
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hr_portal.attendance.api.serializers import AttendanceSummaryQuerySerializer
from hr_portal.attendance.api.serializers import DailyAttendanceQuerySerializer
from hr_portal.attendance.api.serializers import DailyWorkLogSerializer
from hr_portal.attendance.api.serializers import MonthlyAttendanceSerializer
from hr_portal.attendance.api.serializers import MonthlySettingSerializer
from hr_portal.attendance.api.serializers import MonthYearQuerySerializer
from hr_portal.attendance.api.serializers import WorkLogInputSerializer
from hr_portal.attendance.models import DailyWorkLog
from hr_portal.attendance.models import MonthlyAttendance
from hr_portal.attendance.services import build_daily_report
from hr_portal.attendance.services import month_total_days
from hr_portal.attendance.services import record_work_log
from hr_portal.attendance.services import upsert_monthly_setting
from hr_portal.audit.utils import audit_request
from hr_portal.employees.api.permissions import IsAdminOrManagerOnly
from hr_portal.employees.api.permissions import IsTeamLeadOrElevated
from hr_portal.employees.services import can_view_employee
from hr_portal.employees.services import get_employee_or_404

logger = logging.getLogger(__name__)

# camelCase keys sent by the web client
WORKLOG_ALIASES = {
    "checkInTime": "check_in",
    "checkOutTime": "check_out",
    "workType": "work_type",
    "workDescription": "work_description",
}


def _normalize_worklog_payload(data) -> dict:
    out = data.dict() if isinstance(data, QueryDict) else dict(data)
    for alias, key in WORKLOG_ALIASES.items():
        if alias in out and key not in out:
            out[key] = out.pop(alias)
    return out


def _viewable_employee(request, identifier):
    employee = get_employee_or_404(identifier)
    if not can_view_employee(request.user, employee):
        msg = "You cannot access this employee's attendance."
        raise PermissionDenied(msg)
    return employee


@extend_schema(
    tags=["Attendance"],
    parameters=[
        OpenApiParameter("employee_id", OpenApiTypes.STR, required=True),
        OpenApiParameter("month", OpenApiTypes.INT, required=True),
        OpenApiParameter("year", OpenApiTypes.INT, required=True),
    ],
    responses=MonthlyAttendanceSerializer,
)
class AttendanceSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = AttendanceSummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        employee = _viewable_employee(request, params["employee_id"])
        summary = MonthlyAttendance.objects.filter(
            employee=employee, month=params["month"], year=params["year"]
        ).first()
        if summary is None:
            msg = "No attendance data found for the specified period"
            raise NotFound(msg)
        return Response(MonthlyAttendanceSerializer(summary).data)


@extend_schema(
    tags=["Attendance"],
    parameters=[
        OpenApiParameter("date", OpenApiTypes.DATE, required=True),
        OpenApiParameter("search", OpenApiTypes.STR),
        OpenApiParameter("work_mode", OpenApiTypes.STR),
        OpenApiParameter("attendance_status", OpenApiTypes.STR),
    ],
)
class DailyAttendanceView(APIView):
    permission_classes = [IsTeamLeadOrElevated]

    def get(self, request):
        query = DailyAttendanceQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        report = build_daily_report(
            params["date"],
            search=params.get("search", ""),
            work_mode=params.get("work_mode"),
            attendance_status=params.get("attendance_status"),
        )
        return Response(report)


@extend_schema(tags=["Attendance"], request=MonthlySettingSerializer)
class MonthlySettingView(APIView):
    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAdminOrManagerOnly()]
        return [IsAuthenticated()]

    @extend_schema(
        parameters=[
            OpenApiParameter("month", OpenApiTypes.INT),
            OpenApiParameter("year", OpenApiTypes.INT),
        ]
    )
    def get(self, request):
        query = MonthYearQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        month, year = query.validated_data["month"], query.validated_data["year"]
        return Response(
            {
                "month": month,
                "year": year,
                "total_days": month_total_days(month, year),
            }
        )

    def post(self, request):
        serializer = MonthlySettingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        setting, updated = upsert_monthly_setting(
            data["month"], data["year"], data["total_days"]
        )
        audit_request(
            request,
            "monthly_setting_saved",
            message=f"{setting.month:02d}/{setting.year}={setting.total_days}",
            instance=setting,
        )
        payload = MonthlySettingSerializer(setting).data
        payload["updated_summaries"] = updated
        return Response(payload)


@extend_schema(tags=["Attendance"])
class EmployeeWorkLogView(APIView):
    """GET/POST ``employees/<identifier>/worklog/``."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[OpenApiParameter("date", OpenApiTypes.DATE)],
        responses=DailyWorkLogSerializer,
    )
    def get(self, request, identifier):
        employee = _viewable_employee(request, identifier)
        raw_date = request.query_params.get("date")
        if not raw_date:
            logs = DailyWorkLog.objects.filter(employee=employee)
            return Response(
                {"work_logs": DailyWorkLogSerializer(logs, many=True).data}
            )
        query = DailyAttendanceQuerySerializer(data={"date": raw_date})
        query.is_valid(raise_exception=True)
        log = DailyWorkLog.objects.filter(
            employee=employee, date=query.validated_data["date"]
        ).first()
        return Response(DailyWorkLogSerializer(log).data if log else None)

    @extend_schema(request=WorkLogInputSerializer, responses=DailyWorkLogSerializer)
    def post(self, request, identifier):
        employee = _viewable_employee(request, identifier)
        serializer = WorkLogInputSerializer(
            data=_normalize_worklog_payload(request.data)
        )
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        log, created = record_work_log(
            employee,
            check_in=data["check_in"],
            check_out=data["check_out"],
            work_type=data["work_type"],
            description=data["work_description"],
        )
        audit_request(
            request,
            "work_log_recorded",
            message=f"{employee.employee_id} {log.date} {log.hours}h",
            instance=log,
        )
        return Response(
            DailyWorkLogSerializer(log).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
