from rest_framework import serializers

from hr_portal.attendance.models import DAYS_VALIDATORS
from hr_portal.attendance.models import DailyWorkLog
from hr_portal.attendance.models import MonthlyAttendance
from hr_portal.attendance.models import MonthlySetting
from hr_portal.policies.accessors import portal_now


class MonthYearQuerySerializer(serializers.Serializer):
    """``month``/``year`` query parameters, defaulting to the current month."""

    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    year = serializers.IntegerField(min_value=1970, max_value=9999, required=False)

    def validate(self, attrs):
        now = portal_now()
        attrs.setdefault("month", now.month)
        attrs.setdefault("year", now.year)
        return attrs


class MonthlySettingSerializer(serializers.ModelSerializer):
    total_days = serializers.IntegerField(validators=DAYS_VALIDATORS)

    class Meta:
        model = MonthlySetting
        fields = ["id", "month", "year", "total_days", "updated_at"]
        read_only_fields = ["id", "updated_at"]
        # The view upserts on (month, year).
        validators: list = []


class MonthlyAttendanceSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source="employee.employee_id", read_only=True)

    class Meta:
        model = MonthlyAttendance
        fields = [
            "id",
            "employee",
            "employee_code",
            "month",
            "year",
            "total_days",
            "working_days",
            "permissions",
            "leaves",
            "missed_days",
        ]
        read_only_fields = fields


class DailyWorkLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = DailyWorkLog
        fields = [
            "id",
            "employee",
            "date",
            "check_in",
            "check_out",
            "hours",
            "project",
            "status",
            "description",
        ]
        read_only_fields = fields


class WorkLogInputSerializer(serializers.Serializer):
    check_in = serializers.DateTimeField()
    check_out = serializers.DateTimeField()
    work_type = serializers.CharField(max_length=255)
    work_description = serializers.CharField()

    def validate(self, attrs):
        if attrs["check_out"] <= attrs["check_in"]:
            raise serializers.ValidationError(
                {"check_out": "Check-out must be after check-in."}
            )
        return attrs


class AttendanceSummaryQuerySerializer(serializers.Serializer):
    employee_id = serializers.CharField()
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=1970, max_value=9999)


class DailyAttendanceQuerySerializer(serializers.Serializer):
    date = serializers.DateField(input_formats=["%Y-%m-%d"])
    search = serializers.CharField(required=False, allow_blank=True, default="")
    work_mode = serializers.CharField(required=False, allow_blank=True)
    attendance_status = serializers.CharField(required=False, allow_blank=True)
