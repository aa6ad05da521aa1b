from rest_framework import serializers

from hr_portal.attendance.api.serializers import DailyWorkLogSerializer
from hr_portal.employees.models import Employee
from hr_portal.employees.models import TeamMembership

SUMMARY_FIELDS = ("total_days", "working_days", "permissions", "leaves", "missed_days")


class EmployeeSerializer(serializers.ModelSerializer):
    manager = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(), required=False, allow_null=True
    )
    manager_name = serializers.CharField(
        source="manager.name", read_only=True, default=None
    )
    user_type = serializers.CharField(
        source="user.user_type", read_only=True, default=None
    )

    class Meta:
        model = Employee
        fields = [
            "id",
            "employee_id",
            "name",
            "designation",
            "department",
            "work_mode",
            "status",
            "phone_number",
            "email_address",
            "address",
            "date_of_joining",
            "experience",
            "manager",
            "manager_name",
            "user",
            "user_type",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "user", "created_at", "updated_at"]

    def validate_manager(self, value):
        instance = self.instance
        if value is not None and instance is not None and value.pk == instance.pk:
            msg = "An employee cannot be their own manager."
            raise serializers.ValidationError(msg)
        return value


def summary_payload(summary, default_total_days: int) -> dict:
    """Summary counters, or zeros when the month has no summary yet."""

    if summary is None:
        payload = dict.fromkeys(SUMMARY_FIELDS, 0)
        payload["total_days"] = default_total_days
        return payload
    return {name: getattr(summary, name) for name in SUMMARY_FIELDS}


class EmployeeListSerializer(EmployeeSerializer):
    """Employee row merged with its attendance summary for the listed month.

    Expects ``summaries`` (employee pk -> MonthlyAttendance) and
    ``default_total_days`` in the serializer context.
    """

    def to_representation(self, instance):
        data = super().to_representation(instance)
        summaries = self.context.get("summaries", {})
        data.update(
            summary_payload(
                summaries.get(instance.pk),
                self.context.get("default_total_days", 0),
            )
        )
        return data


class EmployeeStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[Employee.Status.ACTIVE, Employee.Status.INACTIVE],
        error_messages={"invalid_choice": "Status must be Active or Inactive."},
    )


class EmployeeDetailSerializer(EmployeeSerializer):
    """Employee with the month's summary and daily logs.

    Expects ``summary``, ``work_logs`` and ``default_total_days`` in context.
    """

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["attendance"] = summary_payload(
            self.context.get("summary"), self.context.get("default_total_days", 0)
        )
        data["work_logs"] = DailyWorkLogSerializer(
            self.context.get("work_logs", []), many=True
        ).data
        return data


class TeamMemberSerializer(serializers.ModelSerializer):
    employee = EmployeeSerializer(read_only=True)

    class Meta:
        model = TeamMembership
        fields = ["id", "team_lead", "employee", "added_date", "is_active"]
        read_only_fields = fields


class TeamMembershipInputSerializer(serializers.Serializer):
    team_lead_id = serializers.CharField(required=False)
    employee_id = serializers.CharField()
