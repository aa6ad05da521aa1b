from rest_framework import serializers

from hr_portal.approvals.workflow import ACTIONS
from hr_portal.leaves.models import LeaveRequest
from hr_portal.leaves.models import PermissionRequest

APPROVAL_FIELDS = [
    "status",
    "eligible_team_leads",
    "team_lead",
    "team_lead_name",
    "manager",
    "manager_name",
    "team_lead_comments",
    "manager_comments",
    "approved_at",
    "rejected_at",
    "created_at",
    "updated_at",
]


class _TwoStageRequestSerializer(serializers.ModelSerializer):
    employee_id = serializers.CharField(
        write_only=True,
        required=False,
        help_text="Employee code or id; defaults to the caller",
    )
    employee_code = serializers.CharField(source="employee.employee_id", read_only=True)
    employee_name = serializers.CharField(source="employee.name", read_only=True)
    team_lead_name = serializers.CharField(
        source="team_lead.name", read_only=True, default=None
    )
    manager_name = serializers.CharField(
        source="manager.name", read_only=True, default=None
    )


class LeaveRequestSerializer(_TwoStageRequestSerializer):
    class Meta:
        model = LeaveRequest
        fields = [
            "id",
            "employee",
            "employee_id",
            "employee_code",
            "employee_name",
            "leave_type",
            "start_date",
            "end_date",
            "reason",
            *APPROVAL_FIELDS,
        ]
        read_only_fields = ["id", "employee", *APPROVAL_FIELDS]

    def validate(self, attrs):
        if attrs["start_date"] > attrs["end_date"]:
            raise serializers.ValidationError(
                {"end_date": "End date cannot be before start date."}
            )
        return attrs


class PermissionRequestSerializer(_TwoStageRequestSerializer):
    class Meta:
        model = PermissionRequest
        fields = [
            "id",
            "employee",
            "employee_id",
            "employee_code",
            "employee_name",
            "permission_type",
            "date",
            "start_time",
            "end_time",
            "reason",
            *APPROVAL_FIELDS,
        ]
        read_only_fields = ["id", "employee", *APPROVAL_FIELDS]

    def validate(self, attrs):
        if attrs["start_time"] >= attrs["end_time"]:
            raise serializers.ValidationError(
                {"end_time": "End time must be after start time."}
            )
        return attrs


class DecisionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=ACTIONS)
    comments = serializers.CharField(required=False, allow_blank=True, default="")
