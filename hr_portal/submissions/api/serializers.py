from rest_framework import serializers

from hr_portal.submissions.models import WorkSubmission


class WorkSubmissionSerializer(serializers.ModelSerializer):
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

    class Meta:
        model = WorkSubmission
        fields = [
            "id",
            "employee",
            "employee_id",
            "employee_code",
            "employee_name",
            "title",
            "work_type",
            "work_description",
            "department",
            "priority",
            "status",
            "team_lead",
            "team_lead_name",
            "manager",
            "manager_name",
            "rejection_reason",
            "manager_comments",
            "submitted_at",
            "team_lead_approved_at",
            "final_approved_date",
            "final_rejected_date",
        ]
        read_only_fields = [
            "id",
            "employee",
            "status",
            "team_lead",
            "manager",
            "rejection_reason",
            "manager_comments",
            "submitted_at",
            "team_lead_approved_at",
            "final_approved_date",
            "final_rejected_date",
        ]


class RejectionSerializer(serializers.Serializer):
    rejection_reason = serializers.CharField(
        required=False, allow_blank=True, default=""
    )


class ManagerCommentsSerializer(serializers.Serializer):
    manager_comments = serializers.CharField(
        required=False, allow_blank=True, default=""
    )
