from rest_framework import serializers

from hr_portal.overtime.models import OvertimeRequest


class OvertimeRequestSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source="employee.employee_id", read_only=True)
    employee_name = serializers.CharField(source="employee.name", read_only=True)

    class Meta:
        model = OvertimeRequest
        fields = [
            "id",
            "employee",
            "employee_code",
            "employee_name",
            "ot_date",
            "start_time",
            "end_time",
            "work_type",
            "work_description",
            "reason",
            "image1",
            "image2",
            "total_hours",
            "status",
            "is_active",
            "final_approved_by",
            "final_approved_at",
            "batch_id",
            "manager_remarks",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class StartOvertimeSerializer(serializers.Serializer):
    employee_id = serializers.CharField(required=False)
    ot_date = serializers.DateField(required=False)
    start_time = serializers.TimeField(required=False)


class SubmitWorkSerializer(serializers.Serializer):
    work_type = serializers.CharField(max_length=255)
    work_description = serializers.CharField()
    image1 = serializers.ImageField(required=False)
    image2 = serializers.ImageField(required=False)


class EndOvertimeSerializer(serializers.Serializer):
    end_time = serializers.TimeField(required=False)


class BulkSettleSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    batch_id = serializers.CharField(required=False, allow_blank=True, default="")
    manager_remarks = serializers.CharField(
        required=False, allow_blank=True, default=""
    )


class OvertimeSummaryQuerySerializer(serializers.Serializer):
    employee_id = serializers.CharField()
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=1970, max_value=9999)
