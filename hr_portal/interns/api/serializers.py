from rest_framework import serializers

from hr_portal.interns.models import Intern
from hr_portal.interns.models import InternWorkLog

REQUIRED_DOCUMENTS = ("aadhar", "photo", "marksheet")


class InternSerializer(serializers.ModelSerializer):
    class Meta:
        model = Intern
        fields = [
            "id",
            "name",
            "email",
            "phone_number",
            "college",
            "year_or_passed_out",
            "department",
            "domain_in_office",
            "paid_or_unpaid",
            "mentor_name",
            "status",
            "aadhar",
            "photo",
            "marksheet",
            "resume",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        # Duplicate emails are answered with 409 by the view.
        extra_kwargs = {"email": {"validators": []}}

    def validate(self, attrs):
        if self.instance is None:
            missing = [name for name in REQUIRED_DOCUMENTS if not attrs.get(name)]
            if missing:
                raise serializers.ValidationError(
                    {
                        name: "Required document (Aadhar, Photo, Marksheet)."
                        for name in missing
                    }
                )
        return attrs


class InternStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=Intern.Status.choices,
        error_messages={
            "invalid_choice": "Status must be Active, Inactive or Completed."
        },
    )


class InternWorkLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = InternWorkLog
        fields = [
            "id",
            "intern",
            "date",
            "check_in",
            "check_out",
            "total_hours",
            "overtime_hours",
            "work_type",
            "description",
        ]
        read_only_fields = fields


class InternWorkLogInputSerializer(serializers.Serializer):
    check_in = serializers.DateTimeField()
    check_out = serializers.DateTimeField(required=False, allow_null=True)
    work_type = serializers.CharField(required=False, allow_blank=True, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        check_out = attrs.get("check_out")
        if check_out is not None and check_out <= attrs["check_in"]:
            raise serializers.ValidationError(
                {"check_out": "Check-out must be after check-in."}
            )
        return attrs
