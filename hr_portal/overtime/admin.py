from django.contrib import admin

from hr_portal.overtime.models import OvertimeRequest


@admin.register(OvertimeRequest)
class OvertimeRequestAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee",
        "ot_date",
        "start_time",
        "end_time",
        "total_hours",
        "status",
        "is_active",
    ]
    list_filter = ["status", "is_active", "ot_date"]
    search_fields = ["employee__name", "employee__employee_id", "batch_id"]
    raw_id_fields = ["employee", "final_approved_by"]
