from django.contrib import admin

from hr_portal.submissions.models import WorkSubmission


@admin.register(WorkSubmission)
class WorkSubmissionAdmin(admin.ModelAdmin):
    list_display = ["id", "employee", "title", "priority", "status", "submitted_at"]
    list_filter = ["status", "priority"]
    search_fields = ["employee__name", "title", "work_type"]
    raw_id_fields = ["employee", "team_lead", "manager"]
