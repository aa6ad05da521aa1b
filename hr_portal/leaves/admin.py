from django.contrib import admin

from hr_portal.leaves import models


@admin.register(models.LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ["id", "employee", "leave_type", "start_date", "end_date", "status"]
    list_filter = ["status", "leave_type"]
    search_fields = ["employee__name", "employee__employee_id", "reason"]
    raw_id_fields = ["employee", "team_lead", "manager"]
    filter_horizontal = ["eligible_team_leads"]


@admin.register(models.PermissionRequest)
class PermissionRequestAdmin(admin.ModelAdmin):
    list_display = ["id", "employee", "permission_type", "date", "status"]
    list_filter = ["status", "date"]
    search_fields = ["employee__name", "employee__employee_id", "reason"]
    raw_id_fields = ["employee", "team_lead", "manager"]
    filter_horizontal = ["eligible_team_leads"]
