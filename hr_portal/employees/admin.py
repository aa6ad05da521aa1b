from django.contrib import admin

from hr_portal.employees import models


class TeamMembershipInline(admin.TabularInline):
    model = models.TeamMembership
    fk_name = "team_lead"
    extra = 0


@admin.register(models.Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ["employee_id", "name", "designation", "work_mode", "status"]
    search_fields = ["employee_id", "name", "designation", "email_address"]
    list_filter = ["work_mode", "status", "is_active", "department"]
    raw_id_fields = ["user", "manager"]
    inlines = [TeamMembershipInline]


@admin.register(models.TeamMembership)
class TeamMembershipAdmin(admin.ModelAdmin):
    list_display = ["id", "team_lead", "employee", "added_date", "is_active"]
    list_filter = ["is_active"]
