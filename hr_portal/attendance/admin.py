from django.contrib import admin

from hr_portal.attendance import models


@admin.register(models.MonthlySetting)
class MonthlySettingAdmin(admin.ModelAdmin):
    list_display = ["id", "month", "year", "total_days"]
    list_filter = ["year"]


@admin.register(models.MonthlyAttendance)
class MonthlyAttendanceAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee",
        "month",
        "year",
        "total_days",
        "working_days",
        "leaves",
        "permissions",
        "missed_days",
    ]
    list_filter = ["year", "month"]
    search_fields = ["employee__name", "employee__employee_id"]


@admin.register(models.DailyWorkLog)
class DailyWorkLogAdmin(admin.ModelAdmin):
    list_display = ["id", "employee", "date", "check_in", "check_out", "hours"]
    list_filter = ["date", "status"]
    search_fields = ["employee__name", "project", "description"]
