from django.contrib import admin

from hr_portal.interns import models


class InternWorkLogInline(admin.TabularInline):
    model = models.InternWorkLog
    extra = 0


@admin.register(models.Intern)
class InternAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "email", "college", "department", "status"]
    list_filter = ["status", "paid_or_unpaid", "department"]
    search_fields = ["name", "email", "college", "mentor_name"]
    inlines = [InternWorkLogInline]
