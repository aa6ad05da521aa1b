import django_filters

from hr_portal.employees.services import resolve_employee
from hr_portal.employees.services import team_member_ids
from hr_portal.submissions.models import WorkSubmission


class WorkSubmissionFilter(django_filters.FilterSet):
    employee_id = django_filters.CharFilter(method="filter_employee")
    team_lead_id = django_filters.CharFilter(method="filter_team_lead")
    status = django_filters.CharFilter(method="filter_status")

    class Meta:
        model = WorkSubmission
        fields = ["employee_id", "team_lead_id", "status", "priority"]

    def filter_employee(self, queryset, name, value):
        employee = resolve_employee(value)
        return queryset.filter(employee_id=employee.pk if employee else -1)

    def filter_team_lead(self, queryset, name, value):
        lead = resolve_employee(value)
        if lead is None:
            return queryset.none()
        return queryset.filter(employee_id__in=team_member_ids(lead))

    def filter_status(self, queryset, name, value):
        if not value or value.lower() == "all":
            return queryset
        return queryset.filter(status=value)
