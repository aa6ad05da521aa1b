import django_filters
from django.db.models import Q

from hr_portal.employees.services import resolve_employee
from hr_portal.leaves.models import LeaveRequest
from hr_portal.leaves.models import PermissionRequest


class _TwoStageRequestFilter(django_filters.FilterSet):
    employee_id = django_filters.CharFilter(method="filter_employee")
    team_lead_id = django_filters.CharFilter(method="filter_team_lead")
    manager_id = django_filters.CharFilter(method="filter_manager")
    status = django_filters.CharFilter(method="filter_status")
    month = django_filters.NumberFilter(method="filter_month")
    year = django_filters.NumberFilter(method="filter_year")

    date_field = "created_at"

    def _employee_pk(self, value):
        employee = resolve_employee(value)
        return employee.pk if employee is not None else -1

    def filter_employee(self, queryset, name, value):
        return queryset.filter(employee_id=self._employee_pk(value))

    def filter_team_lead(self, queryset, name, value):
        return queryset.filter(eligible_team_leads=self._employee_pk(value)).distinct()

    def filter_manager(self, queryset, name, value):
        return queryset.filter(manager_id=self._employee_pk(value))

    def filter_status(self, queryset, name, value):
        if not value or value.lower() == "all":
            return queryset
        return queryset.filter(status=value)

    def filter_month(self, queryset, name, value):
        return queryset.filter(**{f"{self.date_field}__month": int(value)})

    def filter_year(self, queryset, name, value):
        return queryset.filter(**{f"{self.date_field}__year": int(value)})


class LeaveRequestFilter(_TwoStageRequestFilter):
    date_field = "start_date"

    class Meta:
        model = LeaveRequest
        fields = ["employee_id", "team_lead_id", "manager_id", "status"]


class PermissionRequestFilter(_TwoStageRequestFilter):
    date_field = "date"

    class Meta:
        model = PermissionRequest
        fields = ["employee_id", "team_lead_id", "manager_id", "status"]

    def filter_team_lead(self, queryset, name, value):
        # A lead's own permission requests sit next to their team's.
        lead = self._employee_pk(value)
        return queryset.filter(
            Q(eligible_team_leads=lead) | Q(employee_id=lead)
        ).distinct()
