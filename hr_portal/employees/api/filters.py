import django_filters
from django.db.models import Q

from hr_portal.employees.models import Employee


class EmployeeFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    work_mode = django_filters.CharFilter(method="filter_unless_all")
    status = django_filters.CharFilter(method="filter_unless_all")
    department = django_filters.CharFilter(lookup_expr="iexact")

    class Meta:
        model = Employee
        fields = ["search", "work_mode", "status", "department"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value)
            | Q(designation__icontains=value)
            | Q(employee_id__icontains=value)
        )

    def filter_unless_all(self, queryset, name, value):
        if not value or value.lower() == "all":
            return queryset
        return queryset.filter(**{name: value})
