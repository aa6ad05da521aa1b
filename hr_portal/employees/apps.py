from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class EmployeesConfig(AppConfig):
    name = "hr_portal.employees"
    verbose_name = _("Employees")

    def ready(self):
        import hr_portal.employees.signals  # noqa: F401, PLC0415
