from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class OvertimeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hr_portal.overtime"
    verbose_name = _("Overtime")
