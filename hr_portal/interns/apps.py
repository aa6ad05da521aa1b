from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class InternsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hr_portal.interns"
    verbose_name = _("Interns")
