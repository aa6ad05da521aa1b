from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Default custom user model for hr_portal.
    ``user_type`` drives portal area access and the role group the user
    belongs to (see ``hr_portal.users.roles``).
    """

    class UserType(models.TextChoices):
        ADMIN = "admin", _("Admin")
        EMPLOYEE = "employee", _("Employee")
        INTERN = "intern", _("Intern")
        TEAM_LEAD = "team-lead", _("Team Lead")
        MANAGER = "manager", _("Manager")

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    first_name = CharField(_("First Name"), max_length=150, blank=True)
    last_name = CharField(_("Last Name"), max_length=150, blank=True)
    user_type = CharField(
        _("User Type"),
        max_length=20,
        choices=UserType.choices,
        default=UserType.EMPLOYEE,
    )
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        full_name = f"{self.first_name} {self.last_name}".strip()
        if full_name:
            self.name = full_name
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email or self.username
