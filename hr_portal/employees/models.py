from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Employee(models.Model):
    class WorkMode(models.TextChoices):
        OFFICE = "Office", _("Office")
        WFH = "WFH", _("Work From Home")
        HYBRID = "Hybrid", _("Hybrid")

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        WARNING = "Warning", _("Warning")
        ON_LEAVE = "On Leave", _("On Leave")
        INACTIVE = "Inactive", _("Inactive")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee",
    )
    employee_id = models.CharField(
        max_length=50, unique=True, help_text=_("Employee code, e.g. DS093")
    )
    name = models.CharField(max_length=255)
    designation = models.CharField(max_length=150, blank=True)
    department = models.CharField(max_length=150, blank=True)
    work_mode = models.CharField(
        max_length=10, choices=WorkMode.choices, default=WorkMode.OFFICE
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE
    )
    phone_number = models.CharField(max_length=30, blank=True)
    email_address = models.EmailField(blank=True)
    address = models.TextField(blank=True, default="")
    date_of_joining = models.DateField(blank=True, null=True)
    experience = models.CharField(
        max_length=50, blank=True, help_text=_("Prior experience, e.g. 3 years")
    )
    manager = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reports",
        help_text=_("Final approver for this employee's requests"),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["employee_id"]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.name} ({self.employee_id})"


class TeamMembership(models.Model):
    """An employee on a team lead's team.

    Removing a member only deactivates the row so history is kept.
    """

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name="team_memberships"
    )
    team_lead = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name="led_memberships"
    )
    added_date = models.DateTimeField(default=timezone.now)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["-added_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "team_lead"], name="unique_team_membership"
            ),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.employee_id} -> lead {self.team_lead_id}"
