from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


class TwoStageStatus(models.TextChoices):
    PENDING_TEAM_LEAD = "Pending Team Lead", _("Pending Team Lead")
    PENDING_MANAGER = "Pending Manager Approval", _("Pending Manager Approval")
    APPROVED = "Approved", _("Approved")
    REJECTED = "Rejected", _("Rejected")


class TwoStageRequest(models.Model):
    """Fields shared by requests approved by a team lead, then a manager."""

    Status = TwoStageStatus

    reason = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=30,
        choices=TwoStageStatus.choices,
        default=TwoStageStatus.PENDING_TEAM_LEAD,
    )
    eligible_team_leads = models.ManyToManyField(
        "employees.Employee",
        blank=True,
        related_name="%(class)s_eligible",
        help_text=_("Team leads who may take the first decision"),
    )
    team_lead = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)s_team_lead_decisions",
        help_text=_("Team lead who took the first decision"),
    )
    manager = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)s_manager_decisions",
        help_text=_("Final approver"),
    )
    team_lead_comments = models.TextField(blank=True, default="")
    manager_comments = models.TextField(blank=True, default="")
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at", "-id"]


class LeaveRequest(TwoStageRequest):
    class LeaveType(models.TextChoices):
        SICK = "Sick Leave", _("Sick Leave")
        CASUAL = "Casual Leave", _("Casual Leave")
        ANNUAL = "Annual Leave", _("Annual Leave")
        PERSONAL = "Personal Leave", _("Personal Leave")

    employee = models.ForeignKey(
        "employees.Employee", on_delete=models.CASCADE, related_name="leave_requests"
    )
    leave_type = models.CharField(max_length=30, choices=LeaveType.choices)
    start_date = models.DateField()
    end_date = models.DateField()

    class Meta(TwoStageRequest.Meta):
        indexes = [
            models.Index(
                fields=["start_date", "end_date"], name="leave_request_dates_idx"
            )
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.employee_id} - {self.leave_type} ({self.start_date})"

    def clean(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError(_("Start date cannot be after end date."))

    @property
    def label(self) -> str:
        return self.leave_type


class PermissionRequest(TwoStageRequest):
    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="permission_requests",
    )
    permission_type = models.CharField(
        max_length=100, help_text=_("e.g. Late arrival, Early leave")
    )
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()

    class Meta(TwoStageRequest.Meta):
        indexes = [models.Index(fields=["date"], name="permission_request_date_idx")]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.employee_id} - {self.permission_type} ({self.date})"

    def clean(self):
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValidationError(_("End time must be after start time."))

    @property
    def label(self) -> str:
        return self.permission_type
