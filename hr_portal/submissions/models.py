from django.db import models
from django.utils.translation import gettext_lazy as _


class WorkSubmission(models.Model):
    class Priority(models.TextChoices):
        LOW = "Low", _("Low")
        MEDIUM = "Medium", _("Medium")
        HIGH = "High", _("High")

    class Status(models.TextChoices):
        PENDING_TEAM_LEAD = "Pending Team Lead Approval", _(
            "Pending Team Lead Approval"
        )
        PENDING_FINAL = "Pending Final Approval", _("Pending Final Approval")
        REJECTED_BY_TEAM_LEAD = "Rejected by Team Lead", _("Rejected by Team Lead")
        FINAL_APPROVED = "Final Approved", _("Final Approved")
        FINAL_REJECTED = "Final Rejected", _("Final Rejected")

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="work_submissions",
    )
    title = models.CharField(max_length=255, blank=True)
    work_type = models.CharField(max_length=255)
    work_description = models.TextField()
    department = models.CharField(max_length=150, blank=True)
    priority = models.CharField(
        max_length=10, choices=Priority.choices, default=Priority.MEDIUM
    )
    status = models.CharField(
        max_length=40, choices=Status.choices, default=Status.PENDING_TEAM_LEAD
    )
    team_lead = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_submissions",
    )
    manager = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="final_reviewed_submissions",
    )
    rejection_reason = models.TextField(blank=True, default="")
    manager_comments = models.TextField(blank=True, default="")
    submitted_at = models.DateTimeField(auto_now_add=True)
    team_lead_approved_at = models.DateTimeField(null=True, blank=True)
    final_approved_date = models.DateTimeField(null=True, blank=True)
    final_rejected_date = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-submitted_at", "-id"]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.employee_id} - {self.title or self.work_type}"
