from django.db import models
from django.utils.translation import gettext_lazy as _


def overtime_image_path(instance, filename):
    return f"overtime/{instance.employee_id}/{instance.ot_date}/{filename}"


class OvertimeRequest(models.Model):
    """An overtime session: started, documented, ended, then reviewed.

    A team lead forwards completed sessions to ``Final Approved``; managers
    settle them in bulk as ``approved`` or ``rejected``.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        FORWARDED = "Final Approved", _("Forwarded for final approval")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="overtime_requests",
    )
    ot_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField(null=True, blank=True)
    work_type = models.CharField(max_length=255, blank=True)
    work_description = models.TextField(blank=True, default="")
    reason = models.TextField(blank=True, default="")
    image1 = models.ImageField(upload_to=overtime_image_path, null=True, blank=True)
    image2 = models.ImageField(upload_to=overtime_image_path, null=True, blank=True)
    total_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING
    )
    is_active = models.BooleanField(
        default=True, help_text=_("True while the session is running")
    )
    final_approved_by = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="settled_overtime",
    )
    final_approved_at = models.DateTimeField(null=True, blank=True)
    batch_id = models.CharField(max_length=100, blank=True)
    manager_remarks = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-ot_date", "-id"]
        indexes = [
            models.Index(
                fields=["employee", "is_active"], name="overtime_employee_active_idx"
            )
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"OT({self.employee_id} {self.ot_date})"
