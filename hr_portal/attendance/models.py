from django.core.validators import MaxValueValidator
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

MONTH_VALIDATORS = [MinValueValidator(1), MaxValueValidator(12)]
DAYS_VALIDATORS = [MinValueValidator(1), MaxValueValidator(31)]


class MonthlySetting(models.Model):
    """Number of working days counted for a calendar month."""

    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveIntegerField()
    total_days = models.PositiveSmallIntegerField(
        default=28, validators=DAYS_VALIDATORS
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(
                fields=["month", "year"], name="unique_monthly_setting"
            ),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.month:02d}/{self.year}: {self.total_days} days"


class MonthlyAttendance(models.Model):
    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="attendance_summaries",
    )
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveIntegerField()
    total_days = models.PositiveSmallIntegerField(default=28)
    working_days = models.PositiveSmallIntegerField(default=0)
    permissions = models.PositiveSmallIntegerField(default=0)
    leaves = models.PositiveSmallIntegerField(default=0)
    missed_days = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "month", "year"],
                name="unique_employee_month_attendance",
            ),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"Attendance({self.employee_id} {self.month:02d}/{self.year})"


class DailyWorkLog(models.Model):
    class Status(models.TextChoices):
        PRESENT = "Present", _("Present")
        ABSENT = "Absent", _("Absent")

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="work_logs",
    )
    date = models.DateField()
    check_in = models.TimeField(null=True, blank=True)
    check_out = models.TimeField(null=True, blank=True)
    hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    project = models.CharField(max_length=255, blank=True, help_text=_("Work type"))
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PRESENT
    )
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "date"], name="unique_employee_daily_log"
            ),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"WorkLog({self.employee_id} {self.date})"
