from django.db import models
from django.utils.translation import gettext_lazy as _


def intern_document_path(instance, filename):
    return f"intern_documents/{instance.email}/{filename}"


class Intern(models.Model):
    class Compensation(models.TextChoices):
        PAID = "Paid", _("Paid")
        UNPAID = "Unpaid", _("Unpaid")

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        INACTIVE = "Inactive", _("Inactive")
        COMPLETED = "Completed", _("Completed")

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone_number = models.CharField(max_length=30)
    college = models.CharField(max_length=255)
    year_or_passed_out = models.CharField(
        max_length=50, help_text=_("Current year of study or passing-out year")
    )
    department = models.CharField(max_length=150)
    domain_in_office = models.CharField(max_length=150)
    paid_or_unpaid = models.CharField(
        max_length=10, choices=Compensation.choices, default=Compensation.UNPAID
    )
    mentor_name = models.CharField(max_length=255, blank=True)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE
    )
    aadhar = models.FileField(upload_to=intern_document_path, null=True, blank=True)
    photo = models.ImageField(upload_to=intern_document_path, null=True, blank=True)
    marksheet = models.FileField(upload_to=intern_document_path, null=True, blank=True)
    resume = models.FileField(upload_to=intern_document_path, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):  # pragma: no cover - trivial
        return f"{self.name} <{self.email}>"


class InternWorkLog(models.Model):
    intern = models.ForeignKey(
        Intern, on_delete=models.CASCADE, related_name="work_logs"
    )
    date = models.DateField()
    check_in = models.DateTimeField(null=True, blank=True)
    check_out = models.DateTimeField(null=True, blank=True)
    total_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    overtime_hours = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    work_type = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(
                fields=["intern", "date"], name="unique_intern_daily_log"
            ),
        ]

    def __str__(self):  # pragma: no cover - trivial
        return f"InternWorkLog({self.intern_id} {self.date})"
