import django.db.models.deletion
import hr_portal.interns.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Intern",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("phone_number", models.CharField(max_length=30)),
                ("college", models.CharField(max_length=255)),
                ("year_or_passed_out", models.CharField(help_text="Current year of study or passing-out year", max_length=50)),
                ("department", models.CharField(max_length=150)),
                ("domain_in_office", models.CharField(max_length=150)),
                ("paid_or_unpaid", models.CharField(choices=[("Paid", "Paid"), ("Unpaid", "Unpaid")], default="Unpaid", max_length=10)),
                ("mentor_name", models.CharField(blank=True, max_length=255)),
                ("status", models.CharField(choices=[("Active", "Active"), ("Inactive", "Inactive"), ("Completed", "Completed")], default="Active", max_length=20)),
                ("aadhar", models.FileField(blank=True, null=True, upload_to=hr_portal.interns.models.intern_document_path)),
                ("photo", models.ImageField(blank=True, null=True, upload_to=hr_portal.interns.models.intern_document_path)),
                ("marksheet", models.FileField(blank=True, null=True, upload_to=hr_portal.interns.models.intern_document_path)),
                ("resume", models.FileField(blank=True, null=True, upload_to=hr_portal.interns.models.intern_document_path)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="InternWorkLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("check_in", models.DateTimeField(blank=True, null=True)),
                ("check_out", models.DateTimeField(blank=True, null=True)),
                ("total_hours", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("overtime_hours", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("work_type", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("intern", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="work_logs", to="interns.intern")),
            ],
            options={
                "ordering": ["-date"],
                "constraints": [models.UniqueConstraint(fields=("intern", "date"), name="unique_intern_daily_log")],
            },
        ),
    ]
