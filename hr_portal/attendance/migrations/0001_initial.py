import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="MonthlySetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("month", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ("year", models.PositiveIntegerField()),
                ("total_days", models.PositiveSmallIntegerField(default=28, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(31)])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-year", "-month"],
                "constraints": [models.UniqueConstraint(fields=("month", "year"), name="unique_monthly_setting")],
            },
        ),
        migrations.CreateModel(
            name="MonthlyAttendance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("month", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ("year", models.PositiveIntegerField()),
                ("total_days", models.PositiveSmallIntegerField(default=28)),
                ("working_days", models.PositiveSmallIntegerField(default=0)),
                ("permissions", models.PositiveSmallIntegerField(default=0)),
                ("leaves", models.PositiveSmallIntegerField(default=0)),
                ("missed_days", models.PositiveSmallIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="attendance_summaries", to="employees.employee")),
            ],
            options={
                "ordering": ["-year", "-month"],
                "constraints": [models.UniqueConstraint(fields=("employee", "month", "year"), name="unique_employee_month_attendance")],
            },
        ),
        migrations.CreateModel(
            name="DailyWorkLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("check_in", models.TimeField(blank=True, null=True)),
                ("check_out", models.TimeField(blank=True, null=True)),
                ("hours", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("project", models.CharField(blank=True, help_text="Work type", max_length=255)),
                ("status", models.CharField(choices=[("Present", "Present"), ("Absent", "Absent")], default="Present", max_length=20)),
                ("description", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="work_logs", to="employees.employee")),
            ],
            options={
                "ordering": ["-date"],
                "constraints": [models.UniqueConstraint(fields=("employee", "date"), name="unique_employee_daily_log")],
            },
        ),
    ]
