import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("employee_id", models.CharField(help_text="Employee code, e.g. DS093", max_length=50, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("designation", models.CharField(blank=True, max_length=150)),
                ("department", models.CharField(blank=True, max_length=150)),
                ("work_mode", models.CharField(choices=[("Office", "Office"), ("WFH", "Work From Home"), ("Hybrid", "Hybrid")], default="Office", max_length=10)),
                ("status", models.CharField(choices=[("Active", "Active"), ("Warning", "Warning"), ("On Leave", "On Leave"), ("Inactive", "Inactive")], default="Active", max_length=20)),
                ("phone_number", models.CharField(blank=True, max_length=30)),
                ("email_address", models.EmailField(blank=True, max_length=254)),
                ("address", models.TextField(blank=True, default="")),
                ("date_of_joining", models.DateField(blank=True, null=True)),
                ("experience", models.CharField(blank=True, help_text="Prior experience, e.g. 3 years", max_length=50)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("manager", models.ForeignKey(blank=True, help_text="Final approver for this employee's requests", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reports", to="employees.employee")),
                ("user", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="employee", to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["employee_id"]},
        ),
        migrations.CreateModel(
            name="TeamMembership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("added_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("is_active", models.BooleanField(default=True)),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="team_memberships", to="employees.employee")),
                ("team_lead", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="led_memberships", to="employees.employee")),
            ],
            options={"ordering": ["-added_date"]},
        ),
        migrations.AddConstraint(
            model_name="teammembership",
            constraint=models.UniqueConstraint(fields=("employee", "team_lead"), name="unique_team_membership"),
        ),
    ]
