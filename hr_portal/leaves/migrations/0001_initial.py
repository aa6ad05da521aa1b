import django.db.models.deletion
from django.db import migrations, models


def _two_stage_fields(eligible_related_name, prefix):
    return [
        ("reason", models.TextField(blank=True, default="")),
        ("status", models.CharField(choices=[("Pending Team Lead", "Pending Team Lead"), ("Pending Manager Approval", "Pending Manager Approval"), ("Approved", "Approved"), ("Rejected", "Rejected")], default="Pending Team Lead", max_length=30)),
        ("team_lead_comments", models.TextField(blank=True, default="")),
        ("manager_comments", models.TextField(blank=True, default="")),
        ("approved_at", models.DateTimeField(blank=True, null=True)),
        ("rejected_at", models.DateTimeField(blank=True, null=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("eligible_team_leads", models.ManyToManyField(blank=True, help_text="Team leads who may take the first decision", related_name=eligible_related_name, to="employees.employee")),
        ("team_lead", models.ForeignKey(blank=True, help_text="Team lead who took the first decision", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f"{prefix}_team_lead_decisions", to="employees.employee")),
        ("manager", models.ForeignKey(blank=True, help_text="Final approver", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f"{prefix}_manager_decisions", to="employees.employee")),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="LeaveRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                *_two_stage_fields("leaverequest_eligible", "leaverequest"),
                ("leave_type", models.CharField(choices=[("Sick Leave", "Sick Leave"), ("Casual Leave", "Casual Leave"), ("Annual Leave", "Annual Leave"), ("Personal Leave", "Personal Leave")], max_length=30)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="leave_requests", to="employees.employee")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "abstract": False,
                "indexes": [models.Index(fields=["start_date", "end_date"], name="leave_request_dates_idx")],
            },
        ),
        migrations.CreateModel(
            name="PermissionRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                *_two_stage_fields("permissionrequest_eligible", "permissionrequest"),
                ("permission_type", models.CharField(help_text="e.g. Late arrival, Early leave", max_length=100)),
                ("date", models.DateField()),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="permission_requests", to="employees.employee")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "abstract": False,
                "indexes": [models.Index(fields=["date"], name="permission_request_date_idx")],
            },
        ),
    ]
