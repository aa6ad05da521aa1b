import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WorkSubmission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(blank=True, max_length=255)),
                ("work_type", models.CharField(max_length=255)),
                ("work_description", models.TextField()),
                ("department", models.CharField(blank=True, max_length=150)),
                ("priority", models.CharField(choices=[("Low", "Low"), ("Medium", "Medium"), ("High", "High")], default="Medium", max_length=10)),
                ("status", models.CharField(choices=[("Pending Team Lead Approval", "Pending Team Lead Approval"), ("Pending Final Approval", "Pending Final Approval"), ("Rejected by Team Lead", "Rejected by Team Lead"), ("Final Approved", "Final Approved"), ("Final Rejected", "Final Rejected")], default="Pending Team Lead Approval", max_length=40)),
                ("rejection_reason", models.TextField(blank=True, default="")),
                ("manager_comments", models.TextField(blank=True, default="")),
                ("submitted_at", models.DateTimeField(auto_now_add=True)),
                ("team_lead_approved_at", models.DateTimeField(blank=True, null=True)),
                ("final_approved_date", models.DateTimeField(blank=True, null=True)),
                ("final_rejected_date", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="work_submissions", to="employees.employee")),
                ("manager", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="final_reviewed_submissions", to="employees.employee")),
                ("team_lead", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reviewed_submissions", to="employees.employee")),
            ],
            options={"ordering": ["-submitted_at", "-id"]},
        ),
    ]
