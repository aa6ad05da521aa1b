import django.db.models.deletion
import hr_portal.overtime.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OvertimeRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ot_date", models.DateField()),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField(blank=True, null=True)),
                ("work_type", models.CharField(blank=True, max_length=255)),
                ("work_description", models.TextField(blank=True, default="")),
                ("reason", models.TextField(blank=True, default="")),
                ("image1", models.ImageField(blank=True, null=True, upload_to=hr_portal.overtime.models.overtime_image_path)),
                ("image2", models.ImageField(blank=True, null=True, upload_to=hr_portal.overtime.models.overtime_image_path)),
                ("total_hours", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("Final Approved", "Forwarded for final approval"), ("approved", "Approved"), ("rejected", "Rejected")], default="pending", max_length=20)),
                ("is_active", models.BooleanField(default=True, help_text="True while the session is running")),
                ("final_approved_at", models.DateTimeField(blank=True, null=True)),
                ("batch_id", models.CharField(blank=True, max_length=100)),
                ("manager_remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("employee", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="overtime_requests", to="employees.employee")),
                ("final_approved_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="settled_overtime", to="employees.employee")),
            ],
            options={
                "ordering": ["-ot_date", "-id"],
                "indexes": [models.Index(fields=["employee", "is_active"], name="overtime_employee_active_idx")],
            },
        ),
    ]
