import datetime

import django.db.models.deletion
import hr_portal.notifications.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("message", models.TextField()),
                ("notification_type", models.CharField(choices=[("leave_request", "Leave Request"), ("leave_request_update", "Leave Request Update"), ("permission_request", "Permission Request"), ("permission_request_update", "Permission Request Update"), ("work_submission", "Work Submission"), ("work_rejection", "Work Rejection"), ("final_approval", "Final Approval"), ("final_rejection", "Final Rejection"), ("overtime", "Overtime"), ("reminder", "Reminder"), ("other", "Other")], default="other", max_length=50)),
                ("reference_id", models.CharField(blank=True, default="", help_text="Primary key of the request this notification is about", max_length=64)),
                ("is_read", models.BooleanField(default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("recipient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="PushSubscription",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("endpoint", models.TextField()),
                ("p256dh", models.CharField(max_length=255)),
                ("auth", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="push_subscriptions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-updated_at"],
                "constraints": [models.UniqueConstraint(fields=("user", "endpoint"), name="unique_user_push_endpoint")],
            },
        ),
        migrations.CreateModel(
            name="NotificationSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("morning_enabled", models.BooleanField(default=True)),
                ("morning_time", models.TimeField(default=datetime.time(9, 0))),
                ("morning_message", models.CharField(default="Time to check in!", max_length=255)),
                ("morning_user_types", models.JSONField(default=hr_portal.notifications.models.default_reminder_user_types)),
                ("evening_enabled", models.BooleanField(default=True)),
                ("evening_time", models.TimeField(default=datetime.time(18, 0))),
                ("evening_message", models.CharField(default="Time to check out!", max_length=255)),
                ("evening_user_types", models.JSONField(default=hr_portal.notifications.models.default_reminder_user_types)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("admin", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="notification_setting", to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
