from django.contrib import admin

from hr_portal.notifications import models


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "recipient", "title", "notification_type", "is_read"]
    search_fields = ["title", "message", "notification_type", "reference_id"]
    list_filter = ["notification_type", "is_read", "created_at"]


@admin.register(models.PushSubscription)
class PushSubscriptionAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "created_at", "updated_at"]
    search_fields = ["user__email", "endpoint"]


@admin.register(models.NotificationSetting)
class NotificationSettingAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "admin",
        "morning_enabled",
        "morning_time",
        "evening_enabled",
        "evening_time",
    ]
