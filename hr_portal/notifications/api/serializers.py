from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import serializers

from hr_portal.notifications.models import DEFAULT_EVENING_MESSAGE
from hr_portal.notifications.models import DEFAULT_EVENING_TIME
from hr_portal.notifications.models import DEFAULT_MORNING_MESSAGE
from hr_portal.notifications.models import DEFAULT_MORNING_TIME
from hr_portal.notifications.models import Notification
from hr_portal.notifications.models import NotificationSetting
from hr_portal.notifications.models import default_reminder_user_types

User = get_user_model()

HHMM = "%H:%M"
TIME_INPUTS = [HHMM, "%H:%M:%S"]


class NotificationSerializer(serializers.ModelSerializer):
    """Read serializer for notifications."""

    class Meta:
        model = Notification
        fields = (
            "id",
            "title",
            "message",
            "notification_type",
            "reference_id",
            "is_read",
            "read_at",
            "created_at",
        )
        read_only_fields = fields


class BroadcastSerializer(serializers.Serializer):
    """Targets are user ids, user types, or both; at least one is required."""

    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    notification_type = serializers.ChoiceField(
        choices=Notification.Type.choices,
        required=False,
        default=Notification.Type.OTHER,
    )
    reference_id = serializers.CharField(
        required=False, allow_blank=True, default=""
    )
    user_ids = serializers.ListField(
        child=serializers.IntegerField(), required=False, default=list
    )
    user_types = serializers.ListField(
        child=serializers.ChoiceField(choices=User.UserType.choices),
        required=False,
        default=list,
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not attrs["user_ids"] and not attrs["user_types"]:
            msg = "Provide user_ids or user_types."
            raise serializers.ValidationError(msg)
        return attrs


class SubscriptionKeysSerializer(serializers.Serializer):
    p256dh = serializers.CharField(max_length=255)
    auth = serializers.CharField(max_length=255)


class SubscribeSerializer(serializers.Serializer):
    endpoint = serializers.URLField(max_length=2000)
    keys = SubscriptionKeysSerializer()


class UnsubscribeSerializer(serializers.Serializer):
    endpoint = serializers.CharField()


class NotificationSettingSerializer(serializers.ModelSerializer):
    morning_time = serializers.TimeField(
        format=HHMM, input_formats=TIME_INPUTS, default=DEFAULT_MORNING_TIME
    )
    evening_time = serializers.TimeField(
        format=HHMM, input_formats=TIME_INPUTS, default=DEFAULT_EVENING_TIME
    )
    morning_user_types = serializers.ListField(
        child=serializers.ChoiceField(choices=User.UserType.choices),
        default=default_reminder_user_types,
    )
    evening_user_types = serializers.ListField(
        child=serializers.ChoiceField(choices=User.UserType.choices),
        default=default_reminder_user_types,
    )

    class Meta:
        model = NotificationSetting
        fields = (
            "morning_enabled",
            "morning_time",
            "morning_message",
            "morning_user_types",
            "evening_enabled",
            "evening_time",
            "evening_message",
            "evening_user_types",
        )


def default_settings_payload() -> dict[str, Any]:
    return {
        "morning_enabled": True,
        "morning_time": DEFAULT_MORNING_TIME.strftime(HHMM),
        "morning_message": DEFAULT_MORNING_MESSAGE,
        "morning_user_types": default_reminder_user_types(),
        "evening_enabled": True,
        "evening_time": DEFAULT_EVENING_TIME.strftime(HHMM),
        "evening_message": DEFAULT_EVENING_MESSAGE,
        "evening_user_types": default_reminder_user_types(),
    }
