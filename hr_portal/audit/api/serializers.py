from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from hr_portal.audit.models import AuditLog

User = get_user_model()

DEFAULT_LIMIT = 5
MAX_LIMIT = 50


class AuditActorSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "name", "user_type"]


class AuditLogSerializer(serializers.ModelSerializer):
    actor = AuditActorSerializer(allow_null=True, read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "action",
            "message",
            "model_name",
            "record_id",
            "before",
            "after",
            "ip_address",
            "created_at",
            "actor",
        ]
        read_only_fields = fields


class RecentAuditQuerySerializer(serializers.Serializer):
    """Query parameters of the recent-activity feed.

    A ``limit`` that is not a number falls back to the default; numbers are
    clamped to ``1..MAX_LIMIT``.
    """

    limit = serializers.CharField(required=False)
    model = serializers.CharField(required=False, allow_blank=True)
    record_id = serializers.IntegerField(required=False, min_value=1)
    action = serializers.CharField(required=False, allow_blank=True)

    def validate_limit(self, value: str) -> int:
        try:
            limit = int(value)
        except (TypeError, ValueError):
            return DEFAULT_LIMIT
        return max(1, min(limit, MAX_LIMIT))

    def validate(self, attrs):
        attrs.setdefault("limit", DEFAULT_LIMIT)
        return attrs
