from __future__ import annotations

import hmac
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from hr_portal.employees.api.permissions import IsAdminOrManagerOnly
from hr_portal.notifications.models import Notification
from hr_portal.notifications.models import NotificationSetting
from hr_portal.notifications.models import PushSubscription
from hr_portal.notifications.push import push_to_users
from hr_portal.notifications.reminders import send_scheduled_reminders

from .serializers import BroadcastSerializer
from .serializers import NotificationSerializer
from .serializers import NotificationSettingSerializer
from .serializers import SubscribeSerializer
from .serializers import UnsubscribeSerializer
from .serializers import default_settings_payload

logger = logging.getLogger(__name__)

User = get_user_model()

LIST_LIMIT = 50


@extend_schema_view(
    list=extend_schema(tags=["Notifications"]),
    create=extend_schema(tags=["Notifications"], request=BroadcastSerializer),
)
class NotificationViewSet(mixins.ListModelMixin, GenericViewSet):
    """Notifications for the authenticated user.

    - list: the caller's newest notifications
    - create: broadcast to user ids and/or user types (admins and managers)
    - mark_read / mark_all_read
    - subscribe / unsubscribe / vapid_key: browser push registration
    - reminder_settings: the caller's daily reminder schedule
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    pagination_class = None

    def get_queryset(self):
        return Notification.objects.filter(recipient=self.request.user)

    def get_permissions(self):
        if self.action == "create":
            return [IsAdminOrManagerOnly()]
        if self.action == "reminder_settings" and self.request.method == "POST":
            return [IsAdminOrManagerOnly()]
        if self.action == "vapid_key":
            return [AllowAny()]
        return super().get_permissions()

    def list(self, request, *args, **kwargs):
        notifications = self.get_queryset()[:LIST_LIMIT]
        return Response(self.get_serializer(notifications, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = BroadcastSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        recipient_ids = set(
            User.objects.filter(pk__in=data["user_ids"]).values_list("id", flat=True)
        )
        if data["user_types"]:
            recipient_ids.update(
                User.objects.filter(
                    is_active=True, user_type__in=data["user_types"]
                ).values_list("id", flat=True)
            )
        if not recipient_ids:
            return Response(
                {"detail": "No recipients resolved from payload."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        with transaction.atomic():
            created = [
                Notification.objects.create(
                    recipient_id=rid,
                    title=data["title"],
                    message=data["message"],
                    notification_type=data["notification_type"],
                    reference_id=data["reference_id"],
                )
                for rid in sorted(recipient_ids)
            ]
        sent, failed = push_to_users(
            recipient_ids,
            {
                "title": data["title"],
                "body": data["message"],
                "type": data["notification_type"],
            },
        )
        logger.info(
            "Broadcast %r by %s to %d users (%d pushed, %d failed)",
            data["title"],
            request.user.pk,
            len(created),
            sent,
            failed,
        )
        return Response(
            {
                "notifications": len(created),
                "sent": sent,
                "failed": failed,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Notifications"], request=None)
    @action(detail=True, methods=["post"], url_path="mark-read")
    def mark_read(self, request, pk=None):
        notification = self.get_object()
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=["is_read", "read_at"])
        return Response(self.get_serializer(notification).data)

    @extend_schema(tags=["Notifications"], request=None)
    @action(detail=False, methods=["post"], url_path="mark-all-read")
    def mark_all_read(self, request):
        updated = (
            self.get_queryset()
            .filter(is_read=False)
            .update(is_read=True, read_at=timezone.now())
        )
        return Response({"updated_count": updated})

    @extend_schema(tags=["Notifications"], request=SubscribeSerializer)
    @action(detail=False, methods=["post"], url_path="subscribe")
    def subscribe(self, request):
        serializer = SubscribeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        _, created = PushSubscription.objects.update_or_create(
            user=request.user,
            endpoint=data["endpoint"],
            defaults={
                "p256dh": data["keys"]["p256dh"],
                "auth": data["keys"]["auth"],
            },
        )
        return Response(
            {"message": "Subscribed"},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(tags=["Notifications"], request=UnsubscribeSerializer)
    @action(detail=False, methods=["post"], url_path="unsubscribe")
    def unsubscribe(self, request):
        serializer = UnsubscribeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        deleted, _ = PushSubscription.objects.filter(
            user=request.user, endpoint=serializer.validated_data["endpoint"]
        ).delete()
        return Response({"deleted": deleted})

    @extend_schema(tags=["Notifications"])
    @action(detail=False, methods=["get"], url_path="vapid-key")
    def vapid_key(self, request):
        return Response({"public_key": settings.VAPID_PUBLIC_KEY})

    @extend_schema(tags=["Notifications"], request=NotificationSettingSerializer)
    @action(detail=False, methods=["get", "post"], url_path="settings")
    def reminder_settings(self, request):
        setting = NotificationSetting.objects.filter(admin=request.user).first()
        if request.method == "GET":
            if setting is None:
                return Response(default_settings_payload())
            return Response(NotificationSettingSerializer(setting).data)

        serializer = NotificationSettingSerializer(setting, data=request.data)
        serializer.is_valid(raise_exception=True)
        setting = serializer.save(admin=request.user)
        return Response(NotificationSettingSerializer(setting).data)


@extend_schema(tags=["Notifications"], request=None)
class CronSendNotificationsView(APIView):
    """Reminder sweep for external schedulers; needs ``Bearer <CRON_SECRET>``."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def _authorized(self, request) -> bool:
        secret = getattr(settings, "CRON_SECRET", "")
        header = request.headers.get("Authorization", "")
        return bool(secret) and hmac.compare_digest(header, f"Bearer {secret}")

    def _sweep(self, request):
        if not self._authorized(request):
            return Response(
                {"detail": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED
            )
        return Response(send_scheduled_reminders())

    def get(self, request):
        return self._sweep(request)

    def post(self, request):
        return self._sweep(request)
