from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from hr_portal.realtime.socketio import emit_event_to_user

if TYPE_CHECKING:  # import for type checking only
    from hr_portal.notifications.models import Notification

logger = logging.getLogger(__name__)


def build_notification_payload(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.notification_type,
        "reference_id": notification.reference_id,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


def publish_notification_created(notification: Notification) -> None:
    """Publish a newly created Notification to the recipient in realtime.

    Delivery is best effort; the notification row is already committed.
    """

    payload = build_notification_payload(notification)
    try:
        emit_event_to_user(notification.recipient_id, "notification", payload)
    except Exception:
        logger.exception(
            "Realtime emit failed for notification %s", notification.id
        )
