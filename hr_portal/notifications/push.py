"""Web Push delivery over VAPID."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings
from pywebpush import WebPushException
from pywebpush import webpush

from hr_portal.notifications.models import PushSubscription

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Push services answer these for endpoints that will never accept messages again.
GONE_STATUS_CODES = {404, 410}


def vapid_claims() -> dict[str, str]:
    return {"sub": f"mailto:{settings.VAPID_CLAIMS_EMAIL}"}


def send_push(subscription: PushSubscription, payload: dict[str, Any]) -> bool:
    """Deliver one payload; expired endpoints are removed."""

    try:
        webpush(
            subscription_info=subscription.as_subscription_info(),
            data=json.dumps(payload),
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_claims=vapid_claims(),
        )
    except WebPushException as exc:
        status_code = getattr(exc.response, "status_code", None)
        if status_code in GONE_STATUS_CODES:
            logger.info(
                "Push endpoint gone (%s); removing subscription %s",
                status_code,
                subscription.pk,
            )
            subscription.delete()
        else:
            logger.warning(
                "Push to subscription %s failed: %s", subscription.pk, exc
            )
        return False
    return True


def push_to_users(user_ids: Iterable[int], payload: dict[str, Any]) -> tuple[int, int]:
    """Push ``payload`` to every subscription of ``user_ids``.

    Returns ``(sent, failed)``.
    """

    sent = failed = 0
    subscriptions = PushSubscription.objects.filter(user_id__in=list(user_ids))
    for subscription in subscriptions:
        if send_push(subscription, payload):
            sent += 1
        else:
            failed += 1
    return sent, failed
