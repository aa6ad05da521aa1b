"""Server clock endpoints used by the frontend to avoid trusting device time."""

from __future__ import annotations

import datetime as dt
import json
import logging
from http.client import HTTPException
from urllib.request import urlopen

from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone

from hr_portal.policies.accessors import portal_now
from hr_portal.policies.accessors import portal_time_zone

logger = logging.getLogger(__name__)

IST = dt.timezone(dt.timedelta(hours=5, minutes=30), name="IST")
REMOTE_TIMEOUT_SECONDS = 3


def _millis(moment: dt.datetime) -> int:
    return int(moment.timestamp() * 1000)


def server_time(request):
    now = timezone.now()
    ist = now.astimezone(IST)
    return JsonResponse(
        {
            "utc_time": now.isoformat(),
            "timestamp": _millis(now),
            "ist_time": ist.strftime("%d/%m/%Y, %I:%M:%S %p"),
            "ist_iso": ist.isoformat(),
        }
    )


def fetch_remote_time() -> dt.datetime:
    with urlopen(  # noqa: S310 - URL comes from settings
        settings.WORLD_TIME_API_URL, timeout=REMOTE_TIMEOUT_SECONDS
    ) as response:
        payload = json.loads(response.read().decode("utf-8"))
    return dt.datetime.fromisoformat(payload["datetime"])


def current_time(request):
    try:
        moment = fetch_remote_time()
        source = "worldtimeapi"
    except (OSError, HTTPException, ValueError, KeyError) as exc:
        logger.warning("World time lookup failed, using server clock: %s", exc)
        moment = portal_now()
        source = "server-fallback"
    return JsonResponse(
        {
            "time": moment.isoformat(),
            "timestamp": _millis(moment),
            "timezone": str(portal_time_zone()),
            "source": source,
        }
    )
