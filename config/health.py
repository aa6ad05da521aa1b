"""Liveness report for the database, the Celery broker and upload storage."""

from __future__ import annotations

import logging
import os
from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def check_db() -> None:
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1;")
        cursor.fetchone()


def check_redis() -> None:
    url = getattr(settings, "REDIS_URL", None) or getattr(
        settings, "CELERY_BROKER_URL", None
    )
    if not url:
        msg = "REDIS_URL not configured"
        raise RuntimeError(msg)
    client = redis.Redis.from_url(
        url,
        socket_timeout=0.5,
        socket_connect_timeout=0.5,
    )
    client.ping()


def check_media() -> None:
    """Overtime proofs and intern documents are written under MEDIA_ROOT."""

    root = str(settings.MEDIA_ROOT)
    os.makedirs(root, exist_ok=True)
    if not os.access(root, os.W_OK):
        msg = f"{root} is not writable"
        raise PermissionError(msg)


CHECKS = {
    "db": check_db,
    "redis": check_redis,
    "media": check_media,
}


def run_check(name: str) -> dict[str, Any]:
    try:
        CHECKS[name]()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        logger.warning("Health check %s failed: %s", name, exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def health(request):
    components = {name: run_check(name) for name in CHECKS}
    results = [component["ok"] for component in components.values()]

    if all(results):
        status = "ok"
    elif components["db"]["ok"]:
        status = "degraded"
    else:
        status = "down"

    return JsonResponse(
        {"status": status, "components": components},
        status=200 if all(results) else 503,
    )
