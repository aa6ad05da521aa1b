"""Audit trail writers.

Views record through ``audit_request``; an audit failure is logged and never
fails the request that triggered it.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model

from .models import AuditLog

logger = logging.getLogger(__name__)


def client_ip(request) -> str:
    if request is None:
        return ""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "") or ""


def log_action(  # noqa: PLR0913
    action: str,
    *,
    actor: object | None = None,
    instance: Any = None,
    message: str = "",
    model_name: str = "",
    record_id: int | None = None,
    before: dict | list | None = None,
    after: dict | list | None = None,
    ip_address: str = "",
) -> AuditLog:
    """Write one audit row.

    ``instance`` fills ``model_name`` and ``record_id`` when they are not
    given explicitly. Anonymous actors are stored as system entries.
    """

    if instance is not None:
        model_name = model_name or type(instance).__name__
        record_id = instance.pk if record_id is None else record_id
    actor_user = actor if isinstance(actor, get_user_model()) else None
    return AuditLog.objects.create(
        action=action,
        actor=actor_user,
        message=message,
        model_name=model_name,
        record_id=record_id,
        before=before,
        after=after,
        ip_address=ip_address,
    )


def audit_request(request, action: str, **fields) -> AuditLog | None:
    """Audit an API call on behalf of ``request.user``."""

    try:
        return log_action(
            action,
            actor=getattr(request, "user", None),
            ip_address=client_ip(request),
            **fields,
        )
    except Exception:
        logger.exception("Could not write audit entry %r", action)
        return None
