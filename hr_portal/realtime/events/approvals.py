from __future__ import annotations

import logging
from typing import Any

from hr_portal.realtime.socketio import emit_event_to_employee

logger = logging.getLogger(__name__)


def publish_request_status_changed(
    *, kind: str, request_id: int, employee_id: int, status: str
) -> None:
    """Tell the request owner's open sessions that a status moved."""

    payload: dict[str, Any] = {"kind": kind, "id": request_id, "status": status}
    try:
        emit_event_to_employee(employee_id, "request_status", payload)
    except Exception:
        logger.exception("Realtime emit failed for %s %s", kind, request_id)
