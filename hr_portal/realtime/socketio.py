"""Socket.IO server pushing portal events to signed-in browsers.

Clients connect on ``/ws/notifications`` with their JWT access token, either
as ``?token=`` or as ``auth: {token}``. Each connection joins:

- ``user_<id>``: notifications for the account
- ``employee_<id>``: request status changes, when the account is linked
- ``role_<user_type>``: role-wide announcements
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError

logger = logging.getLogger(__name__)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",
    logger=False,
    engineio_logger=False,
)


@dataclass(frozen=True)
class PortalSession:
    user_id: int
    user_type: str
    employee_id: int | None
    unread: int

    def rooms(self) -> list[str]:
        rooms = [room_for_user(self.user_id), room_for_role(self.user_type)]
        if self.employee_id is not None:
            rooms.append(room_for_employee(self.employee_id))
        return rooms


def room_for_user(user_id: int) -> str:
    return f"user_{int(user_id)}"


def room_for_role(user_type: str) -> str:
    return f"role_{'_'.join(user_type.strip().lower().split())}"


def room_for_employee(employee_id: int) -> str:
    return f"employee_{int(employee_id)}"


@database_sync_to_async
def _load_session(token: str) -> PortalSession:
    jwt_auth = JWTAuthentication()
    user = jwt_auth.get_user(jwt_auth.get_validated_token(token))
    employee = getattr(user, "employee", None)
    return PortalSession(
        user_id=int(user.pk),
        user_type=str(getattr(user, "user_type", "") or "employee"),
        employee_id=getattr(employee, "pk", None),
        unread=user.notifications.filter(is_read=False).count(),
    )


def token_from_handshake(environ: dict[str, Any], auth: Any | None) -> str | None:
    """The access token from the query string, else from the auth payload."""

    scope = environ.get("asgi.scope", environ)
    raw = scope.get("query_string") or scope.get("QUERY_STRING") or ""
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode(errors="ignore")
    token = parse_qs(str(raw)).get("token", [None])[0]
    if not token and isinstance(auth, dict):
        token = auth.get("token")
    return token if isinstance(token, str) and token else None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = token_from_handshake(environ, auth)
    if not token:
        msg = "unauthorized"
        raise ConnectionRefusedError(msg)

    try:
        session = await _load_session(token)
    except TokenError as exc:
        # The frontend refreshes its token on this reason.
        if "expired" in str(exc).lower():
            msg = "jwt_expired"
            raise ConnectionRefusedError(msg) from exc
        msg = "unauthorized"
        raise ConnectionRefusedError(msg) from exc
    except AuthenticationFailed as exc:
        msg = "unauthorized"
        raise ConnectionRefusedError(msg) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        msg = "server_error"
        raise ConnectionRefusedError(msg) from exc

    await sio.save_session(
        sid,
        {
            "user_id": session.user_id,
            "user_type": session.user_type,
            "employee_id": session.employee_id,
        },
    )
    for room in session.rooms():
        await sio.enter_room(sid, room)
    await sio.emit("unread_count", {"unread": session.unread}, to=sid)
    logger.debug("Socket.IO user %s connected (%s)", session.user_id, sid)


@sio.event
async def disconnect(sid: str):
    logger.debug("Socket.IO session %s closed", sid)


def emit_event_to_room(room: str, event: str, payload: dict[str, Any]) -> None:
    """Emit from synchronous Django code."""

    async_to_sync(sio.emit)(event, payload, room=room)


def emit_event_to_user(user_id: int, event: str, payload: dict[str, Any]) -> None:
    emit_event_to_room(room_for_user(user_id), event, payload)


def emit_event_to_employee(
    employee_id: int,
    event: str,
    payload: dict[str, Any],
) -> None:
    emit_event_to_room(room_for_employee(employee_id), event, payload)
