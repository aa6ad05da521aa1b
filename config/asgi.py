"""
ASGI config for hr_portal project.

Socket.IO is mounted at ``/ws/notifications``; every other request goes to
Django.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

django_application = get_asgi_application()

from socketio import ASGIApp  # noqa: E402

from hr_portal.realtime.socketio import sio  # noqa: E402

# Socket.IO sits in front of Django because it handles both Engine.IO
# long-polling and websocket upgrades on the same path.
application = ASGIApp(
    sio,
    other_asgi_app=django_application,
    socketio_path="ws/notifications",
)
