"""
WSGI config for hr_portal project.

Exposes the module-level ``application`` used by ``runserver`` and WSGI
servers. Realtime delivery needs the ASGI entry point in ``config.asgi``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

application = get_wsgi_application()
