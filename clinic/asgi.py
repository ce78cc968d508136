"""
ASGI config for the clinic project.

Only plain HTTP is served; the appointments API has no WebSocket routes.
"""
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clinic.settings")

from django.core.asgi import get_asgi_application  # noqa: E402

application = get_asgi_application()
