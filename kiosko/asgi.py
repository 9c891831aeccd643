"""
ASGI config for the kiosko project.

Kiosks only poll over HTTP, so this is the plain Django ASGI handler.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "kiosko.settings")

application = get_asgi_application()
