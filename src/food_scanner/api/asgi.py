"""ASGI entrypoint for the food scanner API.

Serve ``food_scanner.api.asgi:app`` with any ASGI server; settings come from the
environment (``ADMIN_PASSWORD`` is required).
"""

from food_scanner.api.app import create_app
from food_scanner.config import Settings
from food_scanner.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
