"""ASGI entrypoint for the food health API."""

from food_health.api.app import create_app
from food_health.containers import build_container

app = create_app(build_container())
