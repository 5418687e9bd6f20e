"""ASGI entrypoint for the recipe intake API."""

from recipe_intake.api.app import create_app
from recipe_intake.containers import build_container

app = create_app(build_container())
