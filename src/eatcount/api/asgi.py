"""ASGI entrypoint for the meal nutrition API."""

from eatcount.api.app import create_app
from eatcount.containers import build_container

app = create_app(build_container())
