"""ASGI entrypoint for the around API."""

from around.api.app import create_app
from around.containers import build_container

app = create_app(build_container())
