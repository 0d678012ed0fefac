"""Portside HTTP API.

FastAPI service exposing the capability-gated dog resource and the
cookie-held boat name actions.
"""

from .server import create_app  # noqa: F401
