"""Dynasty API package - FastAPI front end for the personality engine."""

from dynasty.api.main import app, create_app

__all__ = ["app", "create_app"]
