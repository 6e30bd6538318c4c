"""HTTP layer (FastAPI)."""

from threadmail.web.server import create_app

__all__ = ["create_app"]
