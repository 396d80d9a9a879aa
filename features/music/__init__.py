"""Music generation feature."""

from .routes import router

__all__ = ["router"]
