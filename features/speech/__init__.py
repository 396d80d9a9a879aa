"""Speech synthesis feature."""

from .routes import router

__all__ = ["router"]
