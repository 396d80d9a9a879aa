"""Provider discovery feature."""

from .routes import router

__all__ = ["router"]
