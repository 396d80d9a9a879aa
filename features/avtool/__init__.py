"""ffmpeg-backed audio and video processing feature."""

from .routes import router

__all__ = ["router"]
