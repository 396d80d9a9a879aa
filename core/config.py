"""Settings dataclass assembled from the environment.

Domain-specific constants live in the config/ package. This module only
collects the values that the application wiring needs at startup:

- Google Cloud project, location, and bucket
- AWS region and bucket
- API keys for SDK-backed providers
- Default provider names per media kind
- Long-running operation polling schedule
- Scratch directory and ffmpeg binaries

``load_settings`` reads the environment every time it is called so tests can
monkeypatch variables without reloading modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from config import avtool as avtool_config
from config import aws as aws_config
from config import gcp as gcp_config
from config import providers as providers_config
from config import storage as storage_config
from config import video as video_config
from config.environment import get_node_env
from core.utils.env import get_env, get_env_float, get_env_int


@dataclass(frozen=True, slots=True)
class PollingSettings:
    """Backoff schedule for vendor long-running operations."""

    initial_delay_seconds: float = video_config.LRO_INITIAL_DELAY_SECONDS
    multiplier: float = video_config.LRO_BACKOFF_MULTIPLIER
    max_delay_seconds: float = video_config.LRO_MAX_DELAY_SECONDS
    max_attempts: int = video_config.LRO_MAX_ATTEMPTS


@dataclass(frozen=True, slots=True)
class Settings:
    """Dependency injection wrapper for application settings."""

    environment: str = "local"
    project_id: str = ""
    location: str = gcp_config.LOCATION
    gcs_bucket: str = ""
    aws_region: str = aws_config.AWS_REGION
    s3_bucket: str = ""
    google_api_key: str = ""
    openai_api_key: str = ""
    # Explicit overrides only; built-in preferences live in config.providers
    default_providers: Dict[str, str] = field(default_factory=dict)
    polling: PollingSettings = field(default_factory=PollingSettings)
    scratch_dir: Path = storage_config.SCRATCH_DIR
    ffmpeg_binary: str = avtool_config.FFMPEG_BINARY
    ffprobe_binary: str = avtool_config.FFPROBE_BINARY
    media_tool_timeout_seconds: float = avtool_config.MEDIA_TOOL_TIMEOUT_SECONDS
    port: int = 8080

    @property
    def vertex_enabled(self) -> bool:
        return bool(self.project_id)


def load_settings() -> Settings:
    """Build :class:`Settings` from the current process environment."""

    polling = PollingSettings(
        initial_delay_seconds=get_env_float(
            "LRO_INITIAL_DELAY_SECONDS", video_config.LRO_INITIAL_DELAY_SECONDS
        ),
        multiplier=get_env_float("LRO_BACKOFF_MULTIPLIER", video_config.LRO_BACKOFF_MULTIPLIER),
        max_delay_seconds=get_env_float("LRO_MAX_DELAY_SECONDS", video_config.LRO_MAX_DELAY_SECONDS),
        max_attempts=get_env_int("LRO_MAX_ATTEMPTS", video_config.LRO_MAX_ATTEMPTS),
    )

    default_providers = {}
    for kind in providers_config.DEFAULT_PROVIDERS:
        override = (get_env(f"{kind.upper()}_PROVIDER") or "").strip()
        if override:
            default_providers[kind] = override

    return Settings(
        environment=get_node_env(),
        project_id=(get_env("PROJECT_ID", default="") or "").strip(),
        location=(get_env("LOCATION", default=gcp_config.LOCATION) or gcp_config.LOCATION).strip(),
        gcs_bucket=(get_env("GCS_BUCKET", default="") or "").strip(),
        aws_region=get_env("AWS_REGION", default=aws_config.AWS_REGION) or aws_config.AWS_REGION,
        s3_bucket=(get_env("S3_BUCKET", default="") or "").strip(),
        google_api_key=get_env("GOOGLE_API_KEY", default="") or "",
        openai_api_key=get_env("OPENAI_API_KEY", default="") or "",
        default_providers=default_providers,
        polling=polling,
        scratch_dir=Path(get_env("GENMEDIA_SCRATCH_DIR", default=str(storage_config.SCRATCH_DIR))),
        ffmpeg_binary=get_env("FFMPEG_BINARY", default=avtool_config.FFMPEG_BINARY) or "ffmpeg",
        ffprobe_binary=get_env("FFPROBE_BINARY", default=avtool_config.FFPROBE_BINARY) or "ffprobe",
        media_tool_timeout_seconds=get_env_float(
            "MEDIA_TOOL_TIMEOUT_SECONDS", avtool_config.MEDIA_TOOL_TIMEOUT_SECONDS
        ),
        port=get_env_int("PORT", 8080),
    )


__all__ = ["PollingSettings", "Settings", "load_settings"]
