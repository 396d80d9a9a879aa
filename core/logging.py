"""Logging configuration for the generative media backend.

``setup_logging`` is called once from ``main.py``. Every module then logs
through ``logging.getLogger(__name__)``.

Environment:
    BACKEND_LOG_LEVEL          root level (default INFO)
    BACKEND_LOG_CONSOLE_LEVEL  console handler level
    BACKEND_LOG_FILE_LEVEL     file handler level (containers only)
    BACKEND_LOG_DIR / BACKEND_LOG_FILE / BACKEND_LOG_RETENTION
    BACKEND_LOG_TIME_MS        add milliseconds to timestamps
    BACKEND_ACCESS_LOG_LEVEL   uvicorn access log level (default WARNING)
"""
from __future__ import annotations

import logging
import logging.config
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.utils.env import get_env, get_env_int, get_node_env

_TRIMMED_PREFIXES = ("/app/",)
_DEFAULT_LOG_DIR = "/storage/logs"
_DEFAULT_LOG_FILE = "genmedia.log"

# Vendor SDKs and transports that log every request at INFO
_WARNING_ONLY = (
    "PIL",
    "httpcore",
    "httpx",
    "urllib3",
    "h11",
    "botocore",
    "boto3",
    "s3transfer",
    "openai",
    "google.auth",
    "multipart",
    "python_multipart",
)
_CRITICAL_ONLY = ("google.genai",)

_configured = False
_base_record_factory = logging.getLogRecordFactory()


@dataclass(frozen=True, slots=True)
class LoggingOptions:
    level: str = "INFO"
    console_level: str = "INFO"
    file_level: str = "INFO"
    access_level: str = "WARNING"
    log_file: Optional[Path] = None
    retention_days: int = 7
    milliseconds: bool = False

    @classmethod
    def from_env(cls) -> "LoggingOptions":
        level = _level(get_env("BACKEND_LOG_LEVEL"), "INFO")
        node_env = get_node_env()
        log_file = None
        if node_env and node_env != "local":
            log_dir = Path(get_env("BACKEND_LOG_DIR", default=_DEFAULT_LOG_DIR) or _DEFAULT_LOG_DIR)
            log_file = log_dir / (get_env("BACKEND_LOG_FILE", default=_DEFAULT_LOG_FILE) or _DEFAULT_LOG_FILE)
        return cls(
            level=level,
            console_level=_level(get_env("BACKEND_LOG_CONSOLE_LEVEL"), level),
            file_level=_level(get_env("BACKEND_LOG_FILE_LEVEL"), level),
            access_level=_level(get_env("BACKEND_ACCESS_LOG_LEVEL"), "WARNING"),
            log_file=log_file,
            retention_days=get_env_int("BACKEND_LOG_RETENTION", 7),
            milliseconds=(get_env("BACKEND_LOG_TIME_MS", default="") or "").lower() in {"1", "true", "yes", "on"},
        )


class _SkipHealthProbes(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        return "/health" not in record.getMessage()


def _level(value: Optional[str], fallback: str) -> str:
    candidate = (value or "").strip().upper()
    return candidate if isinstance(getattr(logging, candidate, None), int) else fallback


def _short_path_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
    record = _base_record_factory(*args, **kwargs)
    path = record.pathname or ""
    record.shortpathname = next(
        (path[len(prefix):] for prefix in _TRIMMED_PREFIXES if path.startswith(prefix)),
        path,
    )
    return record


def build_logging_config(options: LoggingOptions) -> Dict[str, Any]:
    """Return the ``dictConfig`` mapping for ``options``."""

    timestamp = "%(asctime)s.%(msecs)03d" if options.milliseconds else "%(asctime)s"
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": options.console_level,
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        },
    }
    active: List[str] = ["console"]
    if options.log_file is not None:
        handlers["file"] = {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "level": options.file_level,
            "formatter": "standard",
            "filename": str(options.log_file),
            "when": "midnight",
            "backupCount": options.retention_days,
            "encoding": "utf-8",
        }
        active.append("file")

    server_logger = {"level": "WARNING", "handlers": active, "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": f"{timestamp} %(levelname)s [%(shortpathname)s:%(lineno)d] - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "root": {"level": options.level, "handlers": active},
        "loggers": {
            "uvicorn": dict(server_logger),
            "uvicorn.error": dict(server_logger),
            "uvicorn.access": {"level": options.access_level, "handlers": ["console"], "propagate": False},
        },
    }


def setup_logging(force: bool = False, options: Optional[LoggingOptions] = None) -> None:
    """Configure console (and in containers, rotating file) logging once per process."""

    global _configured
    if _configured and not force:
        return

    options = options or LoggingOptions.from_env()
    if options.log_file is not None:
        options.log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.setLogRecordFactory(_short_path_factory)
    logging.config.dictConfig(build_logging_config(options))
    logging.captureWarnings(True)

    for name in _WARNING_ONLY:
        logging.getLogger(name).setLevel(logging.WARNING)
    for name in _CRITICAL_ONLY:
        logging.getLogger(name).setLevel(logging.CRITICAL)
    logging.getLogger("uvicorn.access").addFilter(_SkipHealthProbes())

    _configured = True


__all__ = ["LoggingOptions", "build_logging_config", "setup_logging"]
