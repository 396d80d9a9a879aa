"""Environment detection and helpers."""

from __future__ import annotations

import os
from typing import Literal

Environment = Literal["local", "development", "production", "test"]


def get_node_env() -> Environment:
    """Return the current runtime environment label."""

    raw = os.getenv("NODE_ENV", "local").lower()
    if raw in ("local", "development", "production", "test"):
        return raw  # type: ignore[return-value]
    return "local"


ENVIRONMENT: Environment = get_node_env()
IS_LOCAL = ENVIRONMENT == "local"
IS_DEVELOPMENT = ENVIRONMENT == "development"
IS_PRODUCTION = ENVIRONMENT == "production"
IS_TEST = ENVIRONMENT == "test"

__all__ = [
    "Environment",
    "ENVIRONMENT",
    "IS_LOCAL",
    "IS_DEVELOPMENT",
    "IS_PRODUCTION",
    "IS_TEST",
    "get_node_env",
]
