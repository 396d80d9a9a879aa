"""Utility helpers shared across core packages.

Kept limited to environment helpers so importing ``core.utils`` never pulls
in provider or feature modules.
"""

from .env import get_env, get_env_float, get_env_int, get_node_env, is_local, is_production

__all__ = [
    "get_env",
    "get_env_float",
    "get_env_int",
    "get_node_env",
    "is_local",
    "is_production",
]
