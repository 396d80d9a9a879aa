"""Access token helpers for Google Cloud REST clients."""

from .tokens import (
    AccessToken,
    GoogleADCTokenSource,
    StaticTokenSource,
    TokenProvider,
    TokenSource,
    build_token_provider,
)

__all__ = [
    "AccessToken",
    "GoogleADCTokenSource",
    "StaticTokenSource",
    "TokenProvider",
    "TokenSource",
    "build_token_provider",
]
