"""OAuth access token cache shared by Google REST clients.

Tokens are cached per scope set. When a cached token is missing or about to
expire, exactly one refresh runs per scope set; concurrent callers wait on the
same lock and reuse the fresh token.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional, Protocol, Tuple

import google.auth
import google.auth.exceptions
import google.auth.transport.requests

from core.exceptions import CredentialsNotConfiguredError, TokenRefreshError
from core.utils.env import get_env

logger = logging.getLogger(__name__)

ScopeKey = Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AccessToken:
    value: str
    expires_at: Optional[float] = None

    def is_valid(self, now: float, leeway: float) -> bool:
        if not self.value:
            return False
        if self.expires_at is None:
            return True
        return now + leeway < self.expires_at


class TokenSource(Protocol):
    async def fetch(self, scopes: ScopeKey) -> AccessToken:
        ...


def _expiry_timestamp(expiry: datetime | None) -> Optional[float]:
    if expiry is None:
        return None
    if expiry.tzinfo is None:
        # google-auth reports naive UTC datetimes
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry.timestamp()


class GoogleADCTokenSource:
    """Application Default Credentials through google-auth."""

    def __init__(self, *, quota_project_id: str | None = None) -> None:
        self._quota_project_id = quota_project_id
        self._credentials: Dict[ScopeKey, Any] = {}

    def _refresh(self, scopes: ScopeKey) -> AccessToken:
        credentials = self._credentials.get(scopes)
        if credentials is None:
            credentials, _ = google.auth.default(scopes=list(scopes), quota_project_id=self._quota_project_id)
            self._credentials[scopes] = credentials
        credentials.refresh(google.auth.transport.requests.Request())
        return AccessToken(value=credentials.token, expires_at=_expiry_timestamp(credentials.expiry))

    async def fetch(self, scopes: ScopeKey) -> AccessToken:
        try:
            return await asyncio.to_thread(self._refresh, scopes)
        except google.auth.exceptions.DefaultCredentialsError as exc:
            raise CredentialsNotConfiguredError(
                f"Google Application Default Credentials not found: {exc}"
            ) from exc
        except google.auth.exceptions.GoogleAuthError as exc:
            raise TokenRefreshError(
                f"Failed to refresh Google access token: {exc}",
                scopes=scopes,
                original_error=exc,
            ) from exc


class StaticTokenSource:
    """Fixed bearer token, used for local development and tests."""

    def __init__(self, token: str, *, expires_in: float | None = None, clock: Callable[[], float] = time.time) -> None:
        self._token = token
        self._expires_in = expires_in
        self._clock = clock
        self.fetch_count = 0

    async def fetch(self, scopes: ScopeKey) -> AccessToken:
        self.fetch_count += 1
        expires_at = self._clock() + self._expires_in if self._expires_in is not None else None
        return AccessToken(value=self._token, expires_at=expires_at)


class TokenProvider:
    """Cache access tokens per scope set with single-flight refresh."""

    def __init__(
        self,
        source: TokenSource,
        *,
        refresh_leeway_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._source = source
        self._leeway = refresh_leeway_seconds
        self._clock = clock
        self._tokens: Dict[ScopeKey, AccessToken] = {}
        self._locks: Dict[ScopeKey, asyncio.Lock] = {}

    @staticmethod
    def scope_key(scopes: Iterable[str]) -> ScopeKey:
        return tuple(sorted(set(scopes)))

    def _cached(self, key: ScopeKey) -> Optional[str]:
        token = self._tokens.get(key)
        if token is not None and token.is_valid(self._clock(), self._leeway):
            return token.value
        return None

    async def get_token(self, scopes: Iterable[str]) -> str:
        key = self.scope_key(scopes)
        cached = self._cached(key)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = self._cached(key)
            if cached is not None:
                return cached
            logger.debug("Refreshing access token for scopes %s", key)
            token = await self._source.fetch(key)
            if not token.value:
                raise TokenRefreshError("Token source returned an empty token", scopes=key)
            self._tokens[key] = token
            return token.value

    def invalidate(self, scopes: Iterable[str] | None = None) -> None:
        if scopes is None:
            self._tokens.clear()
            return
        self._tokens.pop(self.scope_key(scopes), None)


def build_token_provider() -> TokenProvider:
    """Return a provider backed by ``GOOGLE_ACCESS_TOKEN`` or ADC."""

    static_token = get_env("GOOGLE_ACCESS_TOKEN")
    if static_token:
        logger.info("Using static Google access token from environment")
        return TokenProvider(StaticTokenSource(static_token))
    return TokenProvider(GoogleADCTokenSource())


__all__ = [
    "AccessToken",
    "GoogleADCTokenSource",
    "StaticTokenSource",
    "TokenProvider",
    "TokenSource",
    "build_token_provider",
]
