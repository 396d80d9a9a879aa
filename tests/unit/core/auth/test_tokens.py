"""Tests for the per-scope access token cache."""

import asyncio

import pytest

from core.auth import tokens as tokens_module
from core.auth.tokens import AccessToken, GoogleADCTokenSource, StaticTokenSource, TokenProvider, build_token_provider
from core.exceptions import TokenRefreshError


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class SlowSource:
    def __init__(self) -> None:
        self.fetches = 0

    async def fetch(self, scopes):
        self.fetches += 1
        await asyncio.sleep(0.01)
        return AccessToken(value=f"token-{self.fetches}", expires_at=None)


@pytest.mark.anyio("asyncio")
async def test_tokens_cached_per_scope_set():
    source = StaticTokenSource("abc")
    provider = TokenProvider(source)

    assert await provider.get_token(["b", "a"]) == "abc"
    assert await provider.get_token(["a", "b", "a"]) == "abc"
    assert source.fetch_count == 1

    await provider.get_token(["c"])
    assert source.fetch_count == 2


@pytest.mark.anyio("asyncio")
async def test_concurrent_callers_share_one_refresh():
    source = SlowSource()
    provider = TokenProvider(source)

    results = await asyncio.gather(*(provider.get_token(["scope"]) for _ in range(5)))

    assert results == ["token-1"] * 5
    assert source.fetches == 1


@pytest.mark.anyio("asyncio")
async def test_token_refreshed_inside_leeway_window():
    clock = FakeClock()
    source = StaticTokenSource("abc", expires_in=300, clock=clock)
    provider = TokenProvider(source, refresh_leeway_seconds=60, clock=clock)

    await provider.get_token(["scope"])
    clock.now += 200
    await provider.get_token(["scope"])
    assert source.fetch_count == 1

    clock.now += 50
    await provider.get_token(["scope"])
    assert source.fetch_count == 2


@pytest.mark.anyio("asyncio")
async def test_invalidate_forces_refresh():
    source = StaticTokenSource("abc")
    provider = TokenProvider(source)

    await provider.get_token(["scope"])
    provider.invalidate(["scope"])
    await provider.get_token(["scope"])
    assert source.fetch_count == 2


@pytest.mark.anyio("asyncio")
async def test_empty_token_is_an_error():
    provider = TokenProvider(StaticTokenSource(""))

    with pytest.raises(TokenRefreshError):
        await provider.get_token(["scope"])


def test_build_token_provider_prefers_static_env_token(monkeypatch):
    monkeypatch.setenv("GOOGLE_ACCESS_TOKEN", "from-env")
    provider = build_token_provider()
    assert isinstance(provider._source, StaticTokenSource)

    monkeypatch.delenv("GOOGLE_ACCESS_TOKEN")
    provider = build_token_provider()
    assert isinstance(provider._source, GoogleADCTokenSource)


def test_expiry_timestamp_treats_naive_datetimes_as_utc():
    from datetime import datetime, timezone

    naive = datetime(2025, 1, 1, 12, 0, 0)
    aware = naive.replace(tzinfo=timezone.utc)
    assert tokens_module._expiry_timestamp(naive) == aware.timestamp()
    assert tokens_module._expiry_timestamp(None) is None
