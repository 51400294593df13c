"""Shared fixtures and fakes for the test suite."""
import time

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from sentinel_trade.cache import (BackendAvailability, FallbackStore,
                                  ResilientCache)
from sentinel_trade.providers.core import PriceProviderABC
from sentinel_trade.registry import AlertRegistry
from sentinel_trade.schemas import PricePoint, PriceSnapshot, TopGainer


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRemote(FallbackStore):
    """In-memory stand-in for RedisStore; raises like a dead server when `down` is set."""

    def __init__(self, clock=None) -> None:
        super().__init__(clock or time.monotonic)
        self.down = False
        self.calls: list[str] = []
        self.closed = False

    def _check(self, op: str) -> None:
        self.calls.append(op)
        if self.down:
            raise RedisConnectionError("Connection refused")

    async def ping(self) -> bool:
        self._check("ping")
        return True

    async def get(self, key):
        self._check("get")
        return await super().get(key)

    async def set(self, key, value, ttl=None):
        self._check("set")
        await super().set(key, value, ttl)

    async def delete(self, *keys):
        self._check("delete")
        return await super().delete(*keys)

    async def keys_with_prefix(self, prefix):
        self._check("scan")
        return await super().keys_with_prefix(prefix)

    async def close(self) -> None:
        self.closed = True


class FakePriceProvider(PriceProviderABC):
    """Serves prices from a dict; set `error` to make get_prices raise."""

    def __init__(self, prices: dict[str, float] | None = None) -> None:
        self.prices: dict[str, float] = dict(prices or {})
        self.error: Exception | None = None
        self.requests: list[list[str]] = []
        self.gainer_calls = 0
        self.closed = False

    async def get_prices(self, symbols):
        self.requests.append(list(symbols))
        if self.error is not None:
            raise self.error
        return {
            s: PriceSnapshot(symbol=s, price=self.prices[s], change_24h=1.5)
            for s in symbols
            if s in self.prices
        }

    async def get_top_gainers(self, limit=10):
        self.gainer_calls += 1
        return [
            TopGainer(symbol=s, name=s.title(), price=p, change_24h=10.0)
            for s, p in list(self.prices.items())[:limit]
        ]

    async def get_price_history(self, symbol, days=30):
        return [PricePoint(timestamp="2024-01-01T00:00:00Z", price=self.prices[symbol])]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fallback(clock) -> FallbackStore:
    return FallbackStore(clock=clock)


@pytest.fixture
def remote(clock) -> FakeRemote:
    return FakeRemote(clock)


@pytest.fixture
def cache(remote, fallback, clock) -> ResilientCache:
    """Facade over a healthy fake remote (call connect() to mark it available)."""
    return ResilientCache(
        remote, fallback, BackendAvailability(reprobe_seconds=30, clock=clock)
    )


@pytest.fixture
def memory_cache(clock) -> ResilientCache:
    """Facade with no remote configured at all."""
    return ResilientCache(None, FallbackStore(clock=clock))


@pytest.fixture
def registry(memory_cache) -> AlertRegistry:
    return AlertRegistry(memory_cache)


@pytest.fixture
def provider() -> FakePriceProvider:
    return FakePriceProvider({"DOT": 4.9, "BTC": 60000.0})
