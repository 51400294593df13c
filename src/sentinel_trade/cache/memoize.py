"""Memoization of expensive external calls in the resilient cache."""
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sentinel_trade.cache.keys import memo_key
from sentinel_trade.cache.resilient import ResilientCache

logger = logging.getLogger(__name__)


class MemoizedCall:
    """Cache JSON-serializable results under {feature}:{discriminator}:{params_hash}."""

    def __init__(self, cache: ResilientCache) -> None:
        self._cache = cache

    async def get_or_compute(
        self,
        feature: str,
        discriminator: str | int,
        params: dict[str, Any] | None,
        ttl: int,
        compute: Callable[[], Awaitable[Any]],
        *,
        force_refresh: bool = False,
    ) -> Any:
        """Return the cached result or run compute() and cache it for ttl seconds.

        Errors from compute() propagate and nothing is cached.
        """
        key = memo_key(feature, discriminator, params)
        if not force_refresh:
            raw = await self._cache.get(key)
            if raw is not None:
                try:
                    result = json.loads(raw)
                except json.JSONDecodeError as exc:
                    logger.warning("Ignoring malformed memoized entry %s: %s", key, exc)
                else:
                    logger.debug("Cache hit for %s", key)
                    return result
        result = await compute()
        await self._cache.set(key, json.dumps(result, default=str), ttl)
        return result
