"""Redis adapter for the remote key/value cache."""
from __future__ import annotations

import redis.asyncio
from redis.asyncio import Redis

_GLOB_SPECIAL = "\\*?[]"


def escape_glob(text: str) -> str:
    """Escape Redis MATCH glob metacharacters so text is matched literally."""
    return "".join(f"\\{c}" if c in _GLOB_SPECIAL else c for c in text)


class RedisStore:
    """Thin async wrapper over redis.asyncio with a get/set/delete/scan surface.

    Errors (redis.exceptions.RedisError, OSError, timeouts) propagate; deciding
    whether to fall back is the job of ResilientCache.
    """

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, connect_timeout: float = 1.0) -> "RedisStore":
        """Build a store with fail-fast socket timeouts."""
        client = redis.asyncio.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=connect_timeout,
            socket_timeout=connect_timeout,
            retry_on_timeout=False,
        )
        return cls(client)

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        await self._client.set(name=key, value=value, ex=ttl)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(await self._client.delete(*keys))

    async def keys_with_prefix(self, prefix: str) -> set[str]:
        pattern = f"{escape_glob(prefix)}*"
        return {key async for key in self._client.scan_iter(match=pattern)}

    async def close(self) -> None:
        await self._client.aclose()
