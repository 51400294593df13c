"""Protocols for key/value cache backends."""
from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Async get/set/delete/scan surface shared by RedisStore and FallbackStore."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> None: ...

    async def delete(self, *keys: str) -> int: ...

    async def keys_with_prefix(self, prefix: str) -> set[str]: ...


class RemoteStore(KeyValueStore, Protocol):
    """A KeyValueStore that lives out of process and can be probed and closed."""

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...
