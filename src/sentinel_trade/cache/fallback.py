"""Process-local key/value store used while the remote cache is unavailable."""
from __future__ import annotations

import time
from collections.abc import Callable


class FallbackStore:
    """In-memory map with optional per-entry expiry.

    Expired entries are dropped lazily on read or key enumeration. Not
    persistent and not shared between processes. Methods are async to match
    the remote adapter, although none of them suspend.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float | None]] = {}

    def _expired(self, expires_at: float | None) -> bool:
        return expires_at is not None and self._clock() >= expires_at

    async def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._expired(expires_at):
            del self._data[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl is not None else None
        self._data[key] = (value, expires_at)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self._data.pop(key, None) is not None:
                removed += 1
        return removed

    async def keys_with_prefix(self, prefix: str) -> set[str]:
        """Full scan of the key set; expected cardinality is small."""
        matched: set[str] = set()
        for key, (_, expires_at) in list(self._data.items()):
            if self._expired(expires_at):
                del self._data[key]
            elif key.startswith(prefix):
                matched.add(key)
        return matched

    def __contains__(self, key: str) -> bool:
        entry = self._data.get(key)
        return entry is not None and not self._expired(entry[1])

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        self._data.clear()
