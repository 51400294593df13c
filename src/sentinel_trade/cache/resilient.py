"""Resilient cache facade: remote store with an in-memory fallback on failure.

Callers never see backend availability errors. Each operation asks the
availability state machine which backend to use; a failing remote operation
flips the machine to UNAVAILABLE and the same operation is completed against
the fallback store. While unavailable, the remote is re-probed at most once
per reprobe interval so a recovered server is picked up again.
"""
from __future__ import annotations

import asyncio
import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError
from redis.exceptions import RedisError

from sentinel_trade.cache.fallback import FallbackStore
from sentinel_trade.cache.protocols import RemoteStore
from sentinel_trade.cache.state import BackendAvailability, BackendState

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Exceptions that mean "backend trouble", not "bad data"; everything else propagates.
_BACKEND_EXCEPTIONS: tuple[type[BaseException], ...] = (
    RedisError,
    OSError,
    asyncio.TimeoutError,
)


class ResilientCache:
    """get/set/delete/list_by_prefix over a remote store with transparent fallback.

    The fallback only ever holds writes made while the remote was flagged
    unavailable: a successful remote set drops the fallback copy. Reads
    therefore prefer a live fallback entry, which is the newer value.

    While AVAILABLE the remote is not re-probed, so a stale AVAILABLE state is
    only noticed when an operation fails. That costs one failed remote call,
    after which the operation completes against the fallback and later calls
    skip the remote until a reprobe succeeds.

    Deletes, and reads made with authoritative=True, reach the remote even
    while it is flagged unavailable. Otherwise a key deleted during a brief
    outage would come back once the remote is used again.
    """

    def __init__(
        self,
        remote: RemoteStore | None,
        fallback: FallbackStore | None = None,
        availability: BackendAvailability | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            remote: Remote store (e.g. RedisStore). None runs fallback-only.
            fallback: Process-local store; a fresh one is created if omitted.
            availability: State machine; starts UNAVAILABLE until connect().
        """
        self._remote = remote
        self._fallback = fallback if fallback is not None else FallbackStore()
        self._availability = availability or BackendAvailability()
        # keys whose remote delete failed; replayed once the remote answers again
        self._pending_deletes: set[str] = set()

    @property
    def state(self) -> BackendState:
        return self._availability.state

    @property
    def fallback(self) -> FallbackStore:
        return self._fallback

    async def connect(self) -> bool:
        """Probe the remote store once. Never raises; returns availability."""
        if self._remote is None:
            logger.info("No remote cache configured, using in-memory storage")
            return False
        await self._probe()
        return self._availability.available

    async def close(self) -> None:
        if self._remote is None:
            return
        try:
            await self._remote.close()
        except _BACKEND_EXCEPTIONS as exc:
            logger.warning("Error closing remote cache: %s", exc)
        logger.info("Disconnected from remote cache")

    async def _probe(self) -> None:
        self._availability.record_probe()
        try:
            if await self._remote.ping():
                self._availability.mark_available("ping ok")
            else:
                self._availability.mark_unavailable("ping returned false")
        except _BACKEND_EXCEPTIONS as exc:
            self._availability.mark_unavailable(f"ping failed: {exc}")
        if self._availability.available and self._pending_deletes:
            await self._replay_deletes()

    async def _replay_deletes(self) -> None:
        keys = sorted(self._pending_deletes)
        try:
            await self._remote.delete(*keys)
        except _BACKEND_EXCEPTIONS as exc:
            self._on_failure("delete", exc)
            return
        self._pending_deletes.difference_update(keys)
        logger.info("Replayed %d pending remote delete(s)", len(keys))

    async def _use_remote(self, authoritative: bool = False) -> bool:
        """Whether to call the remote. authoritative=True tries it even when flagged down."""
        if self._remote is None:
            return False
        if self._availability.should_probe():
            await self._probe()
        return authoritative or self._availability.available

    def _on_failure(self, operation: str, exc: BaseException) -> None:
        logger.debug("Remote cache %s failed: %s", operation, exc)
        self._availability.mark_unavailable(f"{operation} failed: {exc}")

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Write to the remote store, or to the fallback if the remote is down or fails."""
        if await self._use_remote():
            try:
                await self._remote.set(key, value, ttl)
            except _BACKEND_EXCEPTIONS as exc:
                self._on_failure("set", exc)
            else:
                # the remote now owns this key
                self._pending_deletes.discard(key)
                await self._fallback.delete(key)
                return
        await self._fallback.set(key, value, ttl)

    async def get(self, key: str, *, authoritative: bool = False) -> str | None:
        """Read a value: a live fallback entry first, then the remote.

        With authoritative=True the remote is consulted even while flagged
        unavailable (used before destructive operations).
        """
        use_remote = await self._use_remote(authoritative)
        value = await self._fallback.get(key)
        if value is not None or key in self._pending_deletes or not use_remote:
            return value
        try:
            return await self._remote.get(key)
        except _BACKEND_EXCEPTIONS as exc:
            self._on_failure("get", exc)
            return None

    async def delete(self, *keys: str) -> None:
        """Delete from both backends. Never raises; deleting absent keys is fine.

        The remote is always tried when configured. If it fails, the keys are
        remembered and deleted there once the remote answers a probe again.
        """
        if not keys:
            return
        await self._fallback.delete(*keys)
        if self._remote is None:
            return
        try:
            await self._remote.delete(*keys)
        except _BACKEND_EXCEPTIONS as exc:
            self._on_failure("delete", exc)
            self._pending_deletes.update(keys)
        else:
            self._pending_deletes.difference_update(keys)

    async def list_by_prefix(self, prefix: str, *, authoritative: bool = False) -> set[str]:
        """Keys starting with prefix, across whichever backends hold them."""
        keys: set[str] = set()
        if await self._use_remote(authoritative):
            try:
                keys |= await self._remote.keys_with_prefix(prefix)
            except _BACKEND_EXCEPTIONS as exc:
                self._on_failure("scan", exc)
            keys -= self._pending_deletes
        keys |= await self._fallback.keys_with_prefix(prefix)
        return keys

    async def get_json(
        self, key: str, model: type[ModelT], *, authoritative: bool = False
    ) -> ModelT | None:
        """Read and validate a JSON entry. Malformed payloads are logged and treated as a miss."""
        raw = await self.get(key, authoritative=authoritative)
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Ignoring malformed cache entry %s: %s", key, exc)
            return None

    async def set_json(self, key: str, value: BaseModel, ttl: int | None = None) -> None:
        await self.set(key, value.model_dump_json(), ttl)
