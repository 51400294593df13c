"""Webhook URL registrations stored in the resilient cache."""
from sentinel_trade.cache.keys import webhook_key
from sentinel_trade.cache.resilient import ResilientCache


class WebhookRegistry:
    """One webhook URL per user under webhook:{user_id} (plain string value)."""

    def __init__(self, cache: ResilientCache) -> None:
        self._cache = cache

    async def set_webhook(self, user_id: int, url: str) -> None:
        await self._cache.set(webhook_key(user_id), url)

    async def get_webhook(self, user_id: int) -> str | None:
        return await self._cache.get(webhook_key(user_id))

    async def remove_webhook(self, user_id: int) -> None:
        await self._cache.delete(webhook_key(user_id))
