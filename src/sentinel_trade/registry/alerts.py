"""Per-user price alerts stored in the resilient cache."""
import logging

from sentinel_trade.cache.keys import (ALERT_PREFIX, alert_key,
                                       alert_user_prefix, parse_alert_key)
from sentinel_trade.cache.resilient import ResilientCache
from sentinel_trade.schemas import AlertDirection, PriceAlert

logger = logging.getLogger(__name__)


class AlertRegistry:
    """Stores at most one alert per (user_id, symbol) under alert:{user_id}:{symbol}.

    Direction is not part of the key: setting an alert for a pair that already
    has one replaces it, whatever the direction. Removal checks the stored
    direction, so a matcher deleting an ABOVE alert does not remove a BELOW
    alert that was set for the same pair in the meantime.
    """

    def __init__(self, cache: ResilientCache) -> None:
        self._cache = cache

    async def set_alert(
        self,
        user_id: int,
        symbol: str,
        price: float,
        direction: AlertDirection,
    ) -> PriceAlert:
        alert = PriceAlert(
            user_id=user_id,
            symbol=symbol,
            target_price=price,
            direction=direction,
        )
        await self._cache.set_json(alert_key(user_id, symbol), alert)
        logger.debug("Set %s alert for user %s: %s @ %s", direction.value, user_id, symbol, price)
        return alert

    async def _load(self, keys: set[str]) -> list[PriceAlert]:
        alerts: list[PriceAlert] = []
        for key in sorted(keys):
            if parse_alert_key(key) is None:
                logger.warning("Skipping alert with malformed key %s", key)
                continue
            alert = await self._cache.get_json(key, PriceAlert)
            if alert is not None:
                alerts.append(alert)
        return alerts

    async def get_alerts(self, user_id: int) -> list[PriceAlert]:
        """All alerts for a user; unreadable entries are skipped."""
        keys = await self._cache.list_by_prefix(alert_user_prefix(user_id))
        return await self._load(keys)

    async def get_alerts_for_symbol(self, symbol: str) -> list[PriceAlert]:
        """Cross-user lookup by symbol. Scans every alert key (no secondary index)."""
        keys = await self._cache.list_by_prefix(ALERT_PREFIX)
        wanted = {
            key for key in keys
            if (parsed := parse_alert_key(key)) is not None and parsed[1] == symbol
        }
        return [a for a in await self._load(wanted) if a.symbol == symbol]

    async def get_alert(self, user_id: int, symbol: str) -> PriceAlert | None:
        return await self._cache.get_json(alert_key(user_id, symbol), PriceAlert)

    async def remove_alert(
        self, user_id: int, symbol: str, direction: AlertDirection
    ) -> bool:
        """Delete the alert for (user_id, symbol) if its direction matches.

        Returns True if an alert was removed. A missing alert or one with the
        other direction is left alone.
        """
        current = await self._cache.get_json(
            alert_key(user_id, symbol), PriceAlert, authoritative=True
        )
        if current is None or current.direction is not direction:
            return False
        await self._cache.delete(alert_key(user_id, symbol))
        logger.debug("Removed price alert for user %s: %s", user_id, symbol)
        return True

    async def clear_all_alerts(self, user_id: int) -> int:
        """Delete every alert of a user. Returns how many keys were targeted."""
        keys = await self._cache.list_by_prefix(
            alert_user_prefix(user_id), authoritative=True
        )
        if keys:
            await self._cache.delete(*keys)
        logger.debug("Cleared %d alert(s) for user %s", len(keys), user_id)
        return len(keys)
