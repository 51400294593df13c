"""Match observed prices against stored alerts and fire listeners."""
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sentinel_trade.cache.keys import price_key
from sentinel_trade.cache.resilient import ResilientCache
from sentinel_trade.registry.alerts import AlertRegistry
from sentinel_trade.schemas import PriceAlert, PriceSnapshot

logger = logging.getLogger(__name__)

PriceCallback = Callable[[str, float], Awaitable[None] | None]
TriggerListener = Callable[[PriceAlert, PriceSnapshot], Awaitable[None] | None]

DEFAULT_PRICE_TTL = 300


async def _invoke(fn: Callable[..., Any], *args: Any) -> None:
    """Call a sync or async listener; its failure must not stop the others."""
    try:
        result = fn(*args)
        if inspect.isawaitable(result):
            await result
    except Exception:  # pylint: disable=broad-except
        logger.exception("Alert listener %r failed", fn)


class AlertMatcher:
    """Evaluates a (symbol, snapshot) pair against the registry.

    Two kinds of listeners:
    - symbol callbacks, subscribed per symbol, called with (symbol, price);
    - trigger listeners, called with (alert, snapshot) for every matched alert
      (the composition root hooks webhook delivery here).

    A matched alert is deleted after its listeners ran, so it fires at most once.
    """

    def __init__(
        self,
        registry: AlertRegistry,
        cache: ResilientCache,
        price_ttl: int = DEFAULT_PRICE_TTL,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._price_ttl = price_ttl
        self._callbacks: dict[str, list[PriceCallback]] = {}
        self._listeners: list[TriggerListener] = []

    def subscribe(self, symbol: str, callback: PriceCallback) -> None:
        self._callbacks.setdefault(symbol, []).append(callback)

    def add_trigger_listener(self, listener: TriggerListener) -> None:
        self._listeners.append(listener)

    def clear_subscriptions(self) -> None:
        """Drop symbol callbacks. Trigger listeners are wiring and stay."""
        self._callbacks.clear()

    def has_subscribers(self, symbol: str) -> bool:
        return bool(self._callbacks.get(symbol))

    async def evaluate(self, symbol: str, snapshot: PriceSnapshot) -> list[PriceAlert]:
        """Cache the snapshot, then fire and delete every alert it triggers.

        Returns the alerts that matched, in registry enumeration order.
        """
        await self._cache.set_json(price_key(symbol), snapshot, self._price_ttl)

        triggered: list[PriceAlert] = []
        for alert in await self._registry.get_alerts_for_symbol(symbol):
            if not alert.is_triggered(snapshot.price):
                continue
            logger.info(
                "Alert triggered for user %s: %s %s %s (price %s)",
                alert.user_id,
                symbol,
                alert.direction.value,
                alert.target_price,
                snapshot.price,
            )
            for callback in list(self._callbacks.get(symbol, ())):
                await _invoke(callback, symbol, snapshot.price)
            for listener in list(self._listeners):
                await _invoke(listener, alert, snapshot)
            await self._registry.remove_alert(alert.user_id, symbol, alert.direction)
            triggered.append(alert)
        return triggered
