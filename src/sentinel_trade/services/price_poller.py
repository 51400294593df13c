"""Fixed-interval price polling feeding the alert matcher."""
import asyncio
import contextlib
import logging
from collections.abc import Iterable

from sentinel_trade.providers.core import PriceProviderABC
from sentinel_trade.schemas import PriceAlert
from sentinel_trade.services.alert_matcher import AlertMatcher, PriceCallback

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 30.0


class PricePoller:
    """Polls the price provider for the monitored symbols on a fixed cadence.

    One loop task at most. The loop wakes every `interval` seconds and starts a
    tick; if the previous tick is still running the new one is skipped, so ticks
    never overlap and the cadence is not pushed back by slow ticks.
    """

    def __init__(
        self,
        provider: PriceProviderABC,
        matcher: AlertMatcher,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._provider = provider
        self._matcher = matcher
        self._interval = interval
        self._symbols: set[str] = set()
        self._loop_task: asyncio.Task | None = None
        self._tick_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def monitored_symbols(self) -> set[str]:
        return set(self._symbols)

    async def start_monitoring(self, symbols: Iterable[str] = ()) -> None:
        """Add symbols and (re)start the polling loop, replacing any running one."""
        self._symbols.update(symbols)
        await self._cancel_loop()
        self._loop_task = asyncio.create_task(self._run(), name="price-poller")
        logger.info(
            "Price monitoring started for %s every %ss",
            ", ".join(sorted(self._symbols)) or "(no symbols)",
            self._interval,
        )

    def subscribe(self, symbol: str, callback: PriceCallback) -> None:
        """Call callback(symbol, price) when an alert on symbol triggers; monitors symbol."""
        self._matcher.subscribe(symbol, callback)
        if symbol not in self._symbols:
            self._symbols.add(symbol)
            logger.debug("Now monitoring %s", symbol)

    on_price_update = subscribe

    async def stop_monitoring(self) -> None:
        """Cancel the loop and clear symbols and callbacks. An in-flight tick finishes."""
        await self._cancel_loop()
        self._symbols.clear()
        self._matcher.clear_subscriptions()
        logger.info("Price monitoring stopped")

    async def poll_once(self) -> dict[str, list[PriceAlert]]:
        """Run one tick: batch-fetch prices and evaluate each symbol.

        Returns triggered alerts per symbol. A failed batch fetch raises; a
        failure while evaluating one symbol is logged and the rest continue.
        """
        if not self._symbols:
            return {}
        prices = await self._provider.get_prices(sorted(self._symbols))
        triggered: dict[str, list[PriceAlert]] = {}
        for symbol, snapshot in prices.items():
            try:
                triggered[symbol] = await self._matcher.evaluate(symbol, snapshot)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Failed to evaluate alerts for %s", symbol)
        return triggered

    async def _tick(self) -> None:
        try:
            await self.poll_once()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Price poll failed, retrying next tick: %s", exc)

    def _start_tick(self) -> None:
        if self._tick_task is not None and not self._tick_task.done():
            logger.warning("Previous price poll still running, skipping tick")
            return
        self._tick_task = asyncio.create_task(self._tick(), name="price-poll-tick")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._start_tick()

    async def _cancel_loop(self) -> None:
        task, self._loop_task = self._loop_task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
