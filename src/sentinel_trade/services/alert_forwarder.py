"""Forward triggered price alerts to webhook delivery in the background."""
import asyncio
import logging

from sentinel_trade.schemas import PriceAlert, PriceSnapshot
from sentinel_trade.services.webhook_dispatcher import WebhookDispatcher

logger = logging.getLogger(__name__)


class PriceAlertForwarder:
    """Trigger listener that sends a price_alert webhook for each matched alert.

    Deliveries run as tasks so a slow webhook (up to three attempts plus
    backoff) does not hold up the poll tick. drain() awaits whatever is still
    in flight and is called on shutdown.
    """

    def __init__(self, dispatcher: WebhookDispatcher) -> None:
        self._dispatcher = dispatcher
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def __call__(self, alert: PriceAlert, snapshot: PriceSnapshot) -> None:
        task = asyncio.create_task(
            self._dispatcher.send_price_alert(
                alert.user_id,
                alert.symbol,
                snapshot.price,
                alert.target_price,
                alert.direction,
            ),
            name=f"webhook-price-alert-{alert.user_id}-{alert.symbol}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        if not self._pending:
            return
        logger.info("Waiting for %d webhook deliveries", len(self._pending))
        await asyncio.gather(*self._pending, return_exceptions=True)
