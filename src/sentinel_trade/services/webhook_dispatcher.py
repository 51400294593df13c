"""Webhook delivery with bounded retries and linear backoff."""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Literal

import httpx

from sentinel_trade.registry.webhooks import WebhookRegistry
from sentinel_trade.schemas import (AlertDirection, DeliveryResult,
                                    DeliveryState, WebhookPayload,
                                    WebhookTestResult)

logger = logging.getLogger(__name__)

MarketAlertType = Literal["volatility", "trend_change", "volume_spike"]

_DELIVERY_EXCEPTIONS: tuple[type[Exception], ...] = (httpx.HTTPError, httpx.InvalidURL)


class WebhookDispatcher:
    """POSTs JSON event payloads to users' registered webhook URLs.

    A delivery goes PENDING -> DELIVERED on the first 2xx response, or
    PENDING -> FAILED after max_retries failed attempts. After failed attempt n
    the dispatcher waits retry_delay * n seconds. Nothing is persisted: a
    process restart drops deliveries that are mid-retry.
    """

    USER_AGENT = "SentinelTrade-Bot/1.0"

    def __init__(
        self,
        registry: WebhookRegistry,
        *,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Where user webhook URLs are looked up.
            max_retries: Total delivery attempts per notification.
            retry_delay: Base backoff in seconds (multiplied by the attempt number).
            timeout: Per-attempt request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
            sleep: Backoff sleep function; injectable for tests.
        """
        self._registry = registry
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "User-Agent": self.USER_AGENT},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def send_notification(
        self, user_id: int, event_type: str, data: dict[str, Any]
    ) -> bool:
        """Deliver an event to the user's webhook. False if none is registered or delivery failed."""
        url = await self._registry.get_webhook(user_id)
        if not url:
            logger.debug("No webhook URL found for user %s", user_id)
            return False
        payload = WebhookPayload(event=event_type, data=data)
        result = await self.deliver(url, payload)
        return result.delivered

    async def deliver(self, url: str, payload: WebhookPayload) -> DeliveryResult:
        """POST payload to url with retries. Never raises for delivery failures."""
        result = DeliveryResult(url=url)
        body = payload.model_dump_json()
        for attempt in range(1, self._max_retries + 1):
            result.attempts = attempt
            try:
                response = await self._client.post(url, content=body)
            except _DELIVERY_EXCEPTIONS as exc:
                result.status_code = None
                result.error = str(exc) or type(exc).__name__
            else:
                result.status_code = response.status_code
                if response.is_success:
                    result.state = DeliveryState.DELIVERED
                    result.error = None
                    logger.debug("Webhook notification sent successfully to %s", url)
                    return result
                result.error = f"HTTP {response.status_code}"

            if attempt < self._max_retries:
                logger.warning(
                    "Webhook delivery failed (attempt %d/%d): %s, retrying...",
                    attempt,
                    self._max_retries,
                    result.error,
                )
                await self._sleep(self._retry_delay * attempt)

        result.state = DeliveryState.FAILED
        logger.error(
            "Webhook delivery to %s failed after %d attempts: %s",
            url,
            result.attempts,
            result.error,
        )
        return result

    async def send_price_alert(
        self,
        user_id: int,
        symbol: str,
        price: float,
        target_price: float,
        direction: AlertDirection,
    ) -> bool:
        condition = direction.value
        return await self.send_notification(
            user_id,
            "price_alert",
            {
                "symbol": symbol,
                "current_price": price,
                "target_price": target_price,
                "condition": condition,
                "message": f"{symbol} price is now {condition} {target_price} (Current: {price})",
            },
        )

    async def send_whale_alert(
        self, user_id: int, symbol: str, amount: float, tx_hash: str
    ) -> bool:
        return await self.send_notification(
            user_id,
            "whale_alert",
            {
                "symbol": symbol,
                "amount": amount,
                "tx_hash": tx_hash,
                "message": f"Whale movement detected: {amount} {symbol}",
            },
        )

    async def send_market_alert(
        self,
        user_id: int,
        symbol: str,
        alert_type: MarketAlertType,
        data: dict[str, Any],
    ) -> bool:
        return await self.send_notification(
            user_id, "market_alert", {"symbol": symbol, "type": alert_type, **data}
        )

    async def send_anomaly_alert(
        self,
        user_id: int,
        symbol: str,
        anomaly_type: str,
        description: str,
        confidence: float,
    ) -> bool:
        return await self.send_notification(
            user_id,
            "anomaly_alert",
            {
                "symbol": symbol,
                "type": anomaly_type,
                "description": description,
                "confidence": confidence,
            },
        )

    async def test_webhook(self, url: str) -> WebhookTestResult:
        """Send a test event straight to url (no registration needed)."""
        payload = WebhookPayload(
            event="test",
            data={"message": "This is a test notification from SentinelTrade"},
        )
        result = await self.deliver(url, payload)
        if result.delivered:
            return WebhookTestResult(success=True, message="Webhook test successful")
        return WebhookTestResult(
            success=False,
            message=f"Failed to deliver test webhook: {result.error}",
        )
