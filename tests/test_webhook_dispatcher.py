import json

import httpx
import pytest

from sentinel_trade.registry import WebhookRegistry
from sentinel_trade.schemas import (AlertDirection, DeliveryState, PriceAlert,
                                    PriceSnapshot, WebhookPayload)
from sentinel_trade.services import WebhookDispatcher
from sentinel_trade.services.alert_forwarder import PriceAlertForwarder

HOOK = "https://hooks.example.com/u7"


class Recorder:
    """MockTransport handler returning queued status codes (last one repeats)."""

    def __init__(self, *statuses: int, error: Exception | None = None) -> None:
        self.statuses = list(statuses) or [200]
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return httpx.Response(status)

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def webhooks(memory_cache) -> WebhookRegistry:
    return WebhookRegistry(memory_cache)


@pytest.fixture
def sleeps() -> list[float]:
    return []


def make_dispatcher(webhooks, handler, sleeps) -> WebhookDispatcher:
    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return WebhookDispatcher(
        webhooks,
        max_retries=3,
        retry_delay=1.0,
        transport=httpx.MockTransport(handler),
        sleep=fake_sleep,
    )


@pytest.mark.asyncio
async def test_price_alert_payload_is_delivered(webhooks, sleeps):
    await webhooks.set_webhook(7, HOOK)
    handler = Recorder(200)
    dispatcher = make_dispatcher(webhooks, handler, sleeps)

    ok = await dispatcher.send_price_alert(7, "BTC", 60000.0, 59000.0, AlertDirection.ABOVE)

    assert ok is True
    assert len(handler.requests) == 1
    request = handler.requests[0]
    assert str(request.url) == HOOK
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert request.headers["user-agent"] == "SentinelTrade-Bot/1.0"
    body = handler.bodies()[0]
    assert body["event"] == "price_alert"
    assert body["timestamp"]
    assert body["data"] == {
        "symbol": "BTC",
        "current_price": 60000.0,
        "target_price": 59000.0,
        "condition": "above",
        "message": "BTC price is now above 59000.0 (Current: 60000.0)",
    }
    assert sleeps == []
    await dispatcher.close()


@pytest.mark.asyncio
async def test_persistent_server_error_retries_with_linear_backoff(webhooks, sleeps):
    await webhooks.set_webhook(7, HOOK)
    handler = Recorder(500)
    dispatcher = make_dispatcher(webhooks, handler, sleeps)

    ok = await dispatcher.send_notification(7, "market_alert", {"symbol": "DOT"})

    assert ok is False
    assert len(handler.requests) == 3
    assert sleeps == [1.0, 2.0]
    await dispatcher.close()


@pytest.mark.asyncio
async def test_recovers_after_transient_failure(webhooks, sleeps):
    await webhooks.set_webhook(7, HOOK)
    handler = Recorder(503, 204)
    dispatcher = make_dispatcher(webhooks, handler, sleeps)

    result = await dispatcher.deliver(HOOK, WebhookPayload(event="ping"))

    assert result.state is DeliveryState.DELIVERED
    assert result.attempts == 2
    assert result.status_code == 204
    assert sleeps == [1.0]
    await dispatcher.close()


@pytest.mark.asyncio
async def test_network_error_counts_as_failed_attempt(webhooks, sleeps):
    handler = Recorder(error=httpx.ConnectError("refused"))
    dispatcher = make_dispatcher(webhooks, handler, sleeps)

    result = await dispatcher.deliver(HOOK, WebhookPayload(event="ping"))

    assert result.state is DeliveryState.FAILED
    assert result.attempts == 3
    assert result.status_code is None
    assert "refused" in result.error
    await dispatcher.close()


@pytest.mark.asyncio
async def test_no_registered_webhook_makes_no_request(webhooks, sleeps):
    handler = Recorder(200)
    dispatcher = make_dispatcher(webhooks, handler, sleeps)

    assert await dispatcher.send_whale_alert(99, "BTC", 1000.0, "0xabc") is False
    assert handler.requests == []
    await dispatcher.close()


@pytest.mark.asyncio
async def test_event_wrappers_shape_data(webhooks, sleeps):
    await webhooks.set_webhook(7, HOOK)
    handler = Recorder(200)
    dispatcher = make_dispatcher(webhooks, handler, sleeps)

    await dispatcher.send_whale_alert(7, "BTC", 1000.0, "0xabc")
    await dispatcher.send_market_alert(7, "DOT", "volume_spike", {"ratio": 3.2})
    await dispatcher.send_anomaly_alert(7, "ETH", "price_gap", "Gap detected", 0.9)

    events = [(b["event"], b["data"]) for b in handler.bodies()]
    assert events[0] == (
        "whale_alert",
        {
            "symbol": "BTC",
            "amount": 1000.0,
            "tx_hash": "0xabc",
            "message": "Whale movement detected: 1000.0 BTC",
        },
    )
    assert events[1] == ("market_alert", {"symbol": "DOT", "type": "volume_spike", "ratio": 3.2})
    assert events[2][0] == "anomaly_alert"
    assert events[2][1]["confidence"] == 0.9
    await dispatcher.close()


@pytest.mark.asyncio
async def test_test_webhook_reports_outcome(webhooks, sleeps):
    ok = make_dispatcher(webhooks, Recorder(200), sleeps)
    result = await ok.test_webhook(HOOK)
    assert result.success is True
    assert result.message == "Webhook test successful"
    await ok.close()

    failing = make_dispatcher(webhooks, Recorder(404), sleeps)
    result = await failing.test_webhook(HOOK)
    assert result.success is False
    assert result.message == "Failed to deliver test webhook: HTTP 404"
    await failing.close()


@pytest.mark.asyncio
async def test_forwarder_sends_price_alert_in_background(webhooks, sleeps):
    await webhooks.set_webhook(3, HOOK)
    handler = Recorder(200)
    dispatcher = make_dispatcher(webhooks, handler, sleeps)
    forwarder = PriceAlertForwarder(dispatcher)
    alert = PriceAlert(user_id=3, symbol="DOT", target_price=5.0, direction=AlertDirection.ABOVE)

    forwarder(alert, PriceSnapshot(symbol="DOT", price=5.2))
    assert forwarder.pending == 1

    await forwarder.drain()

    assert handler.bodies()[0]["data"]["current_price"] == 5.2
    await dispatcher.close()
