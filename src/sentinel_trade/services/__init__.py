"""Service layer: alert matching, price polling, webhook delivery and price lookups."""
from sentinel_trade.services.alert_matcher import AlertMatcher
from sentinel_trade.services.price_poller import PricePoller
from sentinel_trade.services.price_service import PriceService
from sentinel_trade.services.webhook_dispatcher import WebhookDispatcher

__all__ = [
    "AlertMatcher",
    "PricePoller",
    "PriceService",
    "WebhookDispatcher",
]
