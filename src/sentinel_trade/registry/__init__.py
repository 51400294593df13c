"""Cache-backed stores for alerts, portfolios and webhook URLs."""
from sentinel_trade.registry.alerts import AlertRegistry
from sentinel_trade.registry.portfolio import PortfolioStore
from sentinel_trade.registry.webhooks import WebhookRegistry

__all__ = ["AlertRegistry", "PortfolioStore", "WebhookRegistry"]
