"""API routers used by the chat front end.

Includes routes for:
- /alerts - per-user price alerts
- /portfolio - per-user holdings
- /webhooks - webhook registration, test and notify
- /prices - price lookups, top gainers, history and monitoring control
"""
from sentinel_trade.routers.alerts import router as alerts_router
from sentinel_trade.routers.portfolio import router as portfolio_router
from sentinel_trade.routers.prices import router as prices_router
from sentinel_trade.routers.webhooks import router as webhooks_router

__all__ = [
    "alerts_router",
    "portfolio_router",
    "prices_router",
    "webhooks_router",
]
