"""FastAPI dependency injection: app.state.container holds the service graph.

The lifespan (main.py) builds the container once and attaches it to app.state;
these getters resolve singletons from it for Depends().
"""
from typing import Annotated

from fastapi import Depends, Request

from sentinel_trade.cache import ResilientCache
from sentinel_trade.container import Container
from sentinel_trade.registry import (AlertRegistry, PortfolioStore,
                                     WebhookRegistry)
from sentinel_trade.services import (PricePoller, PriceService,
                                     WebhookDispatcher)


def _container(request: Request) -> Container:
    return request.app.state.container


def get_cache(request: Request) -> ResilientCache:
    return _container(request).cache()


def get_alert_registry(request: Request) -> AlertRegistry:
    return _container(request).alert_registry()


def get_portfolio_store(request: Request) -> PortfolioStore:
    return _container(request).portfolio_store()


def get_webhook_registry(request: Request) -> WebhookRegistry:
    return _container(request).webhook_registry()


def get_webhook_dispatcher(request: Request) -> WebhookDispatcher:
    return _container(request).webhook_dispatcher()


def get_price_service(request: Request) -> PriceService:
    return _container(request).price_service()


def get_price_poller(request: Request) -> PricePoller:
    return _container(request).price_poller()


# Type aliases for route injection
CacheDep = Annotated[ResilientCache, Depends(get_cache)]
AlertRegistryDep = Annotated[AlertRegistry, Depends(get_alert_registry)]
PortfolioStoreDep = Annotated[PortfolioStore, Depends(get_portfolio_store)]
WebhookRegistryDep = Annotated[WebhookRegistry, Depends(get_webhook_registry)]
WebhookDispatcherDep = Annotated[WebhookDispatcher, Depends(get_webhook_dispatcher)]
PriceServiceDep = Annotated[PriceService, Depends(get_price_service)]
PricePollerDep = Annotated[PricePoller, Depends(get_price_poller)]
