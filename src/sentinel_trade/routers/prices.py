"""Price lookup and monitoring routes (CoinGecko IDs as symbols)."""
import logging

from fastapi import APIRouter, Query

from sentinel_trade.deps import PricePollerDep, PriceServiceDep
from sentinel_trade.providers.core import PROVIDER_EXCEPTIONS, ProviderErrorMapper
from sentinel_trade.schemas import (MonitorRequest, PriceAlert, PricePoint,
                                    PriceSnapshot, TopGainer)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/prices", tags=["prices"])

_errors = ProviderErrorMapper(resource_name="Coin", api_name="CoinGecko")


@router.get("/top/gainers", response_model=list[TopGainer])
async def get_top_gainers(
    service: PriceServiceDep,
    limit: int = Query(default=10, ge=1, le=100),
) -> list[TopGainer]:
    try:
        return await service.get_top_gainers(limit)
    except PROVIDER_EXCEPTIONS as e:
        _errors.raise_http(e)


@router.post("/monitor")
async def start_monitoring(body: MonitorRequest, poller: PricePollerDep) -> dict[str, list[str]]:
    """Add symbols to the monitored set and restart the polling loop."""
    await poller.start_monitoring(body.symbols)
    return {"monitored": sorted(poller.monitored_symbols)}


@router.post("/poll", response_model=dict[str, list[PriceAlert]])
async def poll_now(poller: PricePollerDep) -> dict[str, list[PriceAlert]]:
    """Run one poll tick immediately; returns triggered alerts per symbol."""
    try:
        return await poller.poll_once()
    except PROVIDER_EXCEPTIONS as e:
        _errors.raise_http(e)


@router.get("/{symbol}", response_model=PriceSnapshot)
async def get_price(symbol: str, service: PriceServiceDep) -> PriceSnapshot:
    """Current price data, served from cache when fresh."""
    try:
        return await service.get_price(symbol)
    except PROVIDER_EXCEPTIONS as e:
        _errors.raise_http(e, symbol=symbol)


@router.get("/{symbol}/change")
async def get_24h_change(symbol: str, service: PriceServiceDep) -> dict[str, float | str | None]:
    try:
        change = await service.get_24h_change(symbol)
    except PROVIDER_EXCEPTIONS as e:
        _errors.raise_http(e, symbol=symbol)
    return {"symbol": symbol, "change_24h": change}


@router.get("/{symbol}/history", response_model=list[PricePoint])
async def get_history(
    symbol: str,
    service: PriceServiceDep,
    days: int = Query(default=30, ge=1, le=365, description="Number of days of history"),
) -> list[PricePoint]:
    try:
        return await service.get_price_history(symbol, days)
    except PROVIDER_EXCEPTIONS as e:
        _errors.raise_http(e, symbol=symbol)
