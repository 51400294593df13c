import pytest

from sentinel_trade.cache import MemoizedCall
from sentinel_trade.schemas import PriceSnapshot
from sentinel_trade.services import PriceService


@pytest.fixture
def service(provider, memory_cache) -> PriceService:
    return PriceService(provider, memory_cache, MemoizedCall(memory_cache), price_ttl=300)


@pytest.mark.asyncio
async def test_get_price_fetches_then_serves_from_cache(service, provider, memory_cache):
    first = await service.get_price("DOT")
    second = await service.get_price("DOT")

    assert first == second == PriceSnapshot(symbol="DOT", price=4.9, change_24h=1.5)
    assert provider.requests == [["DOT"]]
    assert await memory_cache.get_json("price:DOT", PriceSnapshot) == first


@pytest.mark.asyncio
async def test_get_price_refetches_after_ttl(service, provider, clock):
    await service.get_price("DOT")
    clock.advance(301)
    provider.prices["DOT"] = 5.1

    assert (await service.get_price("DOT")).price == 5.1
    assert len(provider.requests) == 2


@pytest.mark.asyncio
async def test_poller_snapshot_is_reused(service, provider, memory_cache):
    await memory_cache.set_json("price:BTC", PriceSnapshot(symbol="BTC", price=1.0), 300)

    assert (await service.get_price("BTC")).price == 1.0
    assert provider.requests == []


@pytest.mark.asyncio
async def test_unknown_symbol_raises_value_error(service):
    with pytest.raises(ValueError, match="Coin 'NOPE' not found"):
        await service.get_price("NOPE")


@pytest.mark.asyncio
async def test_get_24h_change(service):
    assert await service.get_24h_change("BTC") == 1.5


@pytest.mark.asyncio
async def test_top_gainers_are_memoized_per_limit(service, provider, clock):
    first = await service.get_top_gainers(2)
    again = await service.get_top_gainers(2)
    await service.get_top_gainers(1)

    assert first == again
    assert [g.symbol for g in first] == ["DOT", "BTC"]
    assert provider.gainer_calls == 2

    clock.advance(61)
    await service.get_top_gainers(2)
    assert provider.gainer_calls == 3


@pytest.mark.asyncio
async def test_price_history_round_trips_through_cache(service, memory_cache):
    points = await service.get_price_history("DOT", days=7)
    cached = await service.get_price_history("DOT", days=7)

    assert cached == points
    assert points[0].price == 4.9
    assert await memory_cache.list_by_prefix("market:history_DOT:")
