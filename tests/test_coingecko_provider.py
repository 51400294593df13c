import httpx
import pytest

from sentinel_trade.providers import CoinGeckoPriceProvider


def make_provider(handler, **kwargs) -> CoinGeckoPriceProvider:
    return CoinGeckoPriceProvider(transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_get_prices_batches_and_keys_by_requested_symbol(monkeypatch):
    monkeypatch.delenv("COINGECKO_API_KEY", raising=False)
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "polkadot": {
                    "usd": 4.9,
                    "usd_24h_change": -1.2,
                    "usd_24h_vol": 1000,
                    "usd_market_cap": 5000,
                },
                "bitcoin": {"usd": 60000},
            },
        )

    async with make_provider(handler) as provider:
        prices = await provider.get_prices(["Polkadot", "bitcoin", "unknown-coin"])

    assert len(seen) == 1
    assert seen[0].url.host == "api.coingecko.com"
    assert seen[0].url.path == "/api/v3/simple/price"
    assert seen[0].url.params["ids"] == "polkadot,bitcoin,unknown-coin"
    assert seen[0].url.params["include_24hr_change"] == "true"
    assert set(prices) == {"Polkadot", "bitcoin"}
    assert prices["Polkadot"].price == 4.9
    assert prices["Polkadot"].change_24h == -1.2
    assert prices["bitcoin"].market_cap is None


@pytest.mark.asyncio
async def test_get_prices_with_no_symbols_skips_request():
    def handler(request):
        raise AssertionError("unexpected request")

    async with make_provider(handler) as provider:
        assert await provider.get_prices([]) == {}


@pytest.mark.asyncio
async def test_api_key_switches_to_pro_endpoint():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    async with make_provider(handler, api_key="secret") as provider:
        await provider.get_prices(["bitcoin"])

    assert seen[0].url.host == "pro-api.coingecko.com"
    assert seen[0].headers["x-cg-pro-api-key"] == "secret"


@pytest.mark.asyncio
async def test_get_prices_raises_on_http_error():
    async with make_provider(lambda r: httpx.Response(429)) as provider:
        with pytest.raises(httpx.HTTPStatusError):
            await provider.get_prices(["bitcoin"])


@pytest.mark.asyncio
async def test_get_top_gainers():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/coins/markets")
        assert request.url.params["order"] == "price_change_percentage_24h_desc"
        assert request.url.params["per_page"] == "2"
        return httpx.Response(
            200,
            json=[
                {"id": "pepe", "name": "Pepe", "current_price": 0.00001, "price_change_percentage_24h": 40.5},
                {"id": "dogecoin", "name": "Dogecoin", "current_price": 0.1, "price_change_percentage_24h": None},
            ],
        )

    async with make_provider(handler) as provider:
        gainers = await provider.get_top_gainers(2)

    assert [(g.symbol, g.name) for g in gainers] == [("pepe", "Pepe"), ("dogecoin", "Dogecoin")]
    assert gainers[0].change_24h == 40.5
    assert gainers[1].change_24h is None


@pytest.mark.asyncio
async def test_get_price_history():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/coins/polkadot/market_chart")
        assert request.url.params["days"] == "7"
        return httpx.Response(200, json={"prices": [[1700000000000, 5.0], [1700003600000, 5.2]]})

    async with make_provider(handler) as provider:
        points = await provider.get_price_history("Polkadot", days=7)

    assert [p.price for p in points] == [5.0, 5.2]
    assert points[0].timestamp.year == 2023


@pytest.mark.asyncio
async def test_get_price_history_without_series_is_not_found():
    async with make_provider(lambda r: httpx.Response(200, json={"error": "x"})) as provider:
        with pytest.raises(ValueError, match="not found"):
            await provider.get_price_history("nope")
