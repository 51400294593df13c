"""CoinGecko price provider for cryptocurrencies."""
import os
from datetime import datetime, timezone

import httpx

from sentinel_trade.providers.core import (PriceProviderABC,
                                           normalize_crypto_id, to_float)
from sentinel_trade.providers.crypto.coingecko.models import (
    CoinGeckoMarketChartParams, CoinGeckoMarketsParams,
    CoinGeckoSimplePriceParams)
from sentinel_trade.schemas import PricePoint, PriceSnapshot, TopGainer


class CoinGeckoPriceProvider(PriceProviderABC):
    """Price data for cryptocurrencies via the CoinGecko REST API.

    Uses CoinGecko IDs as symbols (e.g., "bitcoin", "polkadot").
    See https://api.coingecko.com/api/v3/coins/list for all available IDs.
    """

    BASE_URL = "https://api.coingecko.com/api/v3"
    PRO_BASE_URL = "https://pro-api.coingecko.com/api/v3"

    def __init__(
        self,
        api_key: str | None = None,
        use_pro_api: bool = False,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the CoinGecko provider.

        Args:
            api_key: CoinGecko API key. Defaults to COINGECKO_API_KEY env var.
            use_pro_api: Whether to use the Pro API endpoint.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._api_key = api_key or os.getenv("COINGECKO_API_KEY")
        self._use_pro_api = use_pro_api or bool(self._api_key)

        headers: dict[str, str] = {"Accept": "application/json"}
        if self._api_key:
            headers["x-cg-pro-api-key"] = self._api_key

        base = self.PRO_BASE_URL if self._use_pro_api else self.BASE_URL
        self._client = httpx.AsyncClient(
            base_url=base, headers=headers, timeout=timeout, transport=transport
        )

    async def get_prices(self, symbols: list[str]) -> dict[str, PriceSnapshot]:
        """Fetch price, 24h change, 24h volume and market cap in one /simple/price call.

        Results are keyed by the symbols as passed in, not by the normalized IDs.
        """
        if not symbols:
            return {}
        by_id: dict[str, list[str]] = {}
        for symbol in symbols:
            by_id.setdefault(normalize_crypto_id(symbol), []).append(symbol)

        params = CoinGeckoSimplePriceParams().model_dump() | {"ids": ",".join(by_id)}
        response = await self._client.get("/simple/price", params=params)
        response.raise_for_status()
        data = response.json()

        result: dict[str, PriceSnapshot] = {}
        for coin_id, requested in by_id.items():
            row = data.get(coin_id)
            if not row or row.get("usd") is None:
                continue
            for symbol in requested:
                result[symbol] = self._snapshot_from_simple_price(symbol, row)
        return result

    async def get_top_gainers(self, limit: int = 10) -> list[TopGainer]:
        """Top coins by 24h price change (single /coins/markets call)."""
        params = CoinGeckoMarketsParams(per_page=limit).model_dump()
        response = await self._client.get("/coins/markets", params=params)
        response.raise_for_status()
        return [
            TopGainer(
                symbol=item["id"],
                name=item.get("name", item["id"]),
                price=float(item["current_price"]),
                change_24h=to_float(item.get("price_change_percentage_24h")),
            )
            for item in response.json()
        ]

    async def get_price_history(self, symbol: str, days: int = 30) -> list[PricePoint]:
        """Fetch (timestamp, price) points for the last `days` days.

        Raises:
            ValueError: if CoinGecko returns no price series for the symbol.
        """
        coin_id = normalize_crypto_id(symbol)
        params = CoinGeckoMarketChartParams(days=days).model_dump()
        response = await self._client.get(f"/coins/{coin_id}/market_chart", params=params)
        response.raise_for_status()
        prices = response.json().get("prices")
        if prices is None:
            raise ValueError(f"Coin '{coin_id}' not found")
        return [
            PricePoint(
                timestamp=datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc),
                price=float(price),
            )
            for ts_ms, price in (p[:2] for p in prices)
        ]

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    @staticmethod
    def _snapshot_from_simple_price(symbol: str, row: dict) -> PriceSnapshot:
        """Build a PriceSnapshot from a /simple/price response row."""
        return PriceSnapshot(
            symbol=symbol,
            price=float(row["usd"]),
            change_24h=to_float(row.get("usd_24h_change")),
            volume_24h=to_float(row.get("usd_24h_vol")),
            market_cap=to_float(row.get("usd_market_cap")),
        )
