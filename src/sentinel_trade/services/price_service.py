"""On-demand price lookups with cache-first reads."""
import logging

from sentinel_trade.cache.keys import price_key
from sentinel_trade.cache.memoize import MemoizedCall
from sentinel_trade.cache.resilient import ResilientCache
from sentinel_trade.providers.core import PriceProviderABC
from sentinel_trade.schemas import PricePoint, PriceSnapshot, TopGainer

logger = logging.getLogger(__name__)

TOP_GAINERS_TTL = 60
HISTORY_TTL = 600


class PriceService:
    """Front-end facing price queries. Provider errors propagate to the caller."""

    def __init__(
        self,
        provider: PriceProviderABC,
        cache: ResilientCache,
        memo: MemoizedCall,
        price_ttl: int = 300,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._memo = memo
        self._price_ttl = price_ttl

    async def get_price(self, symbol: str) -> PriceSnapshot:
        """Cached snapshot if fresh, otherwise a live fetch (which is then cached).

        Raises:
            ValueError: if the provider does not know the symbol.
        """
        cached = await self._cache.get_json(price_key(symbol), PriceSnapshot)
        if cached is not None:
            return cached
        prices = await self._provider.get_prices([symbol])
        snapshot = prices.get(symbol)
        if snapshot is None:
            raise ValueError(f"Coin '{symbol}' not found")
        await self._cache.set_json(price_key(symbol), snapshot, self._price_ttl)
        return snapshot

    async def get_24h_change(self, symbol: str) -> float | None:
        snapshot = await self.get_price(symbol)
        return snapshot.change_24h

    async def get_top_gainers(self, limit: int = 10) -> list[TopGainer]:
        async def compute() -> list[dict]:
            gainers = await self._provider.get_top_gainers(limit)
            return [g.model_dump(mode="json") for g in gainers]

        rows = await self._memo.get_or_compute(
            "market", "top_gainers", {"limit": limit}, TOP_GAINERS_TTL, compute
        )
        return [TopGainer.model_validate(row) for row in rows]

    async def get_price_history(self, symbol: str, days: int = 30) -> list[PricePoint]:
        async def compute() -> list[dict]:
            points = await self._provider.get_price_history(symbol, days)
            return [p.model_dump(mode="json") for p in points]

        rows = await self._memo.get_or_compute(
            "market", f"history_{symbol}", {"days": days}, HISTORY_TTL, compute
        )
        return [PricePoint.model_validate(row) for row in rows]
