"""Abstract base class for price data providers."""
from abc import ABC, abstractmethod

from sentinel_trade.schemas import PricePoint, PriceSnapshot, TopGainer


class PriceProviderABC(ABC):
    """Base interface for external price APIs used by the poller and price lookups.

    Implementations raise on transport or upstream errors (httpx.HTTPError,
    TimeoutError); callers decide whether to swallow (poll tick) or propagate
    (on-demand lookup). Nothing here retries.
    """

    @abstractmethod
    async def get_prices(self, symbols: list[str]) -> dict[str, PriceSnapshot]:
        """Fetch current price data for all symbols in one batched request.

        Args:
            symbols: Provider symbols (e.g. CoinGecko IDs like "polkadot").

        Returns:
            Mapping from the requested symbol to its snapshot. Unknown
            symbols are omitted.
        """

    async def get_top_gainers(self, limit: int = 10) -> list[TopGainer]:
        """Top assets by 24h change. Override where supported."""
        raise NotImplementedError("Top gainers are not supported by this provider")

    async def get_price_history(self, symbol: str, days: int = 30) -> list[PricePoint]:
        """Price history for the last `days` days. Override where supported."""
        raise NotImplementedError("Historical data is not supported by this provider")

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "PriceProviderABC":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()
