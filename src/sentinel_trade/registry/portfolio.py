"""User portfolios stored in the resilient cache."""
from sentinel_trade.cache.keys import portfolio_key
from sentinel_trade.cache.resilient import ResilientCache
from sentinel_trade.schemas import Portfolio


class PortfolioStore:
    """Holdings per user under portfolio:{user_id}; every write replaces the whole map."""

    def __init__(self, cache: ResilientCache) -> None:
        self._cache = cache

    async def set_portfolio(self, user_id: int, holdings: dict[str, float]) -> Portfolio:
        portfolio = Portfolio(user_id=user_id, holdings=holdings)
        await self._cache.set_json(portfolio_key(user_id), portfolio)
        return portfolio

    async def get_portfolio(self, user_id: int) -> Portfolio:
        """Stored portfolio, or an empty one if none (or unreadable)."""
        stored = await self._cache.get_json(portfolio_key(user_id), Portfolio)
        return stored or Portfolio(user_id=user_id)
