"""Portfolio routes."""
from fastapi import APIRouter

from sentinel_trade.deps import PortfolioStoreDep
from sentinel_trade.schemas import Portfolio, PortfolioRequest

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("/{user_id}", response_model=Portfolio)
async def get_portfolio(user_id: int, store: PortfolioStoreDep) -> Portfolio:
    """Get the user's holdings (empty if never set)."""
    return await store.get_portfolio(user_id)


@router.put("/{user_id}", response_model=Portfolio)
async def set_portfolio(
    user_id: int, body: PortfolioRequest, store: PortfolioStoreDep
) -> Portfolio:
    """Replace the user's holdings."""
    return await store.set_portfolio(user_id, body.holdings)
