"""Request params for the CoinGecko provider."""
from pydantic import BaseModel


class CoinGeckoSimplePriceParams(BaseModel):
    """Params for /simple/price. Merge with 'ids' at call site."""

    vs_currencies: str = "usd"
    include_market_cap: str = "true"
    include_24hr_vol: str = "true"
    include_24hr_change: str = "true"


class CoinGeckoMarketsParams(BaseModel):
    """Params for /coins/markets ordered by 24h change (top gainers)."""

    vs_currency: str = "usd"
    order: str = "price_change_percentage_24h_desc"
    per_page: int = 10
    page: int = 1
    sparkline: str = "false"


class CoinGeckoMarketChartParams(BaseModel):
    """Params for /coins/{id}/market_chart."""

    vs_currency: str = "usd"
    days: int = 30
