"""Cryptocurrency price providers."""
from sentinel_trade.providers.crypto.coingecko.coin_gecko_provider import (
    CoinGeckoPriceProvider,
)

__all__ = ["CoinGeckoPriceProvider"]
