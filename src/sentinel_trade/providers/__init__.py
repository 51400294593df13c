"""Price data providers.

All providers implement PriceProviderABC and return PriceSnapshot objects:

- CoinGeckoPriceProvider: cryptocurrency prices via the CoinGecko API

Example:
    async with CoinGeckoPriceProvider() as provider:
        prices = await provider.get_prices(["polkadot", "bitcoin"])
        print(prices["polkadot"].price)
"""
from sentinel_trade.providers.core import PriceProviderABC, ProviderErrorMapper
from sentinel_trade.providers.crypto import CoinGeckoPriceProvider

__all__ = [
    "CoinGeckoPriceProvider",
    "PriceProviderABC",
    "ProviderErrorMapper",
]
