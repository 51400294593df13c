"""Core provider abstractions."""
from sentinel_trade.providers.core.error_mapper import (PROVIDER_EXCEPTIONS,
                                                        ProviderErrorMapper)
from sentinel_trade.providers.core.price_provider_abc import PriceProviderABC
from sentinel_trade.providers.core.utils import normalize_crypto_id, to_float

__all__ = [
    "PROVIDER_EXCEPTIONS",
    "PriceProviderABC",
    "ProviderErrorMapper",
    "normalize_crypto_id",
    "to_float",
]
