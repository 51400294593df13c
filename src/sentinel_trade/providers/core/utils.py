"""Shared utilities for price providers."""

DECIMALS = 2


def normalize_crypto_id(symbol: str) -> str:
    """Normalize a CoinGecko/crypto ID (lowercase, trimmed)."""
    return symbol.strip().lower()


def to_float(x: object) -> float | None:
    """Coerce an optional numeric API field to float; preserve None."""
    if x is None:
        return None
    return float(x)
