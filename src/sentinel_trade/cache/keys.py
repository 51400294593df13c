"""Logical key scheme shared by every cache backend."""
import hashlib
import json
from typing import Any

ALERT_PREFIX = "alert:"


def alert_key(user_id: int, symbol: str) -> str:
    return f"alert:{user_id}:{symbol}"


def alert_user_prefix(user_id: int) -> str:
    return f"alert:{user_id}:"


def parse_alert_key(key: str) -> tuple[int, str] | None:
    """Split 'alert:{user_id}:{symbol}' into (user_id, symbol); None if malformed."""
    parts = key.split(":", 2)
    if len(parts) != 3 or parts[0] != "alert":
        return None
    try:
        return int(parts[1]), parts[2]
    except ValueError:
        return None


def price_key(symbol: str) -> str:
    return f"price:{symbol}"


def portfolio_key(user_id: int) -> str:
    return f"portfolio:{user_id}"


def webhook_key(user_id: int) -> str:
    return f"webhook:{user_id}"


def params_hash(params: dict[str, Any] | None) -> str:
    """Stable short hash of call parameters (key order independent)."""
    raw = json.dumps(params or {}, sort_keys=True, default=str)
    return hashlib.md5(raw.encode("utf-8")).hexdigest()[:16]


def memo_key(feature: str, discriminator: str | int, params: dict[str, Any] | None = None) -> str:
    """Namespaced key for a memoized external call: {feature}:{discriminator}:{hash}."""
    return f"{feature}:{discriminator}:{params_hash(params)}"
