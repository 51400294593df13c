"""Cache layer: Redis adapter, in-memory fallback and the resilient facade."""
from sentinel_trade.cache.fallback import FallbackStore
from sentinel_trade.cache.memoize import MemoizedCall
from sentinel_trade.cache.remote import RedisStore
from sentinel_trade.cache.resilient import ResilientCache
from sentinel_trade.cache.state import BackendAvailability, BackendState

__all__ = [
    "BackendAvailability",
    "BackendState",
    "FallbackStore",
    "MemoizedCall",
    "RedisStore",
    "ResilientCache",
]
