"""DI container and service lifecycle. Build with Container(settings=...)."""
import logging

from dependency_injector import containers, providers

from sentinel_trade.cache import (BackendAvailability, FallbackStore,
                                  MemoizedCall, RedisStore, ResilientCache)
from sentinel_trade.config import Settings
from sentinel_trade.providers import CoinGeckoPriceProvider
from sentinel_trade.registry import (AlertRegistry, PortfolioStore,
                                     WebhookRegistry)
from sentinel_trade.services import (AlertMatcher, PricePoller, PriceService,
                                     WebhookDispatcher)
from sentinel_trade.services.alert_forwarder import PriceAlertForwarder

logger = logging.getLogger(__name__)


def _remote_store(settings: Settings) -> RedisStore | None:
    """Redis adapter, or None (in-memory only) when REDIS_URL is empty."""
    if not settings.redis_url:
        return None
    return RedisStore.from_url(settings.redis_url, settings.redis_connect_timeout)


class Container(containers.DeclarativeContainer):
    settings = providers.Dependency(instance_of=Settings)

    remote_store = providers.Singleton(_remote_store, settings)
    fallback_store = providers.Singleton(FallbackStore)
    availability = providers.Singleton(
        BackendAvailability, reprobe_seconds=settings.provided.cache_reprobe_seconds
    )
    cache = providers.Singleton(
        ResilientCache,
        remote=remote_store,
        fallback=fallback_store,
        availability=availability,
    )
    memo = providers.Singleton(MemoizedCall, cache)

    alert_registry = providers.Singleton(AlertRegistry, cache)
    portfolio_store = providers.Singleton(PortfolioStore, cache)
    webhook_registry = providers.Singleton(WebhookRegistry, cache)

    price_provider = providers.Singleton(
        CoinGeckoPriceProvider, api_key=settings.provided.coingecko_api_key
    )
    alert_matcher = providers.Singleton(
        AlertMatcher,
        alert_registry,
        cache,
        price_ttl=settings.provided.price_cache_ttl,
    )
    price_poller = providers.Singleton(
        PricePoller,
        price_provider,
        alert_matcher,
        interval=settings.provided.poll_interval_seconds,
    )
    webhook_dispatcher = providers.Singleton(
        WebhookDispatcher,
        webhook_registry,
        max_retries=settings.provided.webhook_max_retries,
        retry_delay=settings.provided.webhook_retry_delay_seconds,
        timeout=settings.provided.webhook_timeout_seconds,
    )
    alert_forwarder = providers.Singleton(PriceAlertForwarder, webhook_dispatcher)
    price_service = providers.Singleton(
        PriceService,
        price_provider,
        cache,
        memo,
        price_ttl=settings.provided.price_cache_ttl,
    )


async def startup(container: Container) -> None:
    """Connect the cache, hook webhook delivery to alert triggers, start polling."""
    settings: Settings = container.settings()
    await container.cache().connect()
    container.alert_matcher().add_trigger_listener(container.alert_forwarder())
    await container.price_poller().start_monitoring(settings.monitored_symbols)


async def shutdown(container: Container) -> None:
    """Stop polling, finish pending deliveries and close clients."""
    await container.price_poller().stop_monitoring()
    await container.alert_forwarder().drain()
    for closeable in (container.webhook_dispatcher(), container.price_provider()):
        try:
            await closeable.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing %s: %s", type(closeable).__name__, exc)
    await container.cache().close()
