"""Main module for the SentinelTrade notification and caching service."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from sentinel_trade.config import load_settings
from sentinel_trade.container import Container, shutdown, startup
from sentinel_trade.routers import (alerts_router, portfolio_router,
                                    prices_router, webhooks_router)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Build the service graph at startup (unless one was injected); tear it down on shutdown."""
    container = getattr(fastapi_app.state, "container", None)
    if container is None:
        container = Container(settings=load_settings())
        fastapi_app.state.container = container

    await startup(container)
    logger.info("SentinelTrade core started")

    yield

    logger.info("Shutting down gracefully...")
    await shutdown(container)


def create_app(container: Container | None = None) -> FastAPI:
    """Create the FastAPI app. Pass a container to override wiring (tests)."""
    fastapi_app = FastAPI(
        title="SentinelTrade",
        description="Price alerts, resilient caching and webhook delivery for the chat bot",
        version="0.1.0",
        lifespan=lifespan,
    )
    if container is not None:
        fastapi_app.state.container = container

    fastapi_app.include_router(alerts_router)
    fastapi_app.include_router(portfolio_router)
    fastapi_app.include_router(webhooks_router)
    fastapi_app.include_router(prices_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status with cache backend and poller state."""
        c: Container = fastapi_app.state.container
        return {
            "status": "ok",
            "cache": c.cache().state.value,
            "monitoring": c.price_poller().running,
        }

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Use for `poetry run start`."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("sentinel_trade.main:app", host=settings.host, port=settings.port)
