"""Runtime settings loaded from environment variables."""
import os

from pydantic import BaseModel, Field, field_validator


def _split_symbols(raw: str) -> list[str]:
    return [s.strip() for s in raw.split(",") if s.strip()]


class Settings(BaseModel):
    """Service configuration. Build with load_settings() at the composition root."""

    redis_url: str = "redis://127.0.0.1:6379/0"
    redis_connect_timeout: float = Field(default=1.0, gt=0)
    cache_reprobe_seconds: float = Field(default=30.0, ge=0)

    coingecko_api_key: str | None = None

    poll_interval_seconds: float = Field(default=30.0, gt=0)
    price_cache_ttl: int = Field(default=300, gt=0)
    monitored_symbols: list[str] = Field(default_factory=lambda: ["polkadot"])

    webhook_timeout_seconds: float = Field(default=5.0, gt=0)
    webhook_max_retries: int = Field(default=3, ge=1)
    webhook_retry_delay_seconds: float = Field(default=1.0, ge=0)

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8001

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def load_settings() -> Settings:
    """Read settings from the process environment; unset vars keep defaults.

    Raises:
        pydantic.ValidationError: if a variable holds an invalid value.
    """
    env = {
        "redis_url": os.getenv("REDIS_URL"),
        "redis_connect_timeout": os.getenv("REDIS_CONNECT_TIMEOUT"),
        "cache_reprobe_seconds": os.getenv("CACHE_REPROBE_SECONDS"),
        "coingecko_api_key": os.getenv("COINGECKO_API_KEY"),
        "poll_interval_seconds": os.getenv("POLL_INTERVAL_SECONDS"),
        "price_cache_ttl": os.getenv("PRICE_CACHE_TTL"),
        "webhook_timeout_seconds": os.getenv("WEBHOOK_TIMEOUT_SECONDS"),
        "webhook_max_retries": os.getenv("WEBHOOK_MAX_RETRIES"),
        "webhook_retry_delay_seconds": os.getenv("WEBHOOK_RETRY_DELAY_SECONDS"),
        "log_level": os.getenv("LOG_LEVEL"),
        "host": os.getenv("HOST"),
        "port": os.getenv("PORT"),
    }
    symbols = os.getenv("MONITORED_SYMBOLS")
    values: dict = {k: v for k, v in env.items() if v is not None}
    if symbols is not None:
        values["monitored_symbols"] = _split_symbols(symbols)
    return Settings.model_validate(values)
