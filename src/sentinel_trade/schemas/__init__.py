"""Pydantic schemas for API and runtime use. Serialized into the cache as JSON."""
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, HttpUrl


class AlertDirection(str, Enum):
    """Which side of the target price triggers an alert."""

    ABOVE = "above"
    BELOW = "below"


class PriceAlert(BaseModel):
    """A user's request to be notified when a symbol crosses a price."""

    user_id: int
    symbol: str
    target_price: float
    direction: AlertDirection

    def is_triggered(self, price: float) -> bool:
        """Inclusive threshold check: an alert at exactly the target fires."""
        if self.direction is AlertDirection.ABOVE:
            return price >= self.target_price
        return price <= self.target_price


class PriceSnapshot(BaseModel):
    """Point-in-time price data for a symbol (cached, not authoritative)."""

    symbol: str
    price: float
    change_24h: float | None = None
    volume_24h: float | None = None
    market_cap: float | None = None


class PricePoint(BaseModel):
    """A single (timestamp, price) point of a price history."""

    timestamp: datetime
    price: float


class TopGainer(BaseModel):
    """One row of the top-gainers listing."""

    symbol: str
    name: str
    price: float
    change_24h: float | None = None


class Portfolio(BaseModel):
    """User holdings keyed by symbol; replaced wholesale on every write."""

    user_id: int
    holdings: dict[str, float] = Field(default_factory=dict)


class WebhookRegistration(BaseModel):
    """The single webhook URL registered for a user."""

    user_id: int
    url: str


class WebhookPayload(BaseModel):
    """JSON body POSTed to a user's webhook."""

    event: str
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    data: dict = Field(default_factory=dict)


class DeliveryState(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"


class DeliveryResult(BaseModel):
    """Outcome of one webhook delivery (all attempts)."""

    url: str
    state: DeliveryState = DeliveryState.PENDING
    attempts: int = 0
    status_code: int | None = None
    error: str | None = None

    @property
    def delivered(self) -> bool:
        return self.state is DeliveryState.DELIVERED


class WebhookTestResult(BaseModel):
    success: bool
    message: str


# Request bodies


class AlertRequest(BaseModel):
    """Body for creating or replacing an alert."""

    symbol: str = Field(min_length=1)
    target_price: float = Field(gt=0)
    direction: AlertDirection


class PortfolioRequest(BaseModel):
    holdings: dict[str, float]


class WebhookRequest(BaseModel):
    url: HttpUrl


class NotificationRequest(BaseModel):
    event: str = Field(min_length=1)
    data: dict = Field(default_factory=dict)


class MonitorRequest(BaseModel):
    symbols: list[str] = Field(min_length=1)


__all__ = [
    "AlertDirection",
    "AlertRequest",
    "DeliveryResult",
    "DeliveryState",
    "MonitorRequest",
    "NotificationRequest",
    "Portfolio",
    "PortfolioRequest",
    "PriceAlert",
    "PricePoint",
    "PriceSnapshot",
    "TopGainer",
    "WebhookPayload",
    "WebhookRegistration",
    "WebhookRequest",
    "WebhookTestResult",
]
