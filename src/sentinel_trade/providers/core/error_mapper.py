"""Map price provider exceptions to HTTP responses."""
import asyncio
from dataclasses import dataclass

import httpx
from fastapi import HTTPException

# Exceptions from providers we map to HTTP; all others propagate (e.g. bugs).
PROVIDER_EXCEPTIONS: tuple[type[Exception], ...] = (
    ValueError,
    KeyError,
    TypeError,
    TimeoutError,
    asyncio.TimeoutError,
    NotImplementedError,
    httpx.HTTPError,
)


@dataclass(frozen=True)
class ProviderErrorMapper:
    """Maps provider/backend exceptions to HTTP (status_code, detail).

    Used by the price routes so an on-demand lookup failure reaches the front
    end as a user-presentable error instead of a 500 with a traceback.
    """

    resource_name: str = "Price"
    api_name: str = "Price API"

    def to_http(
        self,
        exc: Exception,
        symbol: str | None = None,
    ) -> tuple[int, str]:
        """Map a provider exception to (status_code, detail).

        Args:
            exc: The exception raised by the provider or service.
            symbol: Optional symbol to include in detail (e.g. "polkadot").
        """
        not_found = (
            f"{self.resource_name} not found"
            if symbol is None
            else f"{self.resource_name} '{symbol}' not found"
        )
        if isinstance(exc, NotImplementedError):
            return (501, str(exc) or "Not supported")
        if isinstance(exc, ValueError):
            detail = str(exc) or not_found
            if symbol is not None and "not found" in detail.lower():
                detail = not_found
            return (404, detail)
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            if status == 404:
                return (404, not_found)
            if status == 429:
                return (503, f"{self.api_name} rate limit reached, try again later")
            if status >= 500:
                return (502, f"{self.api_name} error")
            return (status, f"{self.api_name} error")
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
            detail = "Request timed out"
            if symbol is not None:
                detail = f"Request to {self.api_name} timed out for '{symbol}'"
            return (504, detail)
        if isinstance(exc, httpx.HTTPError):
            return (502, f"{self.api_name} unreachable")
        if isinstance(exc, (KeyError, TypeError)):
            return (404, not_found)
        return (500, "Internal server error")

    def raise_http(
        self,
        exc: Exception,
        symbol: str | None = None,
    ) -> None:
        """Map provider exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc, symbol=symbol)
        raise HTTPException(status_code=status_code, detail=detail) from exc
