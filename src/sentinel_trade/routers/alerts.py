"""Price alert routes (per user)."""
from fastapi import APIRouter, HTTPException, Query

from sentinel_trade.deps import AlertRegistryDep
from sentinel_trade.schemas import AlertDirection, AlertRequest, PriceAlert

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.put("/{user_id}", response_model=PriceAlert)
async def set_alert(
    user_id: int,
    body: AlertRequest,
    registry: AlertRegistryDep,
) -> PriceAlert:
    """Create or replace the user's alert for body.symbol (one alert per symbol)."""
    return await registry.set_alert(
        user_id, body.symbol, body.target_price, body.direction
    )


@router.get("/{user_id}", response_model=list[PriceAlert])
async def get_alerts(user_id: int, registry: AlertRegistryDep) -> list[PriceAlert]:
    return await registry.get_alerts(user_id)


@router.delete("/{user_id}/{symbol}")
async def remove_alert(
    user_id: int,
    symbol: str,
    registry: AlertRegistryDep,
    direction: AlertDirection = Query(..., description="Direction of the alert to remove"),
) -> dict[str, str]:
    """Remove an alert. 404 if there is none with that symbol and direction."""
    if not await registry.remove_alert(user_id, symbol, direction):
        raise HTTPException(
            status_code=404,
            detail=f"No {direction.value} alert for '{symbol}'",
        )
    return {"status": "removed"}


@router.delete("/{user_id}")
async def clear_alerts(user_id: int, registry: AlertRegistryDep) -> dict[str, int]:
    removed = await registry.clear_all_alerts(user_id)
    return {"removed": removed}
