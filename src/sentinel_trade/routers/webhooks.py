"""Webhook registration and delivery routes."""
from fastapi import APIRouter, HTTPException

from sentinel_trade.deps import WebhookDispatcherDep, WebhookRegistryDep
from sentinel_trade.schemas import (NotificationRequest, WebhookRegistration,
                                    WebhookRequest, WebhookTestResult)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/test", response_model=WebhookTestResult)
async def test_webhook(
    body: WebhookRequest, dispatcher: WebhookDispatcherDep
) -> WebhookTestResult:
    """Send a test event to a URL without registering it."""
    return await dispatcher.test_webhook(str(body.url))


@router.put("/{user_id}", response_model=WebhookRegistration)
async def set_webhook(
    user_id: int, body: WebhookRequest, registry: WebhookRegistryDep
) -> WebhookRegistration:
    url = str(body.url)
    await registry.set_webhook(user_id, url)
    return WebhookRegistration(user_id=user_id, url=url)


@router.get("/{user_id}", response_model=WebhookRegistration)
async def get_webhook(user_id: int, registry: WebhookRegistryDep) -> WebhookRegistration:
    url = await registry.get_webhook(user_id)
    if url is None:
        raise HTTPException(status_code=404, detail=f"No webhook for user {user_id}")
    return WebhookRegistration(user_id=user_id, url=url)


@router.delete("/{user_id}")
async def remove_webhook(user_id: int, registry: WebhookRegistryDep) -> dict[str, str]:
    await registry.remove_webhook(user_id)
    return {"status": "removed"}


@router.post("/{user_id}/notify")
async def notify(
    user_id: int, body: NotificationRequest, dispatcher: WebhookDispatcherDep
) -> dict[str, bool]:
    """Deliver an event to the user's webhook. delivered=False if none is registered."""
    delivered = await dispatcher.send_notification(user_id, body.event, body.data)
    return {"delivered": delivered}
