"""
Push notification relay endpoint.

An external relay posts every push event here. Price update
events make the service re-read the price feed and return
the fresh snapshot.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from gold_savings.api.deps import get_price_oracle, to_http
from gold_savings.errors import SchemeError
from gold_savings.schemas.price import PriceSnapshot
from gold_savings.services.notification_bridge import PriceUpdateBridge

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class NotificationIn(BaseModel):
    title: str | None = None
    body: str | None = None


class NotificationResult(BaseModel):
    triggered: bool
    prices: PriceSnapshot | None = None


@router.post("", response_model=NotificationResult)
def receive_notification(
    notification: NotificationIn,
    oracle=Depends(get_price_oracle),
):
    fetched: list[PriceSnapshot | None] = []
    bridge = PriceUpdateBridge(
        lambda: fetched.append(oracle.get_current_prices())
    )
    try:
        triggered = bridge.handle(notification.model_dump())
    except SchemeError as e:
        raise to_http(e)

    return NotificationResult(
        triggered=triggered,
        prices=fetched[-1] if fetched else None,
    )
