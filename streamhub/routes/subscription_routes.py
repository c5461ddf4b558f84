from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.database import get_async_session
from streamhub.deps.auth import ensure_self_or_admin, get_current_user
from streamhub.errors import ValidationError
from streamhub.models.user_model import User
from streamhub.schemas.subscription_schemas import (
    CancelRequest,
    CancelResponse,
    SubscriptionCreate,
    SubscriptionResponse,
    SubscriptionStatus,
)
from streamhub.services import subscriptions as subscription_service

router = APIRouter(prefix="/subscription", tags=["subscription"])


@router.post("", response_model=SubscriptionResponse)
async def create_subscription(
    payload: SubscriptionCreate,
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    ensure_self_or_admin(caller, payload.user_id)
    subscription = await subscription_service.purchase(
        session, payload.user_id, payload.plan, payload.payment_id
    )
    return {"subscription": subscription, "message": "Subscription created successfully"}


@router.get("", response_model=SubscriptionStatus)
async def get_subscriptions(
    user_id: int | None = Query(None, alias="userId"),
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    if user_id is None:
        raise ValidationError("User ID is required")
    ensure_self_or_admin(caller, user_id)

    subscriptions, active = await subscription_service.get_status(session, user_id)
    return {
        "subscriptions": subscriptions,
        "active_subscription": active,
        "has_active_subscription": active is not None,
    }


@router.post("/cancel", response_model=CancelResponse)
async def cancel_subscription(
    payload: CancelRequest,
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    ensure_self_or_admin(caller, payload.user_id)
    end_date = await subscription_service.cancel(session, payload.user_id)
    return {
        "message": "Subscription cancelled successfully",
        "will_continue_until": end_date,
    }
