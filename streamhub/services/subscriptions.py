# streamhub/services/subscriptions.py
"""
Subscription lifecycle.

A grant is created active and either lapses when ``end_date`` passes (checked
lazily on read) or is cancelled, which clears ``is_active`` but leaves
``end_date`` untouched so the caller can report when access ends.

``purchase`` does not deactivate earlier grants, so several rows may be
active at once; readers pick the most recently created one.
"""
import logging
from datetime import datetime, timedelta
from typing import List, NamedTuple, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.errors import NotFoundError
from streamhub.models.subscription_model import Subscription, SubscriptionPlan
from streamhub.models.user_model import User
from streamhub.utils.clock import ensure_aware, utcnow

logger = logging.getLogger(__name__)

CURRENCY = "INR"
RECENT_SUBSCRIPTIONS = 10


class PlanDetails(NamedTuple):
    price: int
    duration_days: int


PLAN_DETAILS = {
    SubscriptionPlan.MONTHLY: PlanDetails(price=299, duration_days=30),
    SubscriptionPlan.YEARLY: PlanDetails(price=2990, duration_days=365),
    # "forever", modelled as a 100-year horizon
    SubscriptionPlan.LIFETIME: PlanDetails(price=9990, duration_days=36500),
}


def is_currently_active(sub: Subscription, now: Optional[datetime] = None) -> bool:
    now = now or utcnow()
    return bool(sub.is_active) and ensure_aware(sub.end_date) > now


async def purchase(
    session: AsyncSession,
    user_id: int,
    plan: SubscriptionPlan,
    payment_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Subscription:
    user = await session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")

    details = PLAN_DETAILS[plan]
    start_date = now or utcnow()
    end_date = start_date + timedelta(days=details.duration_days)

    subscription = Subscription(
        user_id=user_id,
        plan=plan,
        price=details.price,
        currency=CURRENCY,
        start_date=start_date,
        end_date=end_date,
        is_active=True,
        payment_id=payment_id,
    )
    session.add(subscription)
    await session.flush()

    # same transaction as the insert
    user.subscription_id = subscription.id
    user.subscription_end = end_date
    await session.commit()
    await session.refresh(subscription)

    logger.info("User %s purchased %s (subscription %s)", user_id, plan.value, subscription.id)
    return subscription


async def list_recent(session: AsyncSession, user_id: int, limit: int = RECENT_SUBSCRIPTIONS) -> List[Subscription]:
    stmt = (
        select(Subscription)
        .where(Subscription.user_id == user_id)
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        .limit(limit)
    )
    return list((await session.execute(stmt)).scalars().all())


async def get_status(
    session: AsyncSession,
    user_id: int,
    now: Optional[datetime] = None,
) -> Tuple[List[Subscription], Optional[Subscription]]:
    subscriptions = await list_recent(session, user_id)
    active = next((s for s in subscriptions if is_currently_active(s, now)), None)
    return subscriptions, active


async def get_active(session: AsyncSession, user_id: int, now: Optional[datetime] = None) -> Optional[Subscription]:
    _, active = await get_status(session, user_id, now)
    return active


async def cancel(session: AsyncSession, user_id: int, now: Optional[datetime] = None) -> datetime:
    """Deactivates the newest active grant and returns its unchanged ``end_date``."""
    now = now or utcnow()
    stmt = (
        select(Subscription)
        .where(
            Subscription.user_id == user_id,
            Subscription.is_active.is_(True),
            Subscription.end_date > now,
        )
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        .limit(1)
    )
    subscription = (await session.execute(stmt)).scalars().first()
    if not subscription:
        raise NotFoundError("No active subscription found")

    subscription.is_active = False
    await session.commit()

    logger.info("User %s cancelled subscription %s", user_id, subscription.id)
    return ensure_aware(subscription.end_date)
