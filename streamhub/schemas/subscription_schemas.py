from typing import List, Optional

from streamhub.models.subscription_model import SubscriptionPlan
from streamhub.schemas.base import CamelModel, RequestModel, UtcDatetime


class SubscriptionCreate(RequestModel):
    user_id: int
    plan: SubscriptionPlan
    payment_id: Optional[str] = None


class SubscriptionOut(CamelModel):
    id: int
    user_id: int
    plan: SubscriptionPlan
    price: int
    currency: str
    start_date: UtcDatetime
    end_date: UtcDatetime
    is_active: bool
    payment_id: Optional[str] = None
    created_at: UtcDatetime


class SubscriptionResponse(CamelModel):
    subscription: SubscriptionOut
    message: str


class SubscriptionStatus(CamelModel):
    subscriptions: List[SubscriptionOut]
    active_subscription: Optional[SubscriptionOut] = None
    has_active_subscription: bool


class CancelRequest(RequestModel):
    user_id: int


class CancelResponse(CamelModel):
    message: str
    will_continue_until: UtcDatetime
