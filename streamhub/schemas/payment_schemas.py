from typing import Any, Dict, Literal

from pydantic import Field

from streamhub.schemas.base import CamelModel, RequestModel, UtcDatetime

PaymentMethod = Literal["card", "upi", "netbanking", "wallet"]


class CustomerInfo(RequestModel):
    name: str
    email: str
    phone: str


class PaymentRequest(RequestModel):
    amount: float = Field(gt=0)
    currency: str = "INR"
    method: PaymentMethod
    user_id: int
    plan: str
    customer_info: CustomerInfo


class PaymentResponse(CamelModel):
    success: bool
    payment_id: str
    amount: float
    currency: str
    method: PaymentMethod
    status: str
    transaction_id: str
    message: str
    timestamp: UtcDatetime
    details: Dict[str, Any]
