# streamhub/services/payments.py
"""
Simulated payment gateway.

Each method has a mock responder producing method-specific details; after an
artificial delay the charge succeeds with ``PAYMENT_SUCCESS_RATE``
probability. Nothing here touches subscriptions: the client creates the
subscription after a successful payment.
"""
import asyncio
import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from streamhub.config import PAYMENT_SUCCESS_RATE, PAYMENT_DELAY_SECONDS
from streamhub.errors import ValidationError
from streamhub.utils.clock import utcnow

logger = logging.getLogger(__name__)


@dataclass
class PaymentResult:
    success: bool
    payment_id: str
    amount: float
    currency: str
    method: str
    details: Dict[str, Any] = field(default_factory=dict)
    transaction_id: Optional[str] = None
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def status(self) -> str:
        return "completed" if self.success else "failed"


def _card(amount: float, customer_info: Dict[str, str]) -> Dict[str, Any]:
    return {"last4": "4242", "brand": "Visa"}


def _upi(amount: float, customer_info: Dict[str, str]) -> Dict[str, Any]:
    return {"vpa": f"{customer_info.get('phone', '')}@ybl"}


def _netbanking(amount: float, customer_info: Dict[str, str]) -> Dict[str, Any]:
    return {"bank": "Demo Bank"}


def _wallet(amount: float, customer_info: Dict[str, str]) -> Dict[str, Any]:
    return {"provider": "PayTM"}


RESPONDERS: Dict[str, Callable[[float, Dict[str, str]], Dict[str, Any]]] = {
    "card": _card,
    "upi": _upi,
    "netbanking": _netbanking,
    "wallet": _wallet,
}


def new_payment_id() -> str:
    return f"PAY_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


async def process_payment(
    amount: float,
    method: str,
    customer_info: Dict[str, str],
    currency: str = "INR",
    *,
    rng: Optional[random.Random] = None,
    delay: float = PAYMENT_DELAY_SECONDS,
    success_rate: float = PAYMENT_SUCCESS_RATE,
) -> PaymentResult:
    responder = RESPONDERS.get(method)
    if responder is None:
        raise ValidationError("Invalid payment method")

    payment_id = new_payment_id()
    details = responder(amount, customer_info)

    if delay > 0:
        await asyncio.sleep(delay)

    rng = rng or random
    success = rng.random() < success_rate
    if not success:
        logger.info("Payment %s (%s %.2f via %s) failed", payment_id, currency, amount, method)
        return PaymentResult(False, payment_id, amount, currency, method, details)

    logger.info("Payment %s (%s %.2f via %s) completed", payment_id, currency, amount, method)
    return PaymentResult(
        True,
        payment_id,
        amount,
        currency,
        method,
        details,
        transaction_id=f"TXN_{int(time.time() * 1000)}",
    )
