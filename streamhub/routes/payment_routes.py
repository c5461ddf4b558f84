from fastapi import APIRouter, Request

from streamhub.config import PAYMENT_RATE_LIMIT
from streamhub.errors import UpstreamError
from streamhub.limiter import limiter
from streamhub.schemas.payment_schemas import PaymentRequest, PaymentResponse
from streamhub.services import payments as payment_service

router = APIRouter(prefix="/payment", tags=["payment"])


@router.post("", response_model=PaymentResponse)
@limiter.limit(PAYMENT_RATE_LIMIT)
async def create_payment(request: Request, payload: PaymentRequest):
    result = await payment_service.process_payment(
        payload.amount,
        payload.method,
        payload.customer_info.model_dump(),
        payload.currency,
    )
    if not result.success:
        raise UpstreamError(
            "Payment failed",
            status_code=400,
            payload={
                "paymentId": result.payment_id,
                "message": "Your payment could not be processed. Please try again.",
            },
        )

    return {
        "success": True,
        "payment_id": result.payment_id,
        "amount": result.amount,
        "currency": result.currency,
        "method": result.method,
        "status": result.status,
        "transaction_id": result.transaction_id,
        "message": "Payment successful!",
        "timestamp": result.timestamp,
        "details": result.details,
    }
