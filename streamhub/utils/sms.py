import logging

import httpx

from streamhub.config import SMS_GATEWAY_URL, SMS_GATEWAY_API_KEY
from streamhub.errors import UpstreamError

logger = logging.getLogger(__name__)


async def send_sms(phone: str, message: str) -> None:
    if not SMS_GATEWAY_URL:
        # no gateway configured (local/dev): the message only goes to the log
        logger.info("SMS to %s: %s", phone, message)
        return

    try:
        async with httpx.AsyncClient(timeout=5) as client:
            res = await client.post(
                SMS_GATEWAY_URL,
                headers={"X-API-KEY": SMS_GATEWAY_API_KEY or ""},
                json={"to": phone, "message": message},
            )
        res.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("SMS gateway request failed for %s: %r", phone, e)
        raise UpstreamError("Failed to send OTP", status_code=500)
