# streamhub/services/otp.py
import hashlib
import logging
import secrets
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.config import OTP_EXPIRY_MINUTES
from streamhub.errors import ValidationError
from streamhub.models.otp_model import OtpCode
from streamhub.utils.clock import utcnow
from streamhub.utils.sms import send_sms

logger = logging.getLogger(__name__)


def generate_otp() -> str:
    return str(100000 + secrets.randbelow(900000))


def hash_otp(otp: str) -> str:
    return hashlib.sha256(otp.strip().encode()).hexdigest()


async def issue_otp(session: AsyncSession, phone: str) -> str:
    otp = generate_otp()
    session.add(OtpCode(
        phone=phone,
        otp_hash=hash_otp(otp),
        expires_at=utcnow() + timedelta(minutes=OTP_EXPIRY_MINUTES),
    ))
    await session.flush()

    await send_sms(phone, f"{otp} is your verification code. It expires in {OTP_EXPIRY_MINUTES} minutes.")
    await session.commit()
    return otp


async def _latest_live(session: AsyncSession, phone: str):
    result = await session.execute(
        select(OtpCode)
        .where(
            OtpCode.phone == phone,
            OtpCode.is_used.is_(False),
            OtpCode.expires_at > utcnow(),
        )
        .order_by(OtpCode.created_at.desc(), OtpCode.id.desc())
        .limit(1)
    )
    return result.scalars().first()


async def has_live_otp(session: AsyncSession, phone: str) -> bool:
    return await _latest_live(session, phone) is not None


async def verify_otp(session: AsyncSession, phone: str, otp: str) -> None:
    """Marks the newest live OTP for ``phone`` as used; the caller commits."""
    code = await _latest_live(session, phone)
    if not code:
        raise ValidationError("No valid OTP found. Please request a new OTP.")

    if not secrets.compare_digest(code.otp_hash, hash_otp(otp)):
        raise ValidationError("Invalid OTP. Please check and try again.")

    code.is_used = True
    code.used_at = utcnow()
