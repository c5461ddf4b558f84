# streamhub/services/users.py
import logging
from typing import Optional

from passlib.hash import bcrypt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.errors import (
    AuthenticationError,
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from streamhub.models.user_model import User, UserProfile, UserRole, UserStatus
from streamhub.services import otp as otp_service
from streamhub.services.profiles import DEFAULT_PROFILE_NAME

logger = logging.getLogger(__name__)


async def get_user_or_404(session: AsyncSession, user_id: int) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _ensure_can_login(user: User) -> None:
    if user.status != UserStatus.ACTIVE.value:
        raise PermissionDeniedError(f"Account is {user.status}")


async def login_with_email(session: AsyncSession, email: str, password: Optional[str]) -> User:
    email_norm = email.strip().lower()
    result = await session.execute(select(User).where(func.lower(User.email) == email_norm))
    user = result.scalars().first()
    if not user:
        raise NotFoundError("User not found")

    # accounts provisioned without a password (phone sign-ups that later added
    # an e-mail) fall through to the placeholder check
    if user.password:
        if not password or not bcrypt.verify(password, user.password):
            raise AuthenticationError("Invalid credentials")

    _ensure_can_login(user)
    return user


async def login_with_phone(session: AsyncSession, phone: str, otp: Optional[str]) -> tuple[User, bool]:
    """
    Returns ``(user, created)``. An OTP is checked whenever one was supplied
    or a live one is outstanding for the phone.

    Unknown phone numbers are provisioned on the spot with a single default
    profile; a repeat login returns the same row.
    """
    phone = phone.strip()
    if otp:
        await otp_service.verify_otp(session, phone, otp)
    elif await otp_service.has_live_otp(session, phone):
        raise ValidationError("OTP is required for phone login")

    result = await session.execute(select(User).where(User.phone == phone))
    user = result.scalars().first()
    if user:
        await session.commit()  # persist OTP consumption
        _ensure_can_login(user)
        return user, False

    user = User(phone=phone, is_verified=bool(otp), role=UserRole.USER.value)
    user.profiles.append(UserProfile(name=DEFAULT_PROFILE_NAME))
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Provisioned user %s from phone login", user.id)
    return user, True


async def signup(session: AsyncSession, email: str, password: str, name: Optional[str] = None) -> User:
    email_norm = email.strip().lower()
    existing = await session.execute(select(User.id).where(func.lower(User.email) == email_norm))
    if existing.first():
        raise DuplicateError("Email already exists")

    user = User(
        email=email_norm,
        password=bcrypt.hash(password),
        name=(name or "").strip() or None,
        role=UserRole.USER.value,
    )
    user.profiles.append(UserProfile(name=(name or "").strip() or DEFAULT_PROFILE_NAME))
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Registered user %s via e-mail signup", user.id)
    return user


async def set_status(session: AsyncSession, user_id: int, status: str) -> User:
    try:
        new_status = UserStatus(status)
    except ValueError:
        raise ValidationError("Invalid user status")

    user = await get_user_or_404(session, user_id)
    user.status = new_status.value
    await session.commit()
    await session.refresh(user)
    logger.info("User %s status set to %s", user.id, user.status)
    return user
