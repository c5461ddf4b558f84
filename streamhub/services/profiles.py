# streamhub/services/profiles.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.errors import InvariantViolation, LimitExceededError, NotFoundError, ValidationError
from streamhub.models.user_model import User, UserProfile

logger = logging.getLogger(__name__)

MAX_PROFILES_PER_USER = 5
DEFAULT_PROFILE_NAME = "User Profile"

UPDATABLE_FIELDS = ("name", "avatar", "is_kids", "preferences")


async def _count_profiles(session: AsyncSession, user_id: int) -> int:
    stmt = select(func.count(UserProfile.id)).where(UserProfile.user_id == user_id)
    return (await session.execute(stmt)).scalar_one()


async def create_profile(
    session: AsyncSession,
    user_id: int,
    name: str,
    avatar: Optional[str] = None,
    is_kids: bool = False,
    preferences: Optional[Dict[str, Any]] = None,
) -> UserProfile:
    name = (name or "").strip()
    if not name:
        raise ValidationError("User ID and name are required")

    if not await session.get(User, user_id):
        raise NotFoundError("User not found")

    if await _count_profiles(session, user_id) >= MAX_PROFILES_PER_USER:
        raise LimitExceededError(f"Maximum {MAX_PROFILES_PER_USER} profiles allowed per user")

    profile = UserProfile(
        user_id=user_id,
        name=name,
        avatar=avatar,
        is_kids=bool(is_kids),
        preferences=preferences or {},
    )
    session.add(profile)
    await session.commit()
    await session.refresh(profile)
    return profile


async def get_profile_or_404(session: AsyncSession, profile_id: int) -> UserProfile:
    profile = await session.get(UserProfile, profile_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


async def update_profile(session: AsyncSession, profile_id: int, fields: Dict[str, Any]) -> UserProfile:
    """Applies only the keys present in ``fields``; ``name`` must stay non-empty."""
    name = (fields.get("name") or "").strip()
    if not name:
        raise ValidationError("Name is required")

    profile = await get_profile_or_404(session, profile_id)

    payload = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    payload["name"] = name
    if "preferences" in payload and payload["preferences"] is None:
        payload["preferences"] = {}
    if "is_kids" in payload and payload["is_kids"] is None:
        payload.pop("is_kids")

    for field, value in payload.items():
        setattr(profile, field, value)

    await session.commit()
    await session.refresh(profile)
    return profile


async def delete_profile(session: AsyncSession, profile_id: int) -> None:
    profile = await get_profile_or_404(session, profile_id)

    if await _count_profiles(session, profile.user_id) <= 1:
        raise InvariantViolation("Cannot delete the last profile")

    await session.delete(profile)
    await session.commit()
    logger.info("Deleted profile %s of user %s", profile_id, profile.user_id)


async def list_profiles(session: AsyncSession, user_id: int) -> List[UserProfile]:
    stmt = (
        select(UserProfile)
        .where(UserProfile.user_id == user_id)
        .order_by(UserProfile.created_at.asc(), UserProfile.id.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
