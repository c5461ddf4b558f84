from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.database import get_async_session
from streamhub.deps.auth import ensure_self_or_admin, get_current_user
from streamhub.errors import ValidationError
from streamhub.models.user_model import User
from streamhub.schemas.base import MessageResponse
from streamhub.schemas.profile_schemas import (
    ProfileCreate,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpdate,
)
from streamhub.services import profiles as profile_service

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("", response_model=ProfileListResponse)
async def list_profiles(
    user_id: int | None = Query(None, alias="userId"),
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    if user_id is None:
        raise ValidationError("User ID is required")
    ensure_self_or_admin(caller, user_id)
    profiles = await profile_service.list_profiles(session, user_id)
    return {"profiles": profiles}


@router.post("", response_model=ProfileResponse)
async def create_profile(
    payload: ProfileCreate,
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    ensure_self_or_admin(caller, payload.user_id)
    profile = await profile_service.create_profile(
        session,
        payload.user_id,
        payload.name,
        avatar=payload.avatar,
        is_kids=payload.is_kids,
        preferences=payload.preferences,
    )
    return {"profile": profile, "message": "Profile created successfully"}


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: int,
    payload: ProfileUpdate,
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    owner_id = (await profile_service.get_profile_or_404(session, profile_id)).user_id
    ensure_self_or_admin(caller, owner_id)

    fields = payload.model_dump(exclude_unset=True)
    profile = await profile_service.update_profile(session, profile_id, fields)
    return {"profile": profile, "message": "Profile updated successfully"}


@router.delete("/{profile_id}", response_model=MessageResponse)
async def delete_profile(
    profile_id: int,
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    owner_id = (await profile_service.get_profile_or_404(session, profile_id)).user_id
    ensure_self_or_admin(caller, owner_id)

    await profile_service.delete_profile(session, profile_id)
    return {"message": "Profile deleted successfully"}
