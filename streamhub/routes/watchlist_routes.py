from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.database import get_async_session
from streamhub.deps.auth import ensure_self_or_admin, get_current_user
from streamhub.errors import ValidationError
from streamhub.models.user_model import User
from streamhub.schemas.base import MessageResponse
from streamhub.schemas.watchlist_schemas import (
    WatchlistAddResponse,
    WatchlistCreate,
    WatchlistResponse,
)
from streamhub.services import watchlist as watchlist_service

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


@router.get("", response_model=WatchlistResponse)
async def get_watchlist(
    user_id: int | None = Query(None, alias="userId"),
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    if user_id is None:
        raise ValidationError("User ID is required")
    ensure_self_or_admin(caller, user_id)
    return {"watchlist": await watchlist_service.list_items(session, user_id)}


@router.post("", response_model=WatchlistAddResponse)
async def add_to_watchlist(
    payload: WatchlistCreate,
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    ensure_self_or_admin(caller, payload.user_id)
    item = await watchlist_service.add_item(session, payload.user_id, payload.video_id)
    return {"watchlist_item": item, "message": "Added to watchlist successfully"}


@router.delete("", response_model=MessageResponse)
async def remove_from_watchlist(
    user_id: int | None = Query(None, alias="userId"),
    video_id: int | None = Query(None, alias="videoId"),
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    if user_id is None or video_id is None:
        raise ValidationError("User ID and Video ID are required")
    ensure_self_or_admin(caller, user_id)
    await watchlist_service.remove_item(session, user_id, video_id)
    return {"message": "Removed from watchlist successfully"}
