from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.database import get_async_session
from streamhub.deps.auth import ensure_self_or_admin, get_current_user
from streamhub.models.user_model import User
from streamhub.schemas.video_schemas import VideoDetail, VideoFeed, WatchEventCreate, WatchEventOut
from streamhub.services import videos as video_service

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get("", response_model=VideoFeed)
async def list_videos(
    category: str | None = Query(None),
    language: str | None = Query(None),
    search: str | None = Query(None),
    trending: bool = Query(False),
    limit: int = Query(video_service.DEFAULT_PAGE_SIZE, ge=1, le=video_service.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_async_session),
):
    videos, has_more = await video_service.list_public(
        session,
        category=category,
        language=language,
        search=search,
        trending=trending,
        limit=limit,
        offset=offset,
    )
    return {"videos": videos, "total": len(videos), "has_more": has_more}


@router.get("/{video_id}", response_model=VideoDetail)
async def get_video(video_id: int, session: AsyncSession = Depends(get_async_session)):
    return await video_service.get_public_video(session, video_id)


@router.post("/{video_id}/watch", response_model=WatchEventOut, status_code=201)
async def record_watch(
    video_id: int,
    payload: WatchEventCreate,
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    ensure_self_or_admin(caller, payload.user_id)
    return await video_service.record_watch(session, video_id, payload.user_id, payload.watch_time)
