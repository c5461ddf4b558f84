from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.database import get_async_session
from streamhub.deps.auth import require_admin
from streamhub.schemas.base import MessageResponse
from streamhub.schemas.user_schemas import UserStatusResponse, UserStatusUpdate
from streamhub.schemas.video_schemas import ApproveResponse, PendingQueue
from streamhub.services import approval
from streamhub.services import users as user_service
from streamhub.services import videos as video_service

# every route here is admin-only
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/videos/pending", response_model=PendingQueue)
async def pending_videos(session: AsyncSession = Depends(get_async_session)):
    return {"videos": await video_service.list_pending(session)}


@router.post("/videos/{video_id}/approve", response_model=ApproveResponse)
async def approve_video(video_id: int, session: AsyncSession = Depends(get_async_session)):
    video = await approval.approve(session, video_id)
    return {"video": video, "message": "Video approved successfully"}


@router.post("/videos/{video_id}/reject", response_model=MessageResponse)
async def reject_video(video_id: int, session: AsyncSession = Depends(get_async_session)):
    await approval.reject(session, video_id)
    return {"message": "Video rejected successfully"}


@router.put("/users/{user_id}/status", response_model=UserStatusResponse)
async def update_user_status(
    user_id: int,
    payload: UserStatusUpdate,
    session: AsyncSession = Depends(get_async_session),
):
    user = await user_service.set_status(session, user_id, payload.status)
    return {"user": user, "message": f"User {payload.status} successfully"}
