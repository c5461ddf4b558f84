import io
import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.database import get_async_session
from streamhub.deps.auth import require_creator
from streamhub.errors import InternalError, ValidationError
from streamhub.models.user_model import User
from streamhub.schemas.video_schemas import UploadResponse, VideoCreate
from streamhub.services import approval
from streamhub.storage import delete_upload, save_upload
from streamhub.utils.media import check_thumbnail, check_video

router = APIRouter(prefix="/creator", tags=["creator"])

logger = logging.getLogger(__name__)


def _discard(urls) -> None:
    for url in urls:
        try:
            delete_upload(url)
        except Exception as e:
            logger.warning("Failed to clean up %s: %s", url, e)


@router.post("/upload", response_model=UploadResponse)
async def upload_video(
    metadata: VideoCreate = Depends(VideoCreate.as_form),
    video: UploadFile = File(...),
    thumbnail: UploadFile = File(...),
    creator: User = Depends(require_creator),
    session: AsyncSession = Depends(get_async_session),
):
    missing = approval.missing_fields(metadata)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    check_video(video.content_type)
    thumb_bytes = await thumbnail.read()
    check_thumbnail(thumb_bytes, thumbnail.content_type)

    saved = []
    try:
        saved.append(save_upload(
            video.file, video.filename or "video.mp4", video.content_type, prefix="video"
        ))
        saved.append(save_upload(
            io.BytesIO(thumb_bytes),
            thumbnail.filename or "thumbnail.png",
            thumbnail.content_type,
            prefix="thumbnail",
        ))
    except (OSError, BotoCoreError, ClientError) as e:
        logger.error("File save error: %r", e)
        _discard(saved)
        raise InternalError("Failed to save files")
    video_url, thumbnail_url = saved

    try:
        row = await approval.submit(session, creator.id, metadata, video_url, thumbnail_url)
    except Exception:
        # nothing references the stored media once the insert fails
        _discard(saved)
        raise

    return {
        "video": {"id": row.id, "title": row.title, "status": "processing"},
        "message": "Video uploaded successfully! It will be available after admin approval.",
    }
