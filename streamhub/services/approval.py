# streamhub/services/approval.py
"""
Content approval workflow.

A video starts pending (``is_public=False, approved_at=None``). Approval
publishes it; rejection removes the row and its media. Both outcomes are
reported to the owning creator.
"""
import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.email_service import notify_creator
from streamhub.errors import NotFoundError, ValidationError
from streamhub.models.video_model import Review, Video, WatchHistory
from streamhub.models.watchlist_model import WatchlistItem
from streamhub.schemas.video_schemas import VideoCreate
from streamhub.storage import delete_upload
from streamhub.utils.clock import utcnow

logger = logging.getLogger(__name__)


async def _get_video_or_404(session: AsyncSession, video_id: int) -> Video:
    result = await session.execute(select(Video).where(Video.id == video_id))
    video = result.scalars().first()
    if not video:
        raise NotFoundError("Video not found")
    return video


async def _notify(video: Video, decision: str) -> None:
    creator = video.creator
    try:
        await run_in_threadpool(
            notify_creator,
            creator.email if creator else None,
            video.created_by,
            video.title,
            decision,
        )
    except Exception as e:
        logger.warning("Failed to notify creator %s: %s", video.created_by, e)


def missing_fields(metadata: VideoCreate, **media) -> list:
    """Names of required values that are absent or blank, in form order."""
    required = {
        "title": metadata.title,
        "description": metadata.description,
        "category": metadata.category,
        "language": metadata.language,
        **media,
    }
    return [k for k, v in required.items() if not v or (isinstance(v, str) and not v.strip())]


async def submit(
    session: AsyncSession,
    creator_id: int,
    metadata: VideoCreate,
    video_url: str,
    thumbnail_url: str,
) -> Video:
    missing = missing_fields(metadata, video=video_url, thumbnail=thumbnail_url)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    video = Video(
        title=metadata.title.strip(),
        description=metadata.description.strip(),
        thumbnail=thumbnail_url,
        video_url=video_url,
        duration=metadata.duration,
        category=metadata.category,
        language=metadata.language,
        release_year=metadata.release_year,
        age_rating=metadata.age_rating,
        is_premium=metadata.is_premium,
        tags=(metadata.tags or "").strip() or None,
        created_by=creator_id,
        is_public=False,
        approved_at=None,
    )
    session.add(video)
    await session.commit()
    await session.refresh(video)
    logger.info("New video uploaded for approval: %s by creator %s", video.id, creator_id)
    return video


async def approve(session: AsyncSession, video_id: int) -> Video:
    # re-approving simply refreshes approved_at
    video = await _get_video_or_404(session, video_id)
    video.is_public = True
    video.approved_at = utcnow()
    await session.commit()
    await session.refresh(video)
    logger.info("Video %s approved and published", video.id)

    await _notify(video, "approved")
    return video


async def reject(session: AsyncSession, video_id: int) -> None:
    video = await _get_video_or_404(session, video_id)

    # clear dependants explicitly; SQLite does not enforce ON DELETE CASCADE
    for model in (WatchlistItem, WatchHistory, Review):
        await session.execute(delete(model).where(model.video_id == video.id))
    await session.delete(video)
    await session.commit()
    logger.info(
        "Video %s (%r, creator %s) rejected and deleted",
        video.id, video.title, video.created_by,
    )

    for url in (video.video_url, video.thumbnail):
        try:
            delete_upload(url)
        except Exception as e:
            logger.warning("Failed to delete media %s: %s", url, e)

    await _notify(video, "rejected")
